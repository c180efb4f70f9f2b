from typing import Optional

import numpy as np

from mandelkernel.fractals.base import RenderSettings, Viewport
from mandelkernel.fractals.mandelbrot import MandelbrotFractal
from mandelkernel.rendering.executor import RenderExecutor


class RenderAPI:
    """
    Checked Python surface over the kernel. Unlike the C entry point, rejected
    requests raise a RenderError subclass (InvalidViewport, NullOutput,
    PixelCountOverflow, BufferTooSmall).
    """
    def __init__(self, executor: Optional[RenderExecutor] = None):
        self.fractal = MandelbrotFractal()
        self.executor = executor or RenderExecutor()
        self.executor.compile(self.fractal, RenderSettings())

    def render(self, center_x: float, center_y: float, zoom: int,
               width: int, height: int, max_iter: int,
               out: Optional[np.ndarray] = None,
               backend: Optional[str] = None,
               workers: Optional[int] = None,
               palette: Optional[str] = None) -> np.ndarray:
        """
        Renders the viewport and returns the pixels.

        Args:
            center_x (float): World x under the image center.
            center_y (float): World y under the image center.
            zoom (int): Pixels per world unit, at least 1.
            width (int): Image width in pixels.
            height (int): Image height in pixels.
            max_iter (int): Iteration cap; negative values are used by magnitude.
            out: Optional uint32 buffer with at least width*height slots. When
                omitted a (height, width) array is allocated.
            backend (str): "THREADED", "CPU" or "NUMPY"; defaults to the config.
            workers (int): Worker count; defaults to the config.
            palette (str): Palette name, e.g. "Fire"; defaults to the config.

        Returns:
            np.ndarray: ``out`` when given, else the new image.
        """
        vp = Viewport(center_x, center_y, zoom, width, height)
        st = RenderSettings(max_iter, palette=palette)
        if out is None:
            return self.executor.render(self.fractal, vp, st, backend=backend, workers=workers)
        return self.executor.render_into(self.fractal, vp, st, out, backend=backend, workers=workers)

    def close(self) -> None:
        self.executor.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
