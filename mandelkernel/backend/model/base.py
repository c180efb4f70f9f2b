from abc import ABC, abstractmethod
from typing import Optional
import numpy as np

from mandelkernel.coloring.colormap import gradient_for
from mandelkernel.fractals.base import Fractal, Viewport, RenderSettings
from mandelkernel.fractals.errors import NullOutput
from mandelkernel.fractals.validate import validate_request


def output_view(out: Optional[np.ndarray], vp: Viewport) -> np.ndarray:
    """
    Validate the request against ``out`` and return a flat view over the
    first width*height slots. Raises a RenderError subclass for rejected
    requests and TypeError/ValueError for unusable arrays.
    """
    if out is None:
        validate_request(vp, None, has_output=False)
        raise NullOutput("No output buffer supplied")
    expected = validate_request(vp, int(out.size))
    if out.dtype != np.uint32:
        raise TypeError(f"Output buffer must be uint32, got {out.dtype}")
    if not out.flags.c_contiguous:
        raise ValueError("Output buffer must be C-contiguous")
    if not out.flags.writeable:
        raise ValueError("Output buffer is read-only")
    return out.reshape(-1)[:expected]


class Backend(ABC):
    """
    A base class for fractal rendering backend.
    """
    name: str

    def __init__(self):
        self._kernel = None
        self._warmed_up = False

        # Warmup configuration
        self._wu_w, self._wu_h = 16, 16
        self._wu_zoom, self._wu_max_iter = 8, 64

    @abstractmethod
    def compile(self,
                fractal: Fractal,
                settings: RenderSettings
                ) -> None:
        ...

    @abstractmethod
    def render_into(self,
                    fractal: Fractal,
                    vp: Viewport,
                    settings: RenderSettings,
                    out: np.ndarray
                    ) -> np.ndarray:
        ...

    def render(self,
               fractal: Fractal,
               vp: Viewport,
               settings: RenderSettings
               ) -> np.ndarray:
        """
        Render into a freshly allocated (height, width) uint32 image.
        """
        validate_request(vp, vp.pixel_count)
        img = np.zeros(vp.shape, dtype=np.uint32)
        self.render_into(fractal, vp, settings, img)
        return img

    def _warmup(self, fractal: Fractal) -> None:
        """
        Used to warm up the backend with a small frame so the first real render
        is not paying for numba compilation.
        """
        if self._warmed_up:
            return
        vp = Viewport(-0.5, 0.0, self._wu_zoom, self._wu_w, self._wu_h)
        st = RenderSettings(max_iter=self._wu_max_iter)
        self.render_into(fractal, vp, st, np.zeros(vp.pixel_count, dtype=np.uint32))
        self._warmed_up = True

    def _gradient(self, settings: RenderSettings) -> np.ndarray:
        return gradient_for(settings.palette)

    def _require_compiled(self) -> None:
        if self._kernel is None:
            raise RuntimeError("Backend has not been compiled yet")

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        try:
            self.close()
        except Exception:
            pass
