from typing import Optional

import numpy as np

from mandelkernel.fractals.base import Fractal, Viewport, RenderSettings
from mandelkernel.backend.model.base import Backend, output_view


class NumpyBackend(Backend):
    """
    Single-threaded vectorised numpy renderer. Slow, but has no compiled
    code, so it serves as the reference the other backends are checked against.
    """
    name = "NUMPY"

    def __init__(self, workers: Optional[int] = None):
        super().__init__()

    def compile(self, fractal: Fractal, settings: RenderSettings) -> None:
        meta = fractal.get_kernel(self.name, "frame")
        self._kernel = meta["func"]

    def render_into(self, fractal: Fractal, vp: Viewport, settings: RenderSettings,
                    out: np.ndarray) -> np.ndarray:
        self._require_compiled()
        flat = output_view(out, vp)
        args = fractal.build_arg_values(vp, settings)
        self._kernel(args["center_x"], args["center_y"], args["inv_zoom"],
                     args["width"], args["height"], args["max_iter"],
                     self._gradient(settings), flat)
        return out

    def close(self) -> None:
        self._kernel = None
