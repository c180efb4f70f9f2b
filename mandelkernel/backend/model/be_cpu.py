import logging
from typing import Optional

import numba
import numpy as np

from mandelkernel.fractals.base import Fractal, Viewport, RenderSettings
from mandelkernel.backend.model.base import Backend, output_view

logger = logging.getLogger(__name__)


class CpuBackend(Backend):
    """
    Backend for CPU-based fractal rendering through a numba parallel loop
    over image rows.
    """
    name = "CPU"

    def __init__(self, workers: Optional[int] = None):
        super().__init__()
        self.workers = workers

    def compile(self, fractal: Fractal, settings: RenderSettings) -> None:
        meta = fractal.get_kernel(self.name, "frame")
        self._kernel = meta["func"]
        logger.debug("CPU backend compiled, %d numba threads", self._thread_count())
        self._warmup(fractal)

    def _thread_count(self) -> int:
        limit = numba.config.NUMBA_NUM_THREADS
        if self.workers is None:
            return limit
        return max(1, min(int(self.workers), limit))

    def render_into(self, fractal: Fractal, vp: Viewport, settings: RenderSettings,
                    out: np.ndarray) -> np.ndarray:
        self._require_compiled()
        flat = output_view(out, vp)
        args = fractal.build_arg_values(vp, settings)

        numba.set_num_threads(self._thread_count())
        self._kernel(args["center_x"], args["center_y"], args["inv_zoom"],
                     args["width"], args["height"], args["max_iter"],
                     self._gradient(settings), flat)
        return out

    def close(self) -> None:
        self._kernel = None
        self._warmed_up = False
