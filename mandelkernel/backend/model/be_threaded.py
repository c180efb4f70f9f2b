import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, List, Tuple

import numpy as np

from mandelkernel.fractals.base import Fractal, Viewport, RenderSettings
from mandelkernel.backend.model.base import Backend, output_view
from mandelkernel.rendering.partition import partition_rows, row_group_count
from mandelkernel.utils.config import available_cpus

logger = logging.getLogger(__name__)


class ThreadedBackend(Backend):
    """
    Backend that splits the frame into contiguous row groups and hands each
    group, with its own disjoint slice of the output, to a thread pool.
    The row kernel releases the GIL, so groups run in parallel.
    """
    name = "THREADED"
    kernel_family = "CPU"

    def __init__(self, workers: Optional[int] = None, rows_per_task: int = 0):
        super().__init__()
        self.workers = max(1, int(workers)) if workers is not None else available_cpus()
        self.rows_per_task = max(0, int(rows_per_task))
        self._pool: Optional[ThreadPoolExecutor] = None

    def compile(self, fractal: Fractal, settings: RenderSettings) -> None:
        meta = fractal.get_kernel(self.kernel_family, "rows")
        self._kernel = meta["func"]
        if self._pool is None and self.workers > 1:
            self._pool = ThreadPoolExecutor(max_workers=self.workers,
                                            thread_name_prefix="mandelkernel")
        logger.debug("THREADED backend compiled, %d workers, rows_per_task=%d",
                     self.workers, self.rows_per_task)
        self._warmup(fractal)

    def row_groups(self, height: int) -> List[Tuple[int, int]]:
        groups = row_group_count(height, self.workers, self.rows_per_task)
        return partition_rows(height, groups)

    def render_into(self, fractal: Fractal, vp: Viewport, settings: RenderSettings,
                    out: np.ndarray) -> np.ndarray:
        self._require_compiled()
        flat = output_view(out, vp)
        args = fractal.build_arg_values(vp, settings)
        w = args["width"]
        gradient = self._gradient(settings)

        def run(r0: int, r1: int) -> None:
            self._kernel(args["center_x"], args["center_y"], args["inv_zoom"],
                         w, args["height"], args["max_iter"],
                         r0, r1, gradient, flat[r0 * w:r1 * w])

        groups = self.row_groups(args["height"])
        if self._pool is None:
            for r0, r1 in groups:
                run(r0, r1)
            return out

        futs = [self._pool.submit(run, r0, r1) for r0, r1 in groups]
        for fut in futs:
            fut.result()
        return out

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None
        self._kernel = None
        self._warmed_up = False
