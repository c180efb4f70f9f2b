from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional, Callable

import numpy as np

from mandelkernel.fractals.base import Fractal, Viewport, RenderSettings
from mandelkernel.backend.pool import BackendPool
from mandelkernel.utils.config import RenderConfig

logger = logging.getLogger(__name__)


class RenderExecutor:
    """
    Execution facade over a BackendPool: picks the backend and worker count
    (explicit arguments first, then the RenderConfig), runs the render and
    reports how long it took.
    """

    def __init__(
        self,
        *,
        config: Optional[RenderConfig] = None,
        pool: Optional[BackendPool] = None,
        telemetry: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.config = config or RenderConfig.from_env()
        self.log = telemetry or (lambda *_: None)
        self.pool = pool or BackendPool(rows_per_task=self.config.rows_per_task, telemetry=self.log)
        self.last_elapsed_ms: float = 0.0

    # ---- Lifecycle ------------------------------------------------------

    def compile(self, fractal: Fractal, settings: RenderSettings) -> None:
        self.pool.compile_all(fractal, settings)

    def close(self) -> None:
        self.pool.close_all()

    # ---- Rendering ------------------------------------------------------

    def _choose_backend(self, backend: Optional[str], workers: Optional[int]):
        name = (backend or self.config.backend).upper()
        return name, workers if workers is not None else self.config.workers

    def _with_palette(self, settings: RenderSettings) -> RenderSettings:
        if settings.palette is None:
            return replace(settings, palette=self.config.palette)
        return settings

    def render_into(
        self,
        fractal: Fractal,
        vp: Viewport,
        settings: RenderSettings,
        out: np.ndarray,
        backend: Optional[str] = None,
        workers: Optional[int] = None,
    ) -> np.ndarray:
        name, n = self._choose_backend(backend, workers)
        settings = self._with_palette(settings)
        be = self.pool.get(name, n)
        t0 = time.perf_counter()
        be.render_into(fractal, vp, settings, out)
        self.last_elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug("rendered %dx%d (max_iter=%d) on %s in %.2f ms",
                     vp.width, vp.height, settings.max_iter, name, self.last_elapsed_ms)
        self.log(f"[RenderExecutor] {vp.width}x{vp.height} on {name} in {self.last_elapsed_ms:.2f} ms")
        return out

    def render(
        self,
        fractal: Fractal,
        vp: Viewport,
        settings: RenderSettings,
        backend: Optional[str] = None,
        workers: Optional[int] = None,
    ) -> np.ndarray:
        name, n = self._choose_backend(backend, workers)
        settings = self._with_palette(settings)
        be = self.pool.get(name, n)
        t0 = time.perf_counter()
        img = be.render(fractal, vp, settings)
        self.last_elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug("rendered %dx%d (max_iter=%d) on %s in %.2f ms",
                     vp.width, vp.height, settings.max_iter, name, self.last_elapsed_ms)
        self.log(f"[RenderExecutor] {vp.width}x{vp.height} on {name} in {self.last_elapsed_ms:.2f} ms")
        return img
