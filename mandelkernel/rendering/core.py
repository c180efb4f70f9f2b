from __future__ import annotations
import numpy as np
from dataclasses import replace
from typing import Optional

from mandelkernel.fractals.base import Fractal, Viewport, RenderSettings
from mandelkernel.rendering.executor import RenderExecutor
from mandelkernel.rendering.stats import FrameTimeAverager, RenderStats


class Renderer:

    """
    Facade that binds together:
      - the fractal + render settings,
      - render executor,
      - frame time statistics
    """

    def __init__(
        self,
        fractal: Fractal,
        settings: RenderSettings,
        *,
        executor: Optional[RenderExecutor] = None,
        default_backend: Optional[str] = None,
        default_workers: Optional[int] = None,
        stats_window: int = 30,
    ):
        # Core state
        self.fractal = fractal
        self.settings = settings

        # Execution & resource ownership
        self.executor = executor or RenderExecutor()

        # Hints
        self.default_backend = default_backend
        self.default_workers = default_workers

        self._times = FrameTimeAverager(stats_window)
        self._frames = 0
        self._last_size = (0, 0)

        # Precompile
        self.executor.compile(self.fractal, self.settings)

    # ----------------------------
    # Mutators / helpers
    # ----------------------------

    def set_backend_hints(self, backend: Optional[str] = None, workers: Optional[int] = None) -> None:
        """Set default backend / worker count hints for future renders."""
        self.default_backend = backend
        self.default_workers = workers

    def set_palette(self, palette: Optional[str]) -> None:
        """Colour future renders with the named palette; None defers to the executor config."""
        self.settings = replace(self.settings, palette=palette)

    def recompile(self, fractal: Optional[Fractal] = None, settings: Optional[RenderSettings] = None) -> None:
        """Recompile the fractal and/or settings."""
        if fractal is not None:
            self.fractal = fractal
        if settings is not None:
            self.settings = settings
        self.executor.compile(self.fractal, self.settings)

    def close(self) -> None:
        self.executor.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ----------------------------
    # Render entry points
    # ----------------------------

    def render(self, vp: Viewport) -> np.ndarray:
        """
        Render into a new (height, width) uint32 ARGB image.
        """
        img = self.executor.render(self.fractal, vp, self.settings,
                                   backend=self.default_backend,
                                   workers=self.default_workers)
        self._record(vp)
        return img

    def render_into(self, vp: Viewport, out: np.ndarray) -> np.ndarray:
        """
        Render into a caller-owned uint32 buffer of at least width*height slots.
        """
        self.executor.render_into(self.fractal, vp, self.settings, out,
                                  backend=self.default_backend,
                                  workers=self.default_workers)
        self._record(vp)
        return out

    def _record(self, vp: Viewport) -> None:
        self._times.push(self.executor.last_elapsed_ms)
        self._frames += 1
        self._last_size = (vp.width, vp.height)

    def stats(self) -> RenderStats:
        avg = self._times.average_ms
        return RenderStats(
            avg_compute_ms=avg,
            compute_fps=1000.0 / avg if avg > 0 else 0.0,
            width=self._last_size[0],
            height=self._last_size[1],
            frames_total=self._frames,
        )
