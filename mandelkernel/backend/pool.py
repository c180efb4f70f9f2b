from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Type

from mandelkernel.backend.model.base import Backend
from mandelkernel.backend.model.be_cpu import CpuBackend
from mandelkernel.backend.model.be_numpy import NumpyBackend
from mandelkernel.backend.model.be_threaded import ThreadedBackend
from mandelkernel.fractals.base import Fractal, RenderSettings

logger = logging.getLogger(__name__)


# Small descriptor of a backend implementation
@dataclass(frozen=True)
class BackendSpec:
    cls: Type[Backend]
    supports_workers: bool


# Default registry
DEFAULT_BACKENDS: Dict[str, BackendSpec] = {
    "NUMPY":    BackendSpec(cls=NumpyBackend,    supports_workers=False),
    "CPU":      BackendSpec(cls=CpuBackend,      supports_workers=True),
    "THREADED": BackendSpec(cls=ThreadedBackend, supports_workers=True),
}


class BackendPool:
    """
    Creates, caches and compiles backend instances.
    Keyed by (backend_name, workers_or_None).
    """

    def __init__(self, registry: Optional[Dict[str, BackendSpec]] = None,
                 rows_per_task: int = 0,
                 telemetry: Optional[Callable[[str], None]] = None) -> None:
        self.registry: Dict[str, BackendSpec] = registry or DEFAULT_BACKENDS
        self.rows_per_task = rows_per_task
        self._cache: Dict[Tuple[str, Optional[int]], Backend] = {}
        self._compiled_args: Optional[Tuple[Fractal, RenderSettings]] = None  # (fractal, settings)
        self._compiled: bool = False
        self.log = telemetry or (lambda *_: None)

    def _spec(self, name: str) -> BackendSpec:
        try:
            return self.registry[name.upper()]
        except KeyError:
            raise KeyError(f"Unknown backend '{name}', expected one of {sorted(self.registry)}") from None

    def get(self, name: str, workers: Optional[int] = None) -> Backend:
        spec = self._spec(name)
        key = (name.upper(), workers if spec.supports_workers else None)
        if key in self._cache:
            return self._cache[key]
        if spec.cls is ThreadedBackend:
            be = spec.cls(workers=workers, rows_per_task=self.rows_per_task)
        else:
            be = spec.cls(workers=workers)
        # If we already compiled for (fractal, settings), apply lazily to new instances
        if self._compiled and self._compiled_args is not None:
            fractal, settings = self._compiled_args
            be.compile(fractal, settings)
        self._cache[key] = be
        return be

    def compile_all(self, fractal: Fractal, settings: RenderSettings) -> None:
        """
        Record the current (fractal, settings), and eager-compile any cached instances.
        Newly created instances will be lazily compiled when first retrieved.
        """
        self._compiled = True
        self._compiled_args = (fractal, settings)
        for be in list(self._cache.values()):
            be.compile(fractal, settings)
        self.log(f"[BackendPool] compiled {len(self._cache)} cached backend(s) for {fractal.name}")

    def close_all(self) -> None:
        for be in list(self._cache.values()):
            try:
                be.close()
            except Exception:
                logger.exception("Error closing backend %s", getattr(be, "name", be))
        self._cache.clear()
        self._compiled = False
        self._compiled_args = None
