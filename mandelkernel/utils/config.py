from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from mandelkernel.coloring.colormap import palette_name
from mandelkernel.utils.enums import BackendType

ENV_WORKERS = "MANDELKERNEL_WORKERS"
ENV_BACKEND = "MANDELKERNEL_BACKEND"
ENV_ROWS_PER_TASK = "MANDELKERNEL_ROWS_PER_TASK"
ENV_PALETTE = "MANDELKERNEL_PALETTE"

# Row groups queued per worker when rows_per_task is left at 0.
TASKS_PER_WORKER = 4


def available_cpus() -> int:
    try:
        return max(1, len(os.sched_getaffinity(0)))
    except AttributeError:
        return max(1, os.cpu_count() or 1)


def _parse_positive(name: str, raw: str, *, allow_zero: bool = False) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0 or (value == 0 and not allow_zero):
        raise ValueError(f"{name} must be {'>= 0' if allow_zero else '> 0'}, got {value}")
    return value


@dataclass(frozen=True)
class RenderConfig:
    """
    Process-level knobs the embedding environment may set.
    Workers is the worker pool size; rows_per_task of 0 derives the row
    group size from the image height and worker count. Palette colours
    renders whose settings leave it unset.
    """
    workers: int
    backend: str = BackendType.THREADED.name
    rows_per_task: int = 0
    palette: str = "Classic"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RenderConfig":
        env = os.environ if environ is None else environ

        raw = env.get(ENV_WORKERS, "").strip()
        workers = _parse_positive(ENV_WORKERS, raw) if raw else available_cpus()

        backend = env.get(ENV_BACKEND, "").strip().upper() or BackendType.THREADED.name
        if backend not in BackendType.__members__:
            raise ValueError(
                f"{ENV_BACKEND} must be one of {sorted(BackendType.__members__)}, got {backend!r}")

        raw = env.get(ENV_ROWS_PER_TASK, "").strip()
        rows = _parse_positive(ENV_ROWS_PER_TASK, raw, allow_zero=True) if raw else 0

        raw = env.get(ENV_PALETTE, "").strip()
        try:
            palette = palette_name(raw) if raw else "Classic"
        except KeyError as e:
            raise ValueError(f"{ENV_PALETTE}: {e.args[0]}") from None

        return cls(workers=workers, backend=backend, rows_per_task=rows, palette=palette)
