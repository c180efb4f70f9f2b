from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderStats:
    avg_compute_ms: float
    compute_fps: float
    width: int
    height: int
    frames_total: int


class FrameTimeAverager:
    """
    Average of the last ``window_size`` frame times, in milliseconds.
    """

    def __init__(self, window_size: int):
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self._values = [0.0] * window_size
        self._index = 0
        self._count = 0

    @property
    def average_ms(self) -> float:
        if self._count == 0:
            return 0.0
        return sum(self._values[:self._count]) / self._count

    def push(self, ms: float) -> None:
        self._values[self._index] = float(ms)
        self._index = (self._index + 1) % len(self._values)
        if self._count < len(self._values):
            self._count += 1
