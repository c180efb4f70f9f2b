from __future__ import annotations

from typing import List, Tuple

from mandelkernel.utils.config import TASKS_PER_WORKER


def row_group_count(height: int, workers: int, rows_per_task: int = 0) -> int:
    """
    Number of row groups to cut a frame of ``height`` rows into.
    """
    if height <= 0:
        return 0
    if rows_per_task > 0:
        return -(-height // rows_per_task)
    return max(1, min(height, max(1, workers) * TASKS_PER_WORKER))


def partition_rows(height: int, groups: int) -> List[Tuple[int, int]]:
    """
    Split rows ``[0, height)`` into ``groups`` contiguous half-open ranges.

    Ranges are disjoint, cover every row exactly once, appear in order and are
    never empty; sizes differ by at most one row.
    """
    if height <= 0 or groups <= 0:
        return []
    groups = min(groups, height)
    base, extra = divmod(height, groups)
    out: List[Tuple[int, int]] = []
    start = 0
    for i in range(groups):
        stop = start + base + (1 if i < extra else 0)
        out.append((start, stop))
        start = stop
    return out
