"""
Rolling history of GPU and CPU-average readings for the small line graphs.
Append-only, bounded.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

import numpy as np

from dynisland.config import HISTORY_POINTS

from .domain import StatsSample


def normalize(values: Sequence[float]) -> list[float]:
    """Min-max scale to 0..1; a flat (or empty) series sits in the middle."""
    if not values:
        return []
    arr = np.asarray(values, dtype=np.float64)
    lo, hi = float(arr.min()), float(arr.max())
    if hi <= lo:
        return [0.5] * len(values)
    return [float(v) for v in (arr - lo) / (hi - lo)]


class StatsHistory:
    def __init__(self, max_points: int = HISTORY_POINTS) -> None:
        self._gpu: deque[float] = deque(maxlen=max_points)
        self._cpu: deque[float] = deque(maxlen=max_points)

    def push(self, sample: StatsSample) -> None:
        self._gpu.append(sample.gpu.percent)
        self._cpu.append(sample.utilization.average)

    def gpu(self) -> list[float]:
        return list(self._gpu)

    def cpu(self) -> list[float]:
        return list(self._cpu)

    def __len__(self) -> int:
        return len(self._gpu)

    def clear(self) -> None:
        self._gpu.clear()
        self._cpu.clear()
