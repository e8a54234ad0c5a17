"""Turns two consecutive CPU tick snapshots into per-core utilization."""

from __future__ import annotations

import numpy as np

from .domain import CpuSnapshot, UtilizationSample


def _ticks_array(snapshot: CpuSnapshot) -> np.ndarray:
    # rows: cores, columns: user, system, nice, idle
    if not snapshot.cores:
        return np.zeros((0, 4), dtype=np.int64)
    return np.array(
        [(c.user, c.system, c.nice, c.idle) for c in snapshot.cores], dtype=np.int64
    )


def compute_utilization(prev: CpuSnapshot | None, curr: CpuSnapshot) -> UtilizationSample:
    """Per-core busy share of the ticks elapsed between ``prev`` and ``curr``.

    A missing or differently sized ``prev`` is a cold start: zeros, no error.
    Counters that went backwards (reset) contribute nothing.
    """
    if prev is None or prev.core_count != curr.core_count:
        return UtilizationSample.zeros(curr.core_count)
    if curr.core_count == 0:
        return UtilizationSample.zeros(0)

    delta = np.clip(_ticks_array(curr) - _ticks_array(prev), 0, None).astype(np.float64)
    busy = delta[:, :3].sum(axis=1)
    total = delta.sum(axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        pct = np.where(total > 0, busy / total * 100.0, 0.0)
    pct = np.clip(np.nan_to_num(pct, nan=0.0), 0.0, 100.0)
    return UtilizationSample(per_core=tuple(float(v) for v in pct))


class CpuDeltaCalculator:
    """Keeps the previous snapshot as baseline between calls."""

    def __init__(self) -> None:
        self._baseline: CpuSnapshot | None = None

    @property
    def baseline(self) -> CpuSnapshot | None:
        return self._baseline

    def update(self, snapshot: CpuSnapshot) -> UtilizationSample:
        sample = compute_utilization(self._baseline, snapshot)
        self._baseline = snapshot
        return sample

    def reset(self) -> None:
        self._baseline = None
