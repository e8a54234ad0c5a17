from __future__ import annotations

from dataclasses import replace

import pytest

from dynisland.features.system_monitor.domain import GpuSample, StatsSample, UtilizationSample
from dynisland.features.system_monitor.history import StatsHistory, normalize


def _sample(cpu: float, gpu: float) -> StatsSample:
    base = StatsSample.zeros(1)
    return replace(
        base,
        utilization=UtilizationSample(per_core=(cpu,)),
        gpu=GpuSample(gpu, "nvml", 0.0),
    )


def test_normalize_scales_to_unit_range() -> None:
    assert normalize([10.0, 20.0, 30.0]) == pytest.approx([0.0, 0.5, 1.0])


def test_normalize_flat_and_empty() -> None:
    assert normalize([42.0, 42.0]) == [0.5, 0.5]
    assert normalize([]) == []


def test_history_keeps_latest_points() -> None:
    history = StatsHistory(max_points=3)
    for i in range(5):
        history.push(_sample(cpu=float(i), gpu=float(i * 10)))

    assert len(history) == 3
    assert history.cpu() == [2.0, 3.0, 4.0]
    assert history.gpu() == [20.0, 30.0, 40.0]

    history.clear()
    assert len(history) == 0
