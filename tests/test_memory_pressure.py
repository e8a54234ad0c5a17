from __future__ import annotations

import pytest

from dynisland.features.system_monitor.domain import (
    CpuSnapshot,
    DiskSample,
    GpuSample,
    MemoryPressure,
    MemorySample,
    StatsSample,
    UtilizationSample,
)


@pytest.mark.parametrize(
    ("used", "expected"),
    [
        (0, MemoryPressure.NORMAL),
        (69, MemoryPressure.NORMAL),
        (70, MemoryPressure.YELLOW),
        (84, MemoryPressure.YELLOW),
        (85, MemoryPressure.RED),
        (100, MemoryPressure.RED),
    ],
)
def test_pressure_thresholds_are_inclusive(used: int, expected: MemoryPressure) -> None:
    sample = MemorySample.from_bytes(used=used, available=100 - used, total=100)
    assert sample.pressure is expected


def test_zero_total_memory_is_normal_and_zero_percent() -> None:
    sample = MemorySample.from_bytes(used=10, available=0, total=0)
    assert sample.pressure is MemoryPressure.NORMAL
    assert sample.percent == 0.0


def test_disk_percent_is_clamped() -> None:
    assert DiskSample.from_bytes(used=50, total=200).percent == pytest.approx(25.0)
    assert DiskSample.from_bytes(used=300, total=200).percent == 100.0
    assert DiskSample.from_bytes(used=5, total=0).percent == 0.0


def test_zero_snapshots_have_requested_core_count() -> None:
    assert CpuSnapshot.zeros(8).core_count == 8
    assert UtilizationSample.zeros(4).per_core == (0.0,) * 4
    assert UtilizationSample.zeros(0).average == 0.0


def test_sample_dict_matches_display_contract() -> None:
    sample = StatsSample(
        utilization=UtilizationSample(per_core=(10.0, 30.0)),
        memory=MemorySample.from_bytes(used=80, available=20, total=100),
        disk=DiskSample.from_bytes(used=1, total=4),
        gpu=GpuSample(percent=12.5, source="nvml", measured_at=1.0),
        taken_at=1.0,
    )

    assert sample.to_dict() == {
        "perCoreUtilization": [10.0, 30.0],
        "memory": {"usedBytes": 80, "availableBytes": 20, "totalBytes": 100, "pressure": "yellow"},
        "disk": {"usedBytes": 1, "totalBytes": 4, "percent": 25.0},
        "gpu": 12.5,
    }
    assert sample.utilization.average == pytest.approx(20.0)
