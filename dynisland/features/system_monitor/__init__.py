"""System monitor: CPU tick deltas, memory pressure, disk and GPU samples."""

from .delta import CpuDeltaCalculator, compute_utilization
from .domain import (
    CoreTicks,
    CpuSnapshot,
    DiskSample,
    GpuSample,
    MemoryPressure,
    MemorySample,
    StatsSample,
    UtilizationSample,
)
from .history import StatsHistory, normalize

__all__ = [
    "CoreTicks",
    "CpuSnapshot",
    "UtilizationSample",
    "MemoryPressure",
    "MemorySample",
    "DiskSample",
    "GpuSample",
    "StatsSample",
    "CpuDeltaCalculator",
    "compute_utilization",
    "StatsHistory",
    "normalize",
]
