"""Application ports for system metrics.

The sampler depends on these protocols instead of importing psutil/pynvml
implementations directly.
"""

from __future__ import annotations

from typing import Protocol

from dynisland.features.system_monitor.domain import (
    CpuSnapshot,
    DiskSample,
    GpuSample,
    MemorySample,
)


class CounterReader(Protocol):
    @property
    def core_count(self) -> int:
        """Detected logical core count; zero-filled snapshots use it."""

    def read_cpu(self) -> CpuSnapshot | None:
        """Cumulative per-core ticks; None when the counters could not be read."""

    def read_memory(self) -> MemorySample:
        """Used/available/total bytes with pressure; zeros on failure."""

    def read_disk(self) -> DiskSample:
        """Capacity of the monitored volume; zeros on failure."""


class GpuSource(Protocol):
    def read(self, cpu_average: float = 0.0) -> GpuSample:
        """Latest GPU utilization, real or estimated. Never raises."""
