"""
Domain model for the system monitor: raw CPU tick snapshots and the per-tick
samples handed to the display layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from dynisland.config import PRESSURE_RED_RATIO, PRESSURE_YELLOW_RATIO


def clamp_percent(value: float) -> float:
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(100.0, float(value)))


@dataclass(frozen=True, slots=True)
class CoreTicks:
    """Cumulative tick counters of one logical core."""

    user: int
    system: int
    nice: int
    idle: int

    @property
    def busy(self) -> int:
        return self.user + self.system + self.nice

    @property
    def total(self) -> int:
        return self.busy + self.idle


@dataclass(frozen=True, slots=True)
class CpuSnapshot:
    cores: tuple[CoreTicks, ...]

    @property
    def core_count(self) -> int:
        return len(self.cores)

    @classmethod
    def zeros(cls, core_count: int) -> CpuSnapshot:
        return cls(cores=tuple(CoreTicks(0, 0, 0, 0) for _ in range(max(0, core_count))))


@dataclass(frozen=True, slots=True)
class UtilizationSample:
    per_core: tuple[float, ...]

    @property
    def core_count(self) -> int:
        return len(self.per_core)

    @property
    def average(self) -> float:
        if not self.per_core:
            return 0.0
        return sum(self.per_core) / len(self.per_core)

    @classmethod
    def zeros(cls, core_count: int) -> UtilizationSample:
        return cls(per_core=(0.0,) * max(0, core_count))


class MemoryPressure(str, Enum):
    NORMAL = "normal"
    YELLOW = "yellow"
    RED = "red"

    @classmethod
    def from_ratio(cls, ratio: float) -> MemoryPressure:
        if ratio >= PRESSURE_RED_RATIO:
            return cls.RED
        if ratio >= PRESSURE_YELLOW_RATIO:
            return cls.YELLOW
        return cls.NORMAL


@dataclass(frozen=True, slots=True)
class MemorySample:
    used_bytes: int
    available_bytes: int
    total_bytes: int
    pressure: MemoryPressure

    @property
    def percent(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return clamp_percent(self.used_bytes / self.total_bytes * 100.0)

    @classmethod
    def from_bytes(cls, used: int, available: int, total: int) -> MemorySample:
        used = max(0, int(used))
        total = max(0, int(total))
        ratio = used / total if total > 0 else 0.0
        return cls(
            used_bytes=used,
            available_bytes=max(0, int(available)),
            total_bytes=total,
            pressure=MemoryPressure.from_ratio(ratio),
        )

    @classmethod
    def zeros(cls) -> MemorySample:
        return cls(0, 0, 0, MemoryPressure.NORMAL)


@dataclass(frozen=True, slots=True)
class DiskSample:
    used_bytes: int
    total_bytes: int
    percent: float

    @classmethod
    def from_bytes(cls, used: int, total: int) -> DiskSample:
        used = max(0, int(used))
        total = max(0, int(total))
        percent = clamp_percent(used / total * 100.0) if total > 0 else 0.0
        return cls(used_bytes=used, total_bytes=total, percent=percent)

    @classmethod
    def zeros(cls) -> DiskSample:
        return cls(0, 0, 0.0)


@dataclass(frozen=True, slots=True)
class GpuSample:
    percent: float
    source: str  # "nvml" | "nvidia-smi" | "powermetrics" | "estimate"
    measured_at: float  # monotonic seconds

    @property
    def is_estimate(self) -> bool:
        return self.source == "estimate"


@dataclass(frozen=True, slots=True)
class StatsSample:
    """Everything the display layer needs for one tick."""

    utilization: UtilizationSample
    memory: MemorySample
    disk: DiskSample
    gpu: GpuSample
    taken_at: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "perCoreUtilization": list(self.utilization.per_core),
            "memory": {
                "usedBytes": self.memory.used_bytes,
                "availableBytes": self.memory.available_bytes,
                "totalBytes": self.memory.total_bytes,
                "pressure": self.memory.pressure.value,
            },
            "disk": {
                "usedBytes": self.disk.used_bytes,
                "totalBytes": self.disk.total_bytes,
                "percent": self.disk.percent,
            },
            "gpu": self.gpu.percent,
        }

    @classmethod
    def zeros(cls, core_count: int, taken_at: float = 0.0) -> StatsSample:
        return cls(
            utilization=UtilizationSample.zeros(core_count),
            memory=MemorySample.zeros(),
            disk=DiskSample.zeros(),
            gpu=GpuSample(0.0, "estimate", taken_at),
            taken_at=taken_at,
        )
