"""Raw OS counters: CPU ticks per core, memory and disk capacity (psutil)."""
from __future__ import annotations

import logging
import os

import psutil

from dynisland.config import CPU_TICKS_PER_SECOND, DEFAULT_DISK_PATH
from dynisland.core.observability.timing import timed
from dynisland.features.system_monitor.domain import (
    CoreTicks,
    CpuSnapshot,
    DiskSample,
    MemorySample,
)

log = logging.getLogger(__name__)


def _detect_core_count() -> int:
    try:
        count = psutil.cpu_count(logical=True)
    except Exception:
        log.debug("psutil.cpu_count failed", exc_info=True)
        count = None
    return count or os.cpu_count() or 1


def _to_ticks(seconds: float) -> int:
    return max(0, int(round(float(seconds) * CPU_TICKS_PER_SECOND)))


class PsutilCounterReader:
    """Best-effort counter reads.

    A failed CPU read returns None so the caller keeps its delta baseline;
    memory and disk fall back to zero-filled values.
    """

    def __init__(self, disk_path: str = DEFAULT_DISK_PATH) -> None:
        self._disk_path = disk_path
        self._core_count = _detect_core_count()

    @property
    def core_count(self) -> int:
        return self._core_count

    @property
    def disk_path(self) -> str:
        return self._disk_path

    @timed("cpu tick read")
    def read_cpu(self) -> CpuSnapshot | None:
        """Cumulative per-core ticks, or None when the counters could not be read."""
        try:
            times = psutil.cpu_times(percpu=True)
            cores = tuple(
                CoreTicks(
                    user=_to_ticks(t.user),
                    system=_to_ticks(t.system),
                    nice=_to_ticks(getattr(t, "nice", 0.0)),  # absent on Windows
                    idle=_to_ticks(t.idle),
                )
                for t in times
            )
        except Exception:
            log.debug("CPU tick read failed", exc_info=True)
            return None
        return CpuSnapshot(cores=cores) if cores else None

    @timed("memory read")
    def read_memory(self) -> MemorySample:
        try:
            vm = psutil.virtual_memory()
            total = int(vm.total)
            available = int(vm.available)
        except Exception:
            log.debug("Memory stats read failed", exc_info=True)
            return MemorySample.zeros()
        return MemorySample.from_bytes(total - available, available, total)

    @timed("disk usage read")
    def read_disk(self) -> DiskSample:
        try:
            du = psutil.disk_usage(self._disk_path)
            total = int(du.total)
            free = int(du.free)
        except Exception:
            log.debug("Disk usage read failed for %s", self._disk_path, exc_info=True)
            return DiskSample.zeros()
        return DiskSample.from_bytes(total - free, total)
