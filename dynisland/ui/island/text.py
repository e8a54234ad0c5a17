"""Label text for the panel rows. Pure functions, no Qt."""

from __future__ import annotations

from dynisland.features.system_monitor.domain import MemoryPressure, StatsSample

GB = 1024**3

PRESSURE_LABELS = {
    MemoryPressure.NORMAL: "",
    MemoryPressure.YELLOW: " (pressure)",
    MemoryPressure.RED: " (high pressure)",
}


def describe_sample(sample: StatsSample) -> dict[str, str]:
    util = sample.utilization
    mem = sample.memory
    disk = sample.disk
    gpu_suffix = " est." if sample.gpu.is_estimate else ""
    return {
        "cpu": f"CPU {util.average:.1f}% | {util.core_count} cores",
        "gpu": f"GPU {sample.gpu.percent:.1f}%{gpu_suffix}",
        "ram": (
            f"RAM {mem.used_bytes / GB:.2f} / {mem.total_bytes / GB:.2f} GB"
            f"{PRESSURE_LABELS[mem.pressure]}"
        ),
        "ssd": f"SSD {disk.percent:.0f}% of {disk.total_bytes / GB:.0f} GB",
    }
