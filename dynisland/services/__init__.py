"""Infrastructure services: OS counter reads (psutil) and GPU probes."""

from .gpu_metrics import (
    GpuProbe,
    GpuReader,
    NvidiaSmiProbe,
    NvmlProbe,
    PowermetricsProbe,
    default_probes,
    parse_powermetrics_output,
)
from .system_metrics import PsutilCounterReader

__all__ = [
    "PsutilCounterReader",
    "GpuProbe",
    "GpuReader",
    "NvmlProbe",
    "NvidiaSmiProbe",
    "PowermetricsProbe",
    "default_probes",
    "parse_powermetrics_output",
]
