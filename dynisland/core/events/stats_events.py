from __future__ import annotations

from dataclasses import dataclass

from dynisland.features.system_monitor.domain import StatsSample


@dataclass(frozen=True, slots=True)
class SamplerStarted:
    interval_ms: int


@dataclass(frozen=True, slots=True)
class SamplerStopped:
    ticks: int  # samples taken while the loop was running


@dataclass(frozen=True, slots=True)
class StatsSampled:
    """One tick of the sampler, ready for the display layer."""

    sample: StatsSample
