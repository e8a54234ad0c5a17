"""
Stats sampler loop: once per interval, read counters, turn CPU ticks into
utilization, and publish a StatsSampled event for the display layer.

Runs on the UI thread through a repeating timer. The previous CPU snapshot and
the last GPU reading belong to the sampler and are only touched from the
timer callback, so no locking is needed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import Enum

from dynisland.application.ports.metrics import CounterReader, GpuSource
from dynisland.application.ports.timer import TimerFactory, TimerPort
from dynisland.config import GPU_CACHE_SECONDS, SAMPLE_INTERVAL_MS
from dynisland.core.events import (
    EventBus,
    IslandHidden,
    IslandShown,
    SamplerStarted,
    SamplerStopped,
    StatsSampled,
    Subscription,
)
from dynisland.features.system_monitor.delta import CpuDeltaCalculator
from dynisland.features.system_monitor.domain import (
    GpuSample,
    StatsSample,
    UtilizationSample,
)
from dynisland.features.system_monitor.history import StatsHistory

log = logging.getLogger(__name__)


class SamplerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


def _fit_cores(util: UtilizationSample, core_count: int) -> UtilizationSample:
    if core_count <= 0 or util.core_count == core_count:
        return util
    values = util.per_core[:core_count] + (0.0,) * max(0, core_count - util.core_count)
    return UtilizationSample(per_core=values)


class StatsSampler:
    """Idle/Running state machine around a single repeating timer."""

    def __init__(
        self,
        reader: CounterReader,
        gpu_reader: GpuSource,
        event_bus: EventBus,
        timer_factory: TimerFactory,
        *,
        interval_ms: int = SAMPLE_INTERVAL_MS,
        gpu_interval_s: float = GPU_CACHE_SECONDS,
        history: StatsHistory | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._reader = reader
        self._gpu_reader = gpu_reader
        self._bus = event_bus
        self._timer_factory = timer_factory
        self._interval_ms = int(interval_ms)
        self._gpu_interval_s = float(gpu_interval_s)
        self._history = history if history is not None else StatsHistory()
        self._clock = clock

        self._state = SamplerState.IDLE
        self._timer: TimerPort | None = None
        self._delta = CpuDeltaCalculator()
        self._last_gpu: GpuSample | None = None
        self._last_gpu_at: float | None = None
        self._last_sample: StatsSample | None = None
        self._ticks = 0

    @property
    def state(self) -> SamplerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SamplerState.RUNNING

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def history(self) -> StatsHistory:
        return self._history

    @property
    def last_sample(self) -> StatsSample | None:
        return self._last_sample

    @property
    def ticks(self) -> int:
        return self._ticks

    def start(self, *, sample_now: bool = True) -> None:
        if self.is_running:
            self.stop()
        # A fresh run starts cold; a baseline from before a long pause is meaningless.
        self._delta.reset()
        self._ticks = 0
        if self._timer is None:
            self._timer = self._timer_factory(self._on_timeout)
        self._state = SamplerState.RUNNING
        self._timer.start(self._interval_ms)
        log.debug(
            "Sampler started",
            extra={"state": self._state.value, "interval_ms": self._interval_ms},
        )
        self._bus.publish(SamplerStarted(interval_ms=self._interval_ms))
        if sample_now:
            self.tick()

    def stop(self) -> None:
        if not self.is_running:
            return
        # The timer object is kept and restarted by the next start().
        if self._timer is not None:
            self._timer.stop()
        self._state = SamplerState.IDLE
        log.debug("Sampler stopped after %d ticks", self._ticks, extra={"state": self._state.value})
        self._bus.publish(SamplerStopped(ticks=self._ticks))

    def tick(self) -> StatsSample:
        now = self._clock()
        try:
            sample = self._collect(now)
        except Exception:
            log.exception("Stats tick failed; publishing zeros")
            sample = StatsSample.zeros(self._reader.core_count, taken_at=now)
        self._last_sample = sample
        self._ticks += 1
        self._history.push(sample)
        self._bus.publish(StatsSampled(sample=sample))
        return sample

    def _on_timeout(self) -> None:
        # A queued timeout can still arrive right after stop().
        if not self.is_running:
            return
        self.tick()

    def _collect(self, now: float) -> StatsSample:
        snapshot = self._reader.read_cpu()
        if snapshot is None:
            # Keep the baseline; the next good read measures across the gap.
            util = UtilizationSample.zeros(self._reader.core_count)
        else:
            util = _fit_cores(self._delta.update(snapshot), self._reader.core_count)
        memory = self._reader.read_memory()
        disk = self._reader.read_disk()
        gpu = self._read_gpu(util.average, now)
        return StatsSample(utilization=util, memory=memory, disk=disk, gpu=gpu, taken_at=now)

    def _read_gpu(self, cpu_average: float, now: float) -> GpuSample:
        if (
            self._last_gpu is not None
            and self._last_gpu_at is not None
            and (now - self._last_gpu_at) < self._gpu_interval_s
        ):
            return self._last_gpu
        gpu = self._gpu_reader.read(cpu_average)
        self._last_gpu, self._last_gpu_at = gpu, now
        return gpu


def follow_island_visibility(bus: EventBus, sampler: StatsSampler) -> list[Subscription]:
    """Run the sampler only while the island is on screen."""

    def _on_shown(_ev: IslandShown) -> None:
        sampler.start()

    def _on_hidden(_ev: IslandHidden) -> None:
        sampler.stop()

    return [bus.subscribe(IslandShown, _on_shown), bus.subscribe(IslandHidden, _on_hidden)]
