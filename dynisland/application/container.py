"""Composition root / DI container.

Builds each owned service once, on first use, and tears them down together in
``shutdown()``. Nothing in the application is a global singleton; UI code
receives the container and asks it for collaborators.
"""

from __future__ import annotations

import logging

from dynisland.application.island_controller import IslandController
from dynisland.application.ports.metrics import CounterReader, GpuSource
from dynisland.application.ports.panel import PanelPort
from dynisland.application.ports.timer import TimerFactory
from dynisland.application.sampler import StatsSampler, follow_island_visibility
from dynisland.core.events import EventBus, Subscription
from dynisland.features.notch.geometry import Rect
from dynisland.features.notch.tracker import CursorPoller, CursorReader, NotchPointerTracker
from dynisland.features.settings_schema import MonitorSettings, load_settings
from dynisland.features.system_monitor.history import StatsHistory
from dynisland.services import GpuReader, PsutilCounterReader

log = logging.getLogger(__name__)


class Container:
    """Resolves application services. Single place to swap implementations if needed."""

    def __init__(
        self,
        *,
        settings: MonitorSettings | None = None,
        timer_factory: TimerFactory | None = None,
        cursor_reader: CursorReader | None = None,
    ) -> None:
        self._settings = settings
        self._timer_factory = timer_factory
        self._cursor_reader = cursor_reader
        self._event_bus: EventBus | None = None
        self._counter_reader: CounterReader | None = None
        self._gpu_reader: GpuSource | None = None
        self._history: StatsHistory | None = None
        self._sampler: StatsSampler | None = None
        self._panel: PanelPort | None = None
        self._screen: Rect | None = None
        self._island_controller: IslandController | None = None
        self._notch_tracker: NotchPointerTracker | None = None
        self._pointer_poller: CursorPoller | None = None
        self._visibility_subs: list[Subscription] = []

    @property
    def settings(self) -> MonitorSettings:
        if self._settings is None:
            self._settings = load_settings()
        return self._settings

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = EventBus()
        return self._event_bus

    @property
    def counter_reader(self) -> CounterReader:
        if self._counter_reader is None:
            self._counter_reader = PsutilCounterReader(disk_path=self.settings.disk_path)
        return self._counter_reader

    @counter_reader.setter
    def counter_reader(self, reader: CounterReader) -> None:
        self._counter_reader = reader

    @property
    def gpu_reader(self) -> GpuSource:
        if self._gpu_reader is None:
            s = self.settings
            self._gpu_reader = GpuReader(cache_seconds=s.gpu_cache_s, jitter=s.gpu_jitter)
        return self._gpu_reader

    @gpu_reader.setter
    def gpu_reader(self, reader: GpuSource) -> None:
        self._gpu_reader = reader

    @property
    def history(self) -> StatsHistory:
        if self._history is None:
            self._history = StatsHistory(max_points=self.settings.history_points)
        return self._history

    @property
    def timer_factory(self) -> TimerFactory:
        if self._timer_factory is None:
            raise RuntimeError("Timer factory must be injected from UI")
        return self._timer_factory

    @timer_factory.setter
    def timer_factory(self, factory: TimerFactory) -> None:
        self._timer_factory = factory

    @property
    def sampler(self) -> StatsSampler:
        if self._sampler is None:
            s = self.settings
            self._sampler = StatsSampler(
                self.counter_reader,
                self.gpu_reader,
                self.event_bus,
                self.timer_factory,
                interval_ms=s.interval_ms,
                gpu_interval_s=s.gpu_cache_s,
                history=self.history,
            )
        return self._sampler

    @property
    def panel(self) -> PanelPort:
        if self._panel is None:
            raise RuntimeError("Panel must be injected from UI")
        return self._panel

    @panel.setter
    def panel(self, panel: PanelPort) -> None:
        self._panel = panel

    @property
    def screen(self) -> Rect:
        if self._screen is None:
            raise RuntimeError("Screen geometry must be injected from UI")
        return self._screen

    @screen.setter
    def screen(self, screen: Rect) -> None:
        self._screen = screen

    @property
    def island_controller(self) -> IslandController:
        """Controller wired to the bus; the sampler follows the island's visibility."""
        if self._island_controller is None:
            s = self.settings
            controller = IslandController(
                self.event_bus,
                self.panel,
                self.timer_factory,
                screen=self.screen,
                auto_hide_s=s.auto_hide_s,
                completion_hide_s=s.completion_hide_s,
                snap_distance=s.snap_distance,
                detached=self._initial_detached(),
            )
            controller.attach()
            self._visibility_subs = follow_island_visibility(self.event_bus, self.sampler)
            self._island_controller = controller
        return self._island_controller

    @property
    def cursor_reader(self) -> CursorReader:
        if self._cursor_reader is None:
            raise RuntimeError("Cursor reader must be injected from UI")
        return self._cursor_reader

    @cursor_reader.setter
    def cursor_reader(self, reader: CursorReader) -> None:
        self._cursor_reader = reader

    @property
    def notch_tracker(self) -> NotchPointerTracker:
        if self._notch_tracker is None:
            self._notch_tracker = NotchPointerTracker(self.event_bus, self.screen)
        return self._notch_tracker

    @property
    def pointer_poller(self) -> CursorPoller:
        """Feeds global cursor positions to the notch tracker. Not started here."""
        if self._pointer_poller is None:
            self._pointer_poller = CursorPoller(
                self.notch_tracker, self.timer_factory, self.cursor_reader
            )
        return self._pointer_poller

    def _initial_detached(self) -> bool:
        return False

    def shutdown(self) -> None:
        """Stop timers and release probes. Safe to call more than once."""
        if self._pointer_poller is not None:
            self._pointer_poller.stop()
        if self._island_controller is not None:
            self._island_controller.shutdown()
        if self._sampler is not None:
            self._sampler.stop()
        if self._event_bus is not None:
            self._event_bus.unsubscribe_all(self._visibility_subs)
        self._visibility_subs = []
        close = getattr(self._gpu_reader, "close", None)
        if close is not None:
            close()
        log.debug("Container shut down")
