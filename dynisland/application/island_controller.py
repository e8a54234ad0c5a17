"""
Island controller: shows and hides the panel, owns the auto-hide task and the
attach/detach state.

One instance is built by the container and torn down with ``shutdown()``.
Cross-component signals arrive as events on the bus instead of a global
notification center; the event set is unchanged.
"""

from __future__ import annotations

import logging

from dynisland.application.ports.panel import PanelPort
from dynisland.application.ports.timer import TimerFactory, TimerPort
from dynisland.config import AUTO_HIDE_S, COMPLETION_AUTO_HIDE_S, DETACH_SNAP_DISTANCE
from dynisland.core.events import (
    CloseRequested,
    EventBus,
    FileDragEntered,
    IslandHidden,
    IslandShown,
    NotchClicked,
    NotchHoverChanged,
    PanelAttached,
    PanelDetached,
    PanelMoved,
    PointerEntered,
    PointerExited,
    SessionCompleted,
    SheetDismissed,
    SheetPresented,
    StatsSampled,
    Subscription,
)
from dynisland.features.notch.geometry import Rect, is_detached, panel_origin

log = logging.getLogger(__name__)


class IslandController:
    def __init__(
        self,
        event_bus: EventBus,
        panel: PanelPort,
        timer_factory: TimerFactory,
        *,
        screen: Rect,
        auto_hide_s: float = AUTO_HIDE_S,
        completion_hide_s: float = COMPLETION_AUTO_HIDE_S,
        snap_distance: float = DETACH_SNAP_DISTANCE,
        detached: bool = False,
    ) -> None:
        self._bus = event_bus
        self._panel = panel
        self._timer_factory = timer_factory
        self._auto_hide_s = auto_hide_s
        self._completion_hide_s = completion_hide_s
        self._snap_distance = snap_distance
        self._anchor = panel_origin(screen)
        self._detached = detached
        self._visible = False
        self._hide_timer: TimerPort | None = None
        self._subs: list[Subscription] = []

    # --- state ---
    @property
    def is_visible(self) -> bool:
        return self._visible

    @property
    def is_detached(self) -> bool:
        return self._detached

    @property
    def anchor(self) -> tuple[int, int]:
        return self._anchor

    @property
    def auto_hide_pending(self) -> bool:
        return self._hide_timer is not None and self._hide_timer.is_active()

    # --- lifecycle ---
    def attach(self) -> None:
        if self._subs:
            return
        bus = self._bus
        self._subs = [
            bus.subscribe(NotchClicked, lambda _e: self.toggle()),
            bus.subscribe(CloseRequested, lambda _e: self.hide()),
            bus.subscribe(FileDragEntered, lambda _e: self.show()),
            bus.subscribe(PointerEntered, lambda _e: self.pause_auto_hide()),
            bus.subscribe(PointerExited, lambda _e: self.resume_auto_hide()),
            bus.subscribe(NotchHoverChanged, self._on_notch_hover),
            bus.subscribe(SheetPresented, lambda _e: self.pause_auto_hide()),
            bus.subscribe(SheetDismissed, lambda _e: self.resume_auto_hide()),
            bus.subscribe(PanelDetached, self._on_detached),
            bus.subscribe(PanelAttached, self._on_attached),
            bus.subscribe(SessionCompleted, lambda _e: self.show_for_session_completion()),
            bus.subscribe(StatsSampled, self._on_stats),
        ]

    def shutdown(self) -> None:
        self._bus.unsubscribe_all(self._subs)
        self._subs = []
        self.hide()
        self._cancel_auto_hide()

    def set_screen(self, screen: Rect) -> None:
        self._anchor = panel_origin(screen)
        if self._visible and not self._detached:
            self._panel.move_to(*self._anchor)

    # --- show / hide ---
    def show(self) -> None:
        if self._visible:
            return
        if not self._detached:
            self._panel.move_to(*self._anchor)
        self._panel.show()
        self._visible = True
        log.debug("Island shown (detached=%s)", self._detached)
        self._bus.publish(IslandShown(detached=self._detached))
        if not self._detached:
            self._schedule_auto_hide(self._auto_hide_s)

    def hide(self) -> None:
        if not self._visible:
            return
        self._cancel_auto_hide()
        self._panel.hide()
        self._visible = False
        log.debug("Island hidden")
        self._bus.publish(IslandHidden())

    def toggle(self) -> None:
        if self._visible:
            self.hide()
        else:
            self.show()

    def show_for_session_completion(self) -> None:
        self.show()
        if not self._detached:
            self._schedule_auto_hide(self._completion_hide_s)

    # --- auto-hide ---
    def pause_auto_hide(self) -> None:
        self._cancel_auto_hide()

    def resume_auto_hide(self) -> None:
        if self._detached or not self._visible:
            return
        self._schedule_auto_hide(self._auto_hide_s)

    def _schedule_auto_hide(self, seconds: float) -> None:
        # One single-shot timer for the controller's lifetime; rescheduling restarts it.
        if self._hide_timer is None:
            self._hide_timer = self._timer_factory(self._on_auto_hide, single_shot=True)
        self._hide_timer.stop()
        self._hide_timer.start(int(seconds * 1000))

    def _cancel_auto_hide(self) -> None:
        if self._hide_timer is not None:
            self._hide_timer.stop()

    def _on_auto_hide(self) -> None:
        if self._detached:
            return
        self.hide()

    # --- attach / detach ---
    def panel_moved(self, x: int, y: int) -> None:
        """Called by the panel after a drag.

        Publishes attach/detach transitions, and PanelMoved when a detached
        panel is dropped somewhere else.
        """
        detached_now = is_detached((x, y), self._anchor, self._snap_distance)
        if detached_now and not self._detached:
            self._bus.publish(PanelDetached(x=x, y=y))
        elif not detached_now and self._detached:
            self._bus.publish(PanelAttached())
        elif detached_now:
            self._bus.publish(PanelMoved(x=x, y=y))
        else:
            # Dropped near the notch while attached: snap back.
            self._panel.move_to(*self._anchor)

    def _on_detached(self, _ev: PanelDetached) -> None:
        self._detached = True
        self.pause_auto_hide()

    def _on_attached(self, _ev: PanelAttached) -> None:
        self._detached = False
        if self._visible:
            self._panel.move_to(*self._anchor)
        self.resume_auto_hide()

    def _on_notch_hover(self, ev: NotchHoverChanged) -> None:
        # Pointer parked on the notch keeps the attached island open.
        if ev.inside:
            self.pause_auto_hide()
        else:
            self.resume_auto_hide()

    def _on_stats(self, ev: StatsSampled) -> None:
        if self._visible:
            self._panel.show_sample(ev.sample)
