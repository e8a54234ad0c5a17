from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from dynisland.application.ports.timer import TimerFactory, TimerPort
from dynisland.config import POINTER_POLL_MS
from dynisland.core.events import EventBus, FileDragEntered, NotchClicked, NotchHoverChanged

from .geometry import Rect, notch_rect

log = logging.getLogger(__name__)

PointerKind = Literal["move", "press", "drag"]


@dataclass(frozen=True, slots=True)
class PointerEvent:
    kind: PointerKind
    x: float
    y: float


class NotchPointerTracker:
    """Turns raw pointer positions into notch events on the bus.

    Fed by whatever pointer source the platform offers; it only does the
    hit-testing and the enter/exit bookkeeping.
    """

    def __init__(self, event_bus: EventBus, screen: Rect) -> None:
        self._bus = event_bus
        self._notch = notch_rect(screen)
        self._inside = False

    @property
    def inside(self) -> bool:
        return self._inside

    @property
    def notch(self) -> Rect:
        return self._notch

    def set_screen(self, screen: Rect) -> None:
        self._notch = notch_rect(screen)

    def handle(self, event: PointerEvent) -> None:
        was_inside = self._inside
        self._inside = self._notch.contains(event.x, event.y)

        if event.kind == "press" and self._inside:
            self._bus.publish(NotchClicked())
        if was_inside != self._inside:
            self._bus.publish(NotchHoverChanged(inside=self._inside))
        if event.kind == "drag" and self._inside:
            self._bus.publish(FileDragEntered())


CursorReader = Callable[[], tuple[float, float, bool]]


class CursorPoller:
    """Samples the global cursor on a repeating timer and feeds the tracker.

    ``read_cursor`` returns ``(x, y, button_down)`` in screen coordinates.
    A button going down is a press; a button kept down is a drag.
    """

    def __init__(
        self,
        tracker: NotchPointerTracker,
        timer_factory: TimerFactory,
        read_cursor: CursorReader,
        *,
        interval_ms: int = POINTER_POLL_MS,
    ) -> None:
        self._tracker = tracker
        self._timer_factory = timer_factory
        self._read_cursor = read_cursor
        self._interval_ms = int(interval_ms)
        self._timer: TimerPort | None = None
        self._button_down = False

    @property
    def is_running(self) -> bool:
        return self._timer is not None and self._timer.is_active()

    def start(self) -> None:
        if self._timer is None:
            self._timer = self._timer_factory(self.poll)
        self._button_down = False
        self._timer.start(self._interval_ms)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()

    def poll(self) -> None:
        try:
            x, y, down = self._read_cursor()
        except Exception:
            log.debug("Cursor read failed", exc_info=True)
            return
        if down and not self._button_down:
            kind: PointerKind = "press"
        elif down:
            kind = "drag"
        else:
            kind = "move"
        self._button_down = bool(down)
        self._tracker.handle(PointerEvent(kind, x, y))
