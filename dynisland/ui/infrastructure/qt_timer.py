"""QTimer-backed implementation of the timer port."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer


class QtTimer:
    """Runs ``callback`` on the Qt event loop of the creating thread."""

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        single_shot: bool = False,
        parent: QObject | None = None,
    ) -> None:
        self._timer = QTimer(parent)
        self._timer.setSingleShot(single_shot)
        self._timer.timeout.connect(callback)

    def start(self, interval_ms: int) -> None:
        self._timer.start(max(0, int(interval_ms)))

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def single_shot(self) -> bool:
        return self._timer.isSingleShot()


def qt_timer_factory(callback: Callable[[], None], *, single_shot: bool = False) -> QtTimer:
    return QtTimer(callback, single_shot=single_shot)
