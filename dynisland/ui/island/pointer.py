"""Global cursor state for the notch poller."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QCursor, QGuiApplication


def qt_cursor_state() -> tuple[float, float, bool]:
    pos = QCursor.pos()
    down = bool(QGuiApplication.mouseButtons() & Qt.MouseButton.LeftButton)
    return float(pos.x()), float(pos.y()), down
