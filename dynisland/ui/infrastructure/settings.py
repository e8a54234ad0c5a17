"""
QSettings wrapper: panel attach state and last detached position.
"""
from __future__ import annotations

from PySide6.QtCore import QPoint, QSettings

from dynisland.ui.infrastructure.application import APPLICATION, ORGANIZATION


class AppSettings:
    """Window persistence via QSettings (platform-specific path)."""

    def __init__(self, q: QSettings | None = None) -> None:
        self._q = q if q is not None else QSettings(ORGANIZATION, APPLICATION)

    # --- Panel ---
    def get_detached(self) -> bool:
        value = self._q.value("panel/detached", False)
        if isinstance(value, str):  # some backends store bools as text
            return value.strip().lower() in {"1", "true", "yes"}
        return bool(value)

    def set_detached(self, detached: bool) -> None:
        self._q.setValue("panel/detached", bool(detached))

    def get_panel_position(self) -> tuple[int, int] | None:
        pos = self._q.value("panel/position", None)
        if isinstance(pos, QPoint):
            return pos.x(), pos.y()
        return None

    def set_panel_position(self, x: int, y: int) -> None:
        self._q.setValue("panel/position", QPoint(int(x), int(y)))

    def clear_panel_position(self) -> None:
        self._q.remove("panel/position")

    def sync(self) -> None:
        self._q.sync()
