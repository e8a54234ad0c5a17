"""
Floating island panel: a frameless tool window with one label per metric.
Pointer enter/leave go to the bus; drags report the drop position so the
controller can decide attach/detach.
"""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QPoint, Qt
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from dynisland.config import PANEL_HEIGHT, PANEL_WIDTH
from dynisland.core.events import EventBus, PointerEntered, PointerExited
from dynisland.features.system_monitor.domain import StatsSample
from dynisland.ui.island.text import describe_sample

ROWS = ("cpu", "gpu", "ram", "ssd")


class QtIslandPanel(QWidget):
    def __init__(
        self,
        event_bus: EventBus,
        on_moved: Callable[[int, int], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._bus = event_bus
        self._on_moved = on_moved
        self._drag_offset: QPoint | None = None
        self._dragged = False

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.Tool
            | Qt.WindowType.WindowStaysOnTopHint
        )
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        self.setFixedSize(PANEL_WIDTH, PANEL_HEIGHT)

        layout = QVBoxLayout(self)
        self._labels: dict[str, QLabel] = {}
        for key in ROWS:
            label = QLabel("...", self)
            layout.addWidget(label)
            self._labels[key] = label

    def set_on_moved(self, on_moved: Callable[[int, int], None]) -> None:
        self._on_moved = on_moved

    # --- PanelPort ---
    def move_to(self, x: int, y: int) -> None:
        self.move(int(x), int(y))

    def is_visible(self) -> bool:
        return self.isVisible()

    def show_sample(self, sample: StatsSample) -> None:
        for key, text in describe_sample(sample).items():
            label = self._labels.get(key)
            if label is not None:
                label.setText(text)

    # --- Qt events ---
    def enterEvent(self, event) -> None:  # noqa: N802
        self._bus.publish(PointerEntered())
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:  # noqa: N802
        self._bus.publish(PointerExited())
        super().leaveEvent(event)

    def mousePressEvent(self, event) -> None:  # noqa: N802
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
            self._dragged = False
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:  # noqa: N802
        if self._drag_offset is not None:
            self.move(event.globalPosition().toPoint() - self._drag_offset)
            self._dragged = True
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802
        if self._drag_offset is not None and self._dragged and self._on_moved is not None:
            pos = self.pos()
            self._on_moved(pos.x(), pos.y())
        self._drag_offset = None
        self._dragged = False
        super().mouseReleaseEvent(event)
