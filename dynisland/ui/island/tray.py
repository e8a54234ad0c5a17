"""
Tray / menu-bar entry. Qt cannot watch clicks on the notch itself, so the tray
icon stands in for it and publishes the same events.
"""

from __future__ import annotations

from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from dynisland.core.events import CloseRequested, EventBus, NotchClicked

TRAY_TITLE = "Dynamic Island"


class IslandTray:
    """Owns the tray icon and its context menu for the app's lifetime."""

    def __init__(self, app: QApplication, event_bus: EventBus) -> None:
        self._app = app
        self._bus = event_bus

        icon = app.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon)
        self._icon = QSystemTrayIcon(icon, app)
        self._icon.setToolTip(TRAY_TITLE)

        # setContextMenu does not take ownership; the menu lives here.
        self._menu = QMenu()
        self._menu.addAction("Show / hide", self._toggle)
        self._menu.addSeparator()
        self._menu.addAction("Quit", self._quit)
        self._icon.setContextMenu(self._menu)
        self._icon.activated.connect(self._activated)

    @property
    def icon(self) -> QSystemTrayIcon:
        return self._icon

    @property
    def menu(self) -> QMenu:
        return self._menu

    def show(self) -> None:
        self._icon.show()

    def notify(self, text: str) -> None:
        self._icon.showMessage(TRAY_TITLE, text)

    def _toggle(self) -> None:
        self._bus.publish(NotchClicked())

    def _quit(self) -> None:
        self._bus.publish(CloseRequested())
        self._app.quit()

    def _activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._toggle()


def install_tray(app: QApplication, event_bus: EventBus) -> IslandTray | None:
    """Create and show the tray icon; None when the desktop has no tray."""
    if not QSystemTrayIcon.isSystemTrayAvailable():
        return None
    tray = IslandTray(app, event_bus)
    tray.show()
    return tray
