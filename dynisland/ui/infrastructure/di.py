"""UI composition container.

Injects the Qt collaborators (timers, panel, screen geometry, QSettings) into
the application container and persists the panel's attach state and
position.
"""

from __future__ import annotations

from dynisland.application.container import Container as AppContainer
from dynisland.application.island_controller import IslandController
from dynisland.core.events import PanelAttached, PanelDetached, PanelMoved
from dynisland.features.notch.geometry import Rect
from dynisland.features.settings_schema import MonitorSettings
from dynisland.ui.infrastructure.qt_timer import qt_timer_factory
from dynisland.ui.island.pointer import qt_cursor_state


class Container(AppContainer):
    def __init__(self, *, settings: MonitorSettings | None = None) -> None:
        super().__init__(
            settings=settings, timer_factory=qt_timer_factory, cursor_reader=qt_cursor_state
        )
        self._app_settings = None

    @property
    def app_settings(self):
        if self._app_settings is None:
            from dynisland.ui.infrastructure.settings import AppSettings

            self._app_settings = AppSettings()
        return self._app_settings

    @app_settings.setter
    def app_settings(self, app_settings) -> None:
        self._app_settings = app_settings

    @property
    def screen(self) -> Rect:
        if self._screen is None:
            from PySide6.QtGui import QGuiApplication

            screen = QGuiApplication.primaryScreen()
            if screen is None:
                raise RuntimeError("No screen available for the island panel")
            g = screen.geometry()
            self._screen = Rect(g.x(), g.y(), g.width(), g.height())
        return self._screen

    @screen.setter
    def screen(self, screen: Rect) -> None:
        self._screen = screen

    @property
    def panel(self):
        if self._panel is None:
            from dynisland.ui.island.panel import QtIslandPanel

            self._panel = QtIslandPanel(self.event_bus)
        return self._panel

    @panel.setter
    def panel(self, panel) -> None:
        self._panel = panel

    @property
    def island_controller(self) -> IslandController:
        created = self._island_controller is None
        controller = super().island_controller
        if created:
            set_on_moved = getattr(self.panel, "set_on_moved", None)
            if set_on_moved is not None:
                set_on_moved(controller.panel_moved)
            saved = self.app_settings.get_panel_position()
            if controller.is_detached and saved is not None:
                self.panel.move_to(*saved)
            bus = self.event_bus
            bus.subscribe_weak(PanelDetached, self._persist_detached)
            bus.subscribe_weak(PanelMoved, self._persist_moved)
            bus.subscribe_weak(PanelAttached, self._persist_attached)
        return controller

    def _initial_detached(self) -> bool:
        return self.app_settings.get_detached()

    def _persist_detached(self, ev: PanelDetached) -> None:
        self.app_settings.set_detached(True)
        self.app_settings.set_panel_position(ev.x, ev.y)

    def _persist_moved(self, ev: PanelMoved) -> None:
        self.app_settings.set_panel_position(ev.x, ev.y)

    def _persist_attached(self, _ev: PanelAttached) -> None:
        self.app_settings.set_detached(False)
        self.app_settings.clear_panel_position()


__all__ = ["Container"]
