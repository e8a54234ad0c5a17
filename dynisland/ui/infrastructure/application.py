"""
QApplication / QCoreApplication setup: organization and app name for QSettings.
"""

from __future__ import annotations

import sys

from PySide6.QtCore import QCoreApplication

ORGANIZATION = "dynisland"
APPLICATION = "Dynamic Island"


def _configure(app: QCoreApplication) -> None:
    app.setApplicationName(APPLICATION)
    app.setOrganizationName(ORGANIZATION)
    from dynisland.core.version import get_build_info

    app.setApplicationVersion(get_build_info()["version"])


def create_application():
    """Create the GUI application. Call before any Qt widgets.

    The island lives in the tray/menu bar, so closing the panel must not quit.
    """
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication(sys.argv)
    _configure(app)
    app.setQuitOnLastWindowClosed(False)
    return app


def create_core_application() -> QCoreApplication:
    """Event loop without a GUI, for the headless JSON-lines mode."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    _configure(app)
    return app
