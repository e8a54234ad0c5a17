"""Infrastructure: application bootstrap, timers, DI, settings.

Keep this package import lightweight: do not import Qt GUI modules at import time.
Headless environments may have PySide6 installed but miss runtime GUI libs
(e.g. ``libGL.so.1``). Lazy exports below allow importing
``dynisland.ui.infrastructure.qt_timer`` without triggering Qt GUI initialization.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "create_application",
    "create_core_application",
    "Container",
    "install_error_boundary",
    "AppSettings",
    "QtTimer",
    "qt_timer_factory",
]

_EXPORTS = {
    "create_application": "dynisland.ui.infrastructure.application",
    "create_core_application": "dynisland.ui.infrastructure.application",
    "Container": "dynisland.ui.infrastructure.di",
    "install_error_boundary": "dynisland.ui.infrastructure.error_boundary",
    "AppSettings": "dynisland.ui.infrastructure.settings",
    "QtTimer": "dynisland.ui.infrastructure.qt_timer",
    "qt_timer_factory": "dynisland.ui.infrastructure.qt_timer",
}


def __getattr__(name: str) -> Any:
    module = _EXPORTS.get(name)
    if module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module), name)
