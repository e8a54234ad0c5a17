"""Notch geometry and pointer hit-testing."""

from .geometry import Rect, is_detached, notch_rect, panel_origin
from .tracker import CursorPoller, NotchPointerTracker, PointerEvent

__all__ = [
    "Rect",
    "notch_rect",
    "panel_origin",
    "is_detached",
    "CursorPoller",
    "NotchPointerTracker",
    "PointerEvent",
]
