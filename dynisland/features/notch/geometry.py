"""
Screen geometry around the display notch. Coordinates are logical pixels with a
top-left origin (Qt convention); the screen rect may be offset on multi-monitor
layouts.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from dynisland.config import (
    DETACH_SNAP_DISTANCE,
    NOTCH_HEIGHT,
    NOTCH_WIDTH,
    PANEL_HEIGHT,
    PANEL_TOP_OFFSET,
    PANEL_WIDTH,
)


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


def notch_rect(screen: Rect, width: float = NOTCH_WIDTH, height: float = NOTCH_HEIGHT) -> Rect:
    """Notch area: centered horizontally, flush with the top edge."""
    return Rect(screen.x + (screen.width - width) / 2, screen.y, width, height)


def panel_origin(
    screen: Rect,
    panel_width: float = PANEL_WIDTH,
    panel_height: float = PANEL_HEIGHT,
    top_offset: float = PANEL_TOP_OFFSET,
) -> tuple[int, int]:
    """Top-left corner of the attached panel, ``top_offset`` below the top edge.

    On screens too short for the offset the panel is pulled up to stay visible.
    """
    x = screen.x + (screen.width - panel_width) / 2
    y = screen.y + max(0.0, min(top_offset, screen.height - panel_height))
    return int(round(x)), int(round(y))


def is_detached(
    origin: tuple[float, float],
    anchor: tuple[float, float],
    snap_distance: float = DETACH_SNAP_DISTANCE,
) -> bool:
    return math.dist(origin, anchor) > snap_distance
