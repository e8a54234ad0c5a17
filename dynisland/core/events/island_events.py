"""Events exchanged between the pointer tracker, the panel and the island controller."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NotchClicked:
    pass


@dataclass(frozen=True, slots=True)
class NotchHoverChanged:
    inside: bool


@dataclass(frozen=True, slots=True)
class FileDragEntered:
    pass


@dataclass(frozen=True, slots=True)
class CloseRequested:
    pass


@dataclass(frozen=True, slots=True)
class PointerEntered:
    """Pointer entered the visible panel."""


@dataclass(frozen=True, slots=True)
class PointerExited:
    """Pointer left the visible panel."""


@dataclass(frozen=True, slots=True)
class PanelDetached:
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class PanelMoved:
    """A detached panel was dropped at a new position."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class PanelAttached:
    pass


@dataclass(frozen=True, slots=True)
class SheetPresented:
    pass


@dataclass(frozen=True, slots=True)
class SheetDismissed:
    pass


@dataclass(frozen=True, slots=True)
class SessionCompleted:
    """A timer session finished; the island is shown longer than usual."""


@dataclass(frozen=True, slots=True)
class IslandShown:
    detached: bool


@dataclass(frozen=True, slots=True)
class IslandHidden:
    pass
