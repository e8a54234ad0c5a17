"""Lightweight in-process event bus.

The goal is to decouple the sampler and the island controller from the UI.
Services publish events; the panel and the controller subscribe.
"""

from .event_bus import EventBus, Subscription
from .island_events import (
    CloseRequested,
    FileDragEntered,
    IslandHidden,
    IslandShown,
    NotchClicked,
    NotchHoverChanged,
    PanelAttached,
    PanelDetached,
    PanelMoved,
    PointerEntered,
    PointerExited,
    SessionCompleted,
    SheetDismissed,
    SheetPresented,
)
from .stats_events import SamplerStarted, SamplerStopped, StatsSampled

__all__ = [
    "EventBus",
    "Subscription",
    "SamplerStarted",
    "SamplerStopped",
    "StatsSampled",
    "NotchClicked",
    "NotchHoverChanged",
    "FileDragEntered",
    "CloseRequested",
    "PointerEntered",
    "PointerExited",
    "PanelDetached",
    "PanelMoved",
    "PanelAttached",
    "SheetPresented",
    "SheetDismissed",
    "SessionCompleted",
    "IslandShown",
    "IslandHidden",
]
