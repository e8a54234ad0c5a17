"""Port for the floating panel the island controller drives."""

from __future__ import annotations

from typing import Protocol

from dynisland.features.system_monitor.domain import StatsSample


class PanelPort(Protocol):
    def show(self) -> None: ...

    def hide(self) -> None: ...

    def move_to(self, x: int, y: int) -> None: ...

    def is_visible(self) -> bool: ...

    def show_sample(self, sample: StatsSample) -> None: ...
