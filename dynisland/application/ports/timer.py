"""Timer port.

The sampler and the island controller schedule work through this protocol so
they can run on a Qt event loop in production and on a fake clock in tests.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class TimerPort(Protocol):
    def start(self, interval_ms: int) -> None: ...

    def stop(self) -> None: ...

    def is_active(self) -> bool: ...


class TimerFactory(Protocol):
    def __call__(
        self, callback: Callable[[], None], *, single_shot: bool = False
    ) -> TimerPort: ...
