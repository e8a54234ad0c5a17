from __future__ import annotations

import itertools
import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, TypeVar, cast
from weakref import WeakMethod

logger = logging.getLogger(__name__)

TEvent = TypeVar("TEvent")

_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class Subscription:
    """Handle returned by ``subscribe``; pass it back to ``unsubscribe``."""

    event_type: type[object]
    handler: Callable[[object], None]
    id: int = field(default_factory=lambda: next(_ids))


class _WeakHandler:
    """Calls a bound method while its owner is alive."""

    __slots__ = ("_ref", "_label")

    def __init__(self, method: Callable[[Any], None]) -> None:
        self._ref = WeakMethod(cast(Any, method))
        self._label = getattr(method, "__qualname__", repr(method))

    @property
    def dead(self) -> bool:
        return self._ref() is None

    def __call__(self, event: object) -> None:
        method = self._ref()
        if method is not None:
            method(event)

    def __repr__(self) -> str:
        return f"<weak {self._label}>"


class EventBus:
    """Synchronous in-process event bus, one instance per application.

    - Handlers run in the publisher's thread, in subscription order.
      The sampler and the island controller publish from the Qt main thread.
    - Events are routed by exact type; subclasses are not matched.
    - A failing handler is logged and does not stop delivery to the others.
    - The subscriber table is guarded by a lock so a worker thread may publish.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: defaultdict[type[object], dict[int, Subscription]] = defaultdict(dict)

    def subscribe(
        self, event_type: type[TEvent], handler: Callable[[TEvent], None]
    ) -> Subscription:
        sub = Subscription(event_type=event_type, handler=cast(Callable[[object], None], handler))
        with self._lock:
            self._subs[event_type][sub.id] = sub
        return sub

    def subscribe_weak(
        self, event_type: type[TEvent], handler: Callable[[TEvent], None]
    ) -> Subscription:
        """Subscribe a bound method without keeping its owner alive.

        Meant for Qt widgets: once the panel is garbage-collected its entry is
        dropped on the next publish. Plain functions are held strongly.
        """
        try:
            weak = _WeakHandler(handler)
        except TypeError:
            return self.subscribe(event_type, handler)
        return self.subscribe(event_type, weak)

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            handlers = self._subs.get(subscription.event_type)
            if handlers is not None:
                handlers.pop(subscription.id, None)

    def unsubscribe_all(self, subscriptions: Iterable[Subscription]) -> None:
        for sub in subscriptions:
            self.unsubscribe(sub)

    def handler_count(self, event_type: type[object]) -> int:
        with self._lock:
            return len(self._subs.get(event_type, ()))

    def publish(self, event: object) -> None:
        # Snapshot under the lock; a handler may (un)subscribe while we iterate.
        with self._lock:
            subs = list(self._subs.get(type(event), {}).values())
        for sub in subs:
            handler = sub.handler
            if isinstance(handler, _WeakHandler) and handler.dead:
                self.unsubscribe(sub)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Event handler failed",
                    extra={"event": type(event).__name__, "handler": repr(handler)},
                )

    def clear(self) -> None:
        """Remove all subscriptions."""
        with self._lock:
            self._subs.clear()
