from __future__ import annotations

import gc
from dataclasses import dataclass

from dynisland.core.events.event_bus import EventBus


@dataclass(frozen=True)
class _Evt:
    value: int


def test_publish_continues_when_one_handler_raises(caplog) -> None:
    bus = EventBus()
    received: list[int] = []

    def broken(_evt: _Evt) -> None:
        raise RuntimeError("boom")

    def healthy(evt: _Evt) -> None:
        received.append(evt.value)

    bus.subscribe(_Evt, broken)
    bus.subscribe(_Evt, healthy)

    bus.publish(_Evt(7))

    assert received == [7]
    assert "Event handler failed" in caplog.text


def test_unsubscribe_stops_delivery() -> None:
    bus = EventBus()
    received: list[int] = []
    sub = bus.subscribe(_Evt, lambda e: received.append(e.value))

    bus.publish(_Evt(1))
    bus.unsubscribe(sub)
    bus.unsubscribe(sub)
    bus.publish(_Evt(2))

    assert received == [1]
    assert bus.handler_count(_Evt) == 0


def test_handler_may_unsubscribe_itself_during_publish() -> None:
    bus = EventBus()
    received: list[str] = []
    subs = []

    def once(_evt: _Evt) -> None:
        received.append("once")
        bus.unsubscribe(subs[0])

    subs.append(bus.subscribe(_Evt, once))
    bus.subscribe(_Evt, lambda _e: received.append("always"))

    bus.publish(_Evt(0))
    bus.publish(_Evt(0))

    assert received == ["once", "always", "always"]


def test_weak_subscription_drops_dead_owner() -> None:
    bus = EventBus()
    received: list[int] = []

    class _View:
        def on_evt(self, evt: _Evt) -> None:
            received.append(evt.value)

    view = _View()
    bus.subscribe_weak(_Evt, view.on_evt)
    bus.publish(_Evt(1))

    del view
    gc.collect()
    bus.publish(_Evt(2))

    assert received == [1]
    assert bus.handler_count(_Evt) == 0


def test_events_are_routed_by_exact_type() -> None:
    @dataclass(frozen=True)
    class _Other:
        pass

    bus = EventBus()
    hits: list[object] = []
    bus.subscribe(_Evt, hits.append)

    bus.publish(_Other())

    assert hits == []
