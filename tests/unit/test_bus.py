from __future__ import annotations

from dataclasses import dataclass

import pytest

from seqharness.core.engine.router import ComponentRouter
from seqharness.core.events.base import Event
from seqharness.core.events.bus import EventBus
from seqharness.core.events.triggers import KeyPressed


@dataclass(slots=True)
class Recorder:
    seen: list

    def subscriptions(self):
        return [("trigger.key_pressed", self._on_key)]

    def _on_key(self, e: Event) -> None:
        self.seen.append(e.key)


def test_event_create_requires_sequence() -> None:
    with pytest.raises(ValueError):
        KeyPressed.create(key="a", sequence=0)
    e = KeyPressed.create(key="a", sequence=1)
    assert e.event_type == "trigger.key_pressed"
    assert e.source == "keyboard"


def test_router_wires_and_unwires() -> None:
    bus = EventBus()
    rec = Recorder(seen=[])
    router = ComponentRouter(bus=bus)
    wiring = router.register([rec])
    assert wiring.components() == ("Recorder",)

    bus.publish(KeyPressed.create(key="a", sequence=1))
    router.unregister(wiring)
    bus.publish(KeyPressed.create(key="b", sequence=2))

    assert rec.seen == ["a"]
    assert tuple(bus.subscribers_for("trigger.key_pressed")) == ()


def test_router_rejects_double_registration() -> None:
    bus = EventBus()
    rec = Recorder(seen=[])
    with pytest.raises(RuntimeError):
        ComponentRouter(bus=bus).register([rec, rec])


def test_unsubscribe_unknown_subscription() -> None:
    bus = EventBus()
    sub = bus.subscribe(event_type="x.y", handler=lambda e: None)
    assert bus.unsubscribe(sub) is True
    assert bus.unsubscribe(sub) is False
