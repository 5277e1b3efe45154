from __future__ import annotations

from typing import Callable

import asyncio

import structlog

from seqharness.core.engine.state import HarnessState
from seqharness.core.events.base import Event
from seqharness.core.events.bus import EventBus, Subscription
from seqharness.core.events.triggers import KeyPressed

log = structlog.get_logger()

KeyHandler = Callable[[Event], None]


class KeyTriggerSource:
    """
    Harness-wide stream of discrete named signals, carried on the EventBus
    as KeyPressed events.

    Producers (keyboard bridge, HTTP route, tests) call press();
    consumers listen() once and keep the Subscription to detach later.
    """

    def __init__(self, *, bus: EventBus, state: HarnessState, source: str = "keyboard") -> None:
        self._bus = bus
        self._state = state
        self._source = source

    def press(self, key: str, *, source: str | None = None) -> None:
        if not key:
            raise ValueError("key must be non-empty")
        # listeners schedule work on the loop; refuse before anything is published
        asyncio.get_running_loop()
        log.debug("trigger.pressed", key=key)
        self._bus.publish(
            KeyPressed.create(
                key=key,
                source=source or self._source,
                sequence=self._state.next_sequence(),
            )
        )

    def listen(self, handler: KeyHandler) -> Subscription:
        return self._bus.subscribe(event_type=KeyPressed.event_type, handler=handler)

    def unlisten(self, subscription: Subscription) -> bool:
        return self._bus.unsubscribe(subscription)

    def listener_count(self) -> int:
        return len(tuple(self._bus.subscribers_for(KeyPressed.event_type)))
