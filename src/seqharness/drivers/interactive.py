from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from seqharness.core.config.settings import InteractivePolicy
from seqharness.core.engine.sequencer import Sequencer
from seqharness.core.engine.state import HarnessState
from seqharness.core.events.base import Event
from seqharness.core.events.bus import EventBus, Subscription
from seqharness.core.events.sequencing import StepFailed
from seqharness.core.events.triggers import KeyPressed
from seqharness.triggers.source import KeyTriggerSource

log = structlog.get_logger()

SettleHook = Callable[[], Awaitable[None]]


class InteractiveDriver:
    """
    Binds one trigger key to looping advancement.

    Each matching KeyPressed schedules step(loop=True) as a task on the
    running loop, so the trigger source never waits on it. Failures are
    logged and published as StepFailed; the binding survives them.

    Policies:
      - "serialize": one advance (step + settle hook) in flight at a time;
        later triggers queue behind it in arrival order
      - "overlap": every trigger runs immediately; a slow settle hook may
        observe a sequencer that has already moved on
    """

    def __init__(
        self,
        *,
        sequencer: Sequencer,
        triggers: KeyTriggerSource,
        bus: EventBus,
        state: HarnessState,
        key: str = "ArrowRight",
        policy: InteractivePolicy = "serialize",
        settle: Optional[SettleHook] = None,
    ) -> None:
        if not key:
            raise ValueError("key must be non-empty")
        if policy not in ("serialize", "overlap"):
            raise ValueError(f"unknown interactive policy: {policy!r}")

        self._sequencer = sequencer
        self._triggers = triggers
        self._bus = bus
        self._state = state
        self._key = key
        self._policy = policy
        self._settle = settle

        self._subscription: Optional[Subscription] = None
        self._lock = asyncio.Lock()
        self._inflight: set[asyncio.Task[None]] = set()

        self.advances = 0
        self.failures = 0

    @property
    def key(self) -> str:
        return self._key

    @property
    def policy(self) -> InteractivePolicy:
        return self._policy

    @property
    def bound(self) -> bool:
        return self._subscription is not None

    @property
    def pending(self) -> int:
        return len(self._inflight)

    # ---------------- Binding ----------------

    def bind(self) -> None:
        if self._subscription is not None:
            raise RuntimeError("interactive driver already bound")
        self._subscription = self._triggers.listen(self._on_key)
        log.info("interactive.bound", key=self._key, policy=self._policy)

    def unbind(self) -> None:
        if self._subscription is None:
            return
        self._triggers.unlisten(self._subscription)
        self._subscription = None
        log.info("interactive.unbound", key=self._key, advances=self.advances, failures=self.failures)

    async def __aenter__(self) -> "InteractiveDriver":
        self.bind()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.unbind()
        await self.drain()

    async def drain(self) -> None:
        """
        Wait until every scheduled advance has finished.
        """
        while self._inflight:
            await asyncio.gather(*tuple(self._inflight))

    # ---------------- Internals ----------------

    def _on_key(self, e: Event) -> None:
        if not isinstance(e, KeyPressed) or e.key != self._key:
            return
        # press() already checked that a loop is running
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._advance())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _advance(self) -> None:
        if self._policy == "serialize":
            async with self._lock:
                await self._advance_once()
        else:
            await self._advance_once()

    async def _advance_once(self) -> None:
        try:
            self._sequencer.step(loop=True)
            self.advances += 1
            if self._settle is not None:
                await self._settle()
        except Exception as exc:
            self.failures += 1
            log.exception(
                "interactive.step_failed",
                index=self._sequencer.current_index,
                error_type=type(exc).__name__,
            )
            self._bus.publish(
                StepFailed.create(
                    index=self._sequencer.current_index,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                    sequence=self._state.next_sequence(),
                )
            )
