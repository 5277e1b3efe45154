from __future__ import annotations

import structlog

from seqharness.core.engine.state import HarnessState
from seqharness.core.events.bus import EventBus
from seqharness.core.events.system import RunStarted, RunStopped
from seqharness.core.logging.setup import bind_context

log = structlog.get_logger()


class HarnessLifecycle:
    """
    Explicit run lifecycle controller.

    Ensures start/stop transitions are correct and audited via events.
    """

    def __init__(self, *, bus: EventBus, state: HarnessState, case: str) -> None:
        self._bus = bus
        self._state = state
        self._case = case

    @property
    def state(self) -> HarnessState:
        return self._state

    def start(self) -> None:
        if self._state.is_running:
            raise RuntimeError("harness already running")

        bind_context(run_id=self._state.run_id, case=self._case)

        self._state.is_running = True

        self._bus.publish(
            RunStarted.create(
                run_id=self._state.run_id,
                case=self._case,
                length=self._state.length,
                sequence=self._state.next_sequence(),
            )
        )

        log.info("harness.started", run_id=self._state.run_id, case=self._case)

    def stop(self) -> None:
        if not self._state.is_running:
            raise RuntimeError("harness not running")

        seq = self._state.next_sequence()
        self._state.is_running = False

        self._bus.publish(
            RunStopped.create(
                run_id=self._state.run_id,
                steps_applied=self._state.steps_applied,
                sequence=seq,
            )
        )

        log.info("harness.stopped", run_id=self._state.run_id, steps_applied=self._state.steps_applied)
