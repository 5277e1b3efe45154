from __future__ import annotations

from dataclasses import dataclass

import structlog

from seqharness.core.engine.sequencer import Sequencer
from seqharness.core.engine.state import HarnessState
from seqharness.core.events.bus import EventBus
from seqharness.core.events.sequencing import SnapshotCaptured
from seqharness.core.events.system import HarnessError
from seqharness.snapshot.capture import SnapshotCapture

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class AutomationReport:
    """
    Outcome of one unattended pass: the sequence index captured by each
    snapshot, in capture order.
    """
    run_id: str
    length: int
    indices: tuple[int, ...]

    @property
    def captures(self) -> int:
        return len(self.indices)

    @property
    def complete(self) -> bool:
        return self.indices == tuple(range(self.length))


class AutomationDriver:
    """
    Unattended driver for CI/headless capture.

    Forces the sequencer to index 0, snapshots, then steps without looping
    and snapshots after every applied mutation until the sequencer reports
    exhaustion. Strictly sequential: a step never starts before the previous
    snapshot has completed.
    """

    def __init__(
        self,
        *,
        sequencer: Sequencer,
        snapshot: SnapshotCapture,
        bus: EventBus,
        state: HarnessState,
    ) -> None:
        self._sequencer = sequencer
        self._snapshot = snapshot
        self._bus = bus
        self._state = state

    async def run(self) -> AutomationReport:
        log.info("automation.started", run_id=self._state.run_id, length=self._sequencer.length)
        captured: list[int] = []

        try:
            # deterministic baseline, whatever the sequencer did before
            self._sequencer.step(loop=False, target=0)
            await self._capture(captured)

            while self._sequencer.step(loop=False):
                await self._capture(captured)

        except Exception as exc:
            self._bus.publish(
                HarnessError.create(
                    run_id=self._state.run_id,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                    sequence=self._state.next_sequence(),
                )
            )
            log.exception(
                "automation.crashed",
                run_id=self._state.run_id,
                index=self._sequencer.current_index,
                captures=len(captured),
            )
            raise

        report = AutomationReport(
            run_id=self._state.run_id,
            length=self._sequencer.length,
            indices=tuple(captured),
        )
        log.info("automation.finished", run_id=report.run_id, captures=report.captures, complete=report.complete)
        return report

    async def _capture(self, captured: list[int]) -> None:
        index = self._sequencer.current_index
        await self._snapshot.capture()
        captured.append(index)
        self._bus.publish(
            SnapshotCaptured.create(
                index=index,
                capture_no=len(captured),
                sequence=self._state.next_sequence(),
            )
        )
