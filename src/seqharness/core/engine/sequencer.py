from __future__ import annotations

from typing import Optional

import structlog

from seqharness.core.engine.sequence import MutationSequence
from seqharness.core.engine.state import HarnessState
from seqharness.core.events.bus import EventBus
from seqharness.core.events.sequencing import MutationApplied, SequenceExhausted

log = structlog.get_logger()


class Sequencer:
    """
    Tracks the current position in a MutationSequence and advances it.

    step() is fully synchronous: index commit, mutation, and the
    MutationApplied notification (which drives the status reflector)
    happen without suspending.
    """

    def __init__(self, *, sequence: MutationSequence, state: HarnessState, bus: EventBus) -> None:
        if state.length != len(sequence):
            raise ValueError(f"state.length={state.length} does not match sequence length={len(sequence)}")
        self._sequence = sequence
        self._state = state
        self._bus = bus

    @property
    def current_index(self) -> int:
        return self._state.index

    @property
    def length(self) -> int:
        return len(self._sequence)

    @property
    def sequence(self) -> MutationSequence:
        return self._sequence

    def step(self, loop: bool = False, target: Optional[int] = None) -> bool:
        """
        Move to `target` (default: current index + 1) and apply its mutation.

        Returns False, leaving everything untouched, when `target` is past
        the last index and `loop` is off. With `loop` on it wraps to 0.
        Exceptions raised by the mutation propagate to the caller; the index
        has already moved at that point and no notification is sent.
        """
        idx = self._state.index + 1 if target is None else target
        if idx < 0:
            raise ValueError(f"target index must be >= 0, got {idx}")

        wrapped = False
        if idx > self._sequence.last_index:
            if not loop:
                log.debug("sequencer.exhausted", index=self._state.index, requested=idx)
                self._bus.publish(
                    SequenceExhausted.create(
                        index=self._state.index,
                        length=self.length,
                        sequence=self._state.next_sequence(),
                    )
                )
                return False
            idx = 0
            wrapped = True

        self._state.commit_index(idx)

        mutation = self._sequence.get(idx)
        if mutation is not None:
            mutation()
        self._state.steps_applied += 1

        log.debug("sequencer.stepped", index=idx, wrapped=wrapped, defined=mutation is not None)
        self._bus.publish(
            MutationApplied.create(
                index=idx,
                length=self.length,
                wrapped=wrapped,
                defined=mutation is not None,
                sequence=self._state.next_sequence(),
            )
        )
        return True
