from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from seqharness.core.events.base import Event


@dataclass(frozen=True, slots=True)
class MutationApplied(Event):
    """
    A successful Sequencer step: the mutation at `index` has been applied
    (or the position was empty and nothing ran).
    """

    event_type: ClassVar[str] = "sequencer.mutation_applied"

    index: int
    length: int
    wrapped: bool = False
    defined: bool = True

    @property
    def display(self) -> str:
        return str(self.index + 1)


@dataclass(frozen=True, slots=True)
class SequenceExhausted(Event):
    """
    A non-looping step was requested past the last index.
    State is unchanged.
    """

    event_type: ClassVar[str] = "sequencer.exhausted"

    index: int
    length: int


@dataclass(frozen=True, slots=True)
class SnapshotCaptured(Event):
    """
    The automation driver finished awaiting a snapshot for `index`.
    """

    event_type: ClassVar[str] = "snapshot.captured"

    index: int
    capture_no: int


@dataclass(frozen=True, slots=True)
class StepFailed(Event):
    """
    An interactive advance raised. The trigger binding stays live.
    """

    event_type: ClassVar[str] = "interactive.step_failed"

    index: int
    error_type: str
    error_message: str
