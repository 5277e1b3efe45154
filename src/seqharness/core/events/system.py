from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from seqharness.core.events.base import Event


@dataclass(frozen=True, slots=True)
class RunStarted(Event):
    """
    Emitted when a harness run begins.
    """

    event_type: ClassVar[str] = "system.run_started"

    run_id: str
    case: str
    length: int


@dataclass(frozen=True, slots=True)
class RunStopped(Event):
    """
    Emitted when a harness run ends normally.
    """

    event_type: ClassVar[str] = "system.run_stopped"

    run_id: str
    steps_applied: int


@dataclass(frozen=True, slots=True)
class HarnessError(Event):
    """
    Emitted when a drive fails in a way that aborts the run.
    """

    event_type: ClassVar[str] = "system.harness_error"

    run_id: str

    error_type: str
    error_message: str
