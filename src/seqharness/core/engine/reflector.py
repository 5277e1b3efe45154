from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from seqharness.core.events.base import Event
from seqharness.core.events.sequencing import MutationApplied


@dataclass(slots=True)
class StatusReflector:
    """
    Keeps a display entity's text equal to (current index + 1).

    Write-only: the sequencer never reads it back.
    """
    target: Any
    attribute: str = "text"

    def subscriptions(self) -> Sequence[tuple[str, callable]]:
        return [("sequencer.mutation_applied", self._on_applied)]

    @property
    def value(self) -> str:
        return getattr(self.target, self.attribute)

    def _on_applied(self, e: Event) -> None:
        if isinstance(e, MutationApplied):
            setattr(self.target, self.attribute, e.display)
