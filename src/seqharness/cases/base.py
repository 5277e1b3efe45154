from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from seqharness.core.engine.sequence import MutationSequence


@dataclass(frozen=True, slots=True)
class HarnessCase:
    """
    A built test case: the mutations to step through, the entity that shows
    the current position, and the named entities the mutations touch.
    """
    name: str
    mutations: MutationSequence
    status_node: Any
    entities: Mapping[str, Any] = field(default_factory=dict)
    description: str = ""

    @property
    def length(self) -> int:
        return len(self.mutations)
