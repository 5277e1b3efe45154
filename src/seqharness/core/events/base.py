from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True, kw_only=True)
class Event:
    """
    Base class for every event published on the EventBus.

    - event_type is a ClassVar routing key ("<area>.<name>")
    - sequence is allocated by HarnessState.next_sequence() (total order per run)
    - event_id / timestamp_utc are informational only, never used for ordering
    """

    event_type: ClassVar[str] = "event"

    sequence: int
    event_id: UUID = field(default_factory=uuid4)
    timestamp_utc: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, **fields: Any) -> "Event":
        if fields.get("sequence", 0) <= 0:
            raise ValueError(f"{cls.__name__}.create requires a positive sequence")
        return cls(**fields)
