from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from seqharness.core.events.base import Event


@dataclass(frozen=True, slots=True)
class KeyPressed(Event):
    """
    A discrete named signal from a trigger source (keyboard, HTTP, test).
    """

    event_type: ClassVar[str] = "trigger.key_pressed"

    key: str
    source: str = "keyboard"
