from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class HarnessState:
    """
    Transient per-run state shared by the sequencer and the drivers.

    - index: current position in the mutation sequence (0 <= index < length)
    - sequence: monotonic counter used for event ordering
    - steps_applied: successful Sequencer steps so far
    - closed: set once a Harness scope has torn the wiring down; terminal

    Nothing here is persisted; the state is lost when the run ends.
    """

    run_id: str
    length: int
    index: int = 0
    sequence: int = 0
    steps_applied: int = 0
    is_running: bool = False
    closed: bool = False

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError("length must be >= 1")
        self._check_index(self.index)

    @property
    def last_index(self) -> int:
        return self.length - 1

    def commit_index(self, index: int) -> None:
        self._check_index(index)
        self.index = index

    def next_sequence(self) -> int:
        self.sequence += 1
        return self.sequence

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.length:
            raise ValueError(f"index {index} outside [0, {self.length - 1}]")
