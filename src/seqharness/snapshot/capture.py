from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import structlog

log = structlog.get_logger()


class SnapshotCapture(Protocol):
    """
    External "capture now" operation.

    The harness only awaits completion; what gets stored, and how the
    capture surface is acquired and released, is the implementation's job.
    """

    async def capture(self) -> None:
        ...


@dataclass(frozen=True, slots=True)
class SnapshotRecord:
    capture_no: int
    index: int
    display: Optional[str]


class RecordingSnapshotter:
    """
    Headless SnapshotCapture: records which sequence position was on screen
    at each capture. No image data is produced.

    - index_of: returns the sequencer's current index at capture time
    - display_of: optional, returns the status text at capture time
    - settle_s: simulated capture latency (forces a real suspension point)
    """

    def __init__(
        self,
        *,
        index_of: Callable[[], int],
        display_of: Optional[Callable[[], str]] = None,
        settle_s: float = 0.0,
    ) -> None:
        if settle_s < 0:
            raise ValueError("settle_s must be >= 0")
        self._index_of = index_of
        self._display_of = display_of
        self._settle_s = settle_s
        self._surface = asyncio.Lock()
        self._records: list[SnapshotRecord] = []

    @property
    def records(self) -> tuple[SnapshotRecord, ...]:
        return tuple(self._records)

    @property
    def indices(self) -> tuple[int, ...]:
        return tuple(r.index for r in self._records)

    async def capture(self) -> None:
        # one capture owns the surface at a time; released even on cancellation
        async with self._surface:
            await asyncio.sleep(self._settle_s)
            rec = SnapshotRecord(
                capture_no=len(self._records) + 1,
                index=self._index_of(),
                display=self._display_of() if self._display_of is not None else None,
            )
            self._records.append(rec)
        log.debug("snapshot.recorded", capture_no=rec.capture_no, index=rec.index)
