from __future__ import annotations

from threading import Lock
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from seqharness.core.run.assembly import HarnessHandle

router = APIRouter(tags=["harness"])

# One live harness per process; attached by whoever owns its Harness scope.
_live_lock = Lock()
_live: Optional[HarnessHandle] = None


def attach_harness(handle: HarnessHandle) -> None:
    global _live
    with _live_lock:
        if _live is not None and _live is not handle:
            raise RuntimeError(f"another harness is attached: {_live.run_id}")
        _live = handle


def detach_harness() -> None:
    global _live
    with _live_lock:
        _live = None


def is_attached() -> bool:
    with _live_lock:
        return _live is not None


def _require_live() -> HarnessHandle:
    with _live_lock:
        handle = _live
    if handle is None:
        raise HTTPException(status_code=409, detail="no harness attached")
    return handle


# =========================
# Schemas
# =========================

class HarnessStatusResponse(BaseModel):
    run_id: str
    case: str
    running: bool
    length: int
    index: int
    display: str
    steps_applied: int
    bound: bool
    advance_key: str


class KeyPressResponse(BaseModel):
    key: str
    accepted: bool
    pending: int


def _status(handle: HarnessHandle) -> HarnessStatusResponse:
    return HarnessStatusResponse(
        run_id=handle.run_id,
        case=handle.case.name,
        running=handle.state.is_running,
        length=handle.state.length,
        index=handle.state.index,
        display=handle.reflector.value,
        steps_applied=handle.state.steps_applied,
        bound=handle.interactive.bound,
        advance_key=handle.interactive.key,
    )


# =========================
# Routes
# =========================

@router.get("/harness", response_model=HarnessStatusResponse)
def get_harness() -> HarnessStatusResponse:
    return _status(_require_live())


@router.post("/harness/keys/{key}", response_model=KeyPressResponse)
async def press_key(key: str, wait: bool = False) -> KeyPressResponse:
    """
    Feed a key into the harness trigger stream.

    `accepted` tells whether the interactive binding listens for this key.
    With wait=true the response is sent after all scheduled advances finish.
    """
    handle = _require_live()
    if not handle.interactive.bound:
        raise HTTPException(status_code=409, detail="interactive trigger not bound")

    handle.triggers.press(key, source="http")
    if wait:
        await handle.interactive.drain()

    return KeyPressResponse(
        key=key,
        accepted=key == handle.interactive.key,
        pending=handle.interactive.pending,
    )
