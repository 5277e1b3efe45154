from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from seqharness.api.routes.harness import is_attached
from seqharness.core.config.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """
    Liveness plus whether an interactive harness is attached to this process.
    """

    status: str
    environment: str
    harness_attached: bool
    advance_key: str


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        environment=settings.env,
        harness_attached=is_attached(),
        advance_key=settings.advance_key,
    )
