from __future__ import annotations

from fastapi import APIRouter

from seqharness.api.routes.harness import router as harness_router
from seqharness.api.routes.health import router as health_router

# Top-level API router
router = APIRouter()

# Route composition
router.include_router(health_router)
router.include_router(harness_router)
