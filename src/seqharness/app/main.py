from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from fastapi import FastAPI

from seqharness.api import router as api_router
from seqharness.api.routes.harness import attach_harness, detach_harness
from seqharness.cases import get_case
from seqharness.core.config.settings import settings
from seqharness.core.logging.setup import configure_logging
from seqharness.core.run.assembly import build_harness
from seqharness.core.run.harness import Harness
from seqharness.scene.nodes import SceneRenderer

log = structlog.get_logger()


def create_app(*, case_name: Optional[str] = None) -> FastAPI:
    """
    Application factory.

    With `case_name`, the app owns an interactive harness for that case for
    its whole lifetime: bound on startup, torn down on shutdown.
    """
    configure_logging(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("app.startup", environment=settings.env, case=case_name)
        if case_name is None:
            yield
        else:
            case = get_case(case_name)(SceneRenderer())
            handle = build_harness(case=case)
            async with Harness(handle) as live:
                # baseline, as the automation driver does
                live.sequencer.step(loop=False, target=0)
                attach_harness(live)
                try:
                    yield
                finally:
                    detach_harness()
        log.info("app.shutdown")

    app = FastAPI(
        title="seqharness",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(api_router, prefix="/api")

    return app


# ASGI entrypoint
app = create_app(case_name=settings.case)
