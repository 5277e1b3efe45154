from __future__ import annotations

import structlog

from seqharness.core.logging.setup import clear_context
from seqharness.core.run.assembly import HarnessHandle
from seqharness.drivers.automation import AutomationReport

log = structlog.get_logger()


class Harness:
    """
    Scoped owner of a wired harness.

    Entering starts the lifecycle and binds the interactive trigger;
    leaving always unbinds it, waits for in-flight advances, stops the
    lifecycle and detaches every component from the bus. A handle can be
    entered once; build a new one for another run.

        async with Harness(build_harness(case=case)) as h:
            report = await h.automation.run()
    """

    def __init__(self, handle: HarnessHandle, *, interactive: bool = True) -> None:
        self._handle = handle
        self._interactive = interactive

    @property
    def handle(self) -> HarnessHandle:
        return self._handle

    async def __aenter__(self) -> HarnessHandle:
        h = self._handle
        if h.state.closed:
            raise RuntimeError("harness already closed")
        h.lifecycle.start()
        if self._interactive:
            try:
                h.interactive.bind()
            except Exception:
                h.lifecycle.stop()
                raise
        return h

    async def __aexit__(self, *exc_info: object) -> None:
        h = self._handle
        try:
            h.interactive.unbind()
            await h.interactive.drain()
        finally:
            try:
                if h.state.is_running:
                    h.lifecycle.stop()
            finally:
                h.router.unregister(h.wiring)
                h.state.closed = True
                if h.event_store is not None:
                    h.event_store.close()
                clear_context()
                log.info("harness.closed", run_id=h.run_id, steps_applied=h.state.steps_applied)


async def run_automation(handle: HarnessHandle) -> AutomationReport:
    """
    One unattended pass inside a Harness scope (no trigger binding).
    """
    async with Harness(handle, interactive=False) as h:
        return await h.automation.run()
