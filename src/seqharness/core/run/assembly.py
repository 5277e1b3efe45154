from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence

import structlog

from seqharness.cases.base import HarnessCase
from seqharness.core.config.settings import InteractivePolicy, settings
from seqharness.core.engine.lifecycle import HarnessLifecycle
from seqharness.core.engine.reflector import StatusReflector
from seqharness.core.engine.router import ComponentRouter, RouterWiring
from seqharness.core.engine.sequencer import Sequencer
from seqharness.core.engine.state import HarnessState
from seqharness.core.events.base import Event
from seqharness.core.events.bus import EventBus
from seqharness.core.run.artifacts import RunArtifacts, artifacts_for
from seqharness.drivers.automation import AutomationDriver
from seqharness.drivers.interactive import InteractiveDriver, SettleHook
from seqharness.snapshot.capture import RecordingSnapshotter, SnapshotCapture
from seqharness.storage.jsonl import JsonlEventStore
from seqharness.triggers.source import KeyTriggerSource

log = structlog.get_logger()


def new_run_id() -> str:
    """
    UTC timestamp + random suffix; unique even for runs created in the same second.
    """
    created_at = datetime.now(timezone.utc)
    return f"{created_at:%Y%m%dT%H%M%SZ}_{secrets.token_hex(4)}"


@dataclass(slots=True)
class EventLogComponent:
    """
    Append-only persistence of harness events to events.jsonl.
    """
    store: JsonlEventStore

    event_types: tuple[str, ...] = (
        "system.run_started",
        "system.run_stopped",
        "system.harness_error",
        "sequencer.mutation_applied",
        "sequencer.exhausted",
        "snapshot.captured",
        "interactive.step_failed",
        "trigger.key_pressed",
    )

    def subscriptions(self) -> Sequence[tuple[str, callable]]:
        return [(et, self._on_event) for et in self.event_types]

    def _on_event(self, e: Event) -> None:
        self.store.append(e)


@dataclass(frozen=True, slots=True)
class HarnessHandle:
    """
    Everything wired for one harness run in this process.
    """
    run_id: str
    case: HarnessCase
    bus: EventBus
    state: HarnessState
    sequencer: Sequencer
    reflector: StatusReflector
    lifecycle: HarnessLifecycle
    triggers: KeyTriggerSource
    automation: AutomationDriver
    interactive: InteractiveDriver
    snapshot: SnapshotCapture
    router: ComponentRouter
    wiring: RouterWiring
    components: tuple[object, ...]
    artifacts: Optional[RunArtifacts] = None
    event_store: Optional[JsonlEventStore] = None


def build_harness(
    *,
    case: HarnessCase,
    snapshot: Optional[SnapshotCapture] = None,
    run_id: Optional[str] = None,
    start_index: int = 0,
    advance_key: Optional[str] = None,
    policy: Optional[InteractivePolicy] = None,
    settle: Optional[SettleHook] = None,
    persist_events: Optional[bool] = None,
    runs_dir: Optional[Path] = None,
    extra_components: Iterable[object] = (),
) -> HarnessHandle:
    """
    Wire a HarnessCase into a runnable harness.

    Unset options fall back to the process settings.
    """
    run_id = run_id or new_run_id()
    persist = settings.persist_events if persist_events is None else persist_events

    bus = EventBus()
    state = HarnessState(run_id=run_id, length=case.length, index=start_index)
    lifecycle = HarnessLifecycle(bus=bus, state=state, case=case.name)
    sequencer = Sequencer(sequence=case.mutations, state=state, bus=bus)
    reflector = StatusReflector(target=case.status_node)
    triggers = KeyTriggerSource(bus=bus, state=state)

    if snapshot is None:
        snapshot = RecordingSnapshotter(index_of=lambda: state.index, display_of=lambda: reflector.value)

    automation = AutomationDriver(sequencer=sequencer, snapshot=snapshot, bus=bus, state=state)
    interactive = InteractiveDriver(
        sequencer=sequencer,
        triggers=triggers,
        bus=bus,
        state=state,
        key=advance_key or settings.advance_key,
        policy=policy or settings.interactive_policy,
        settle=settle,
    )

    components: list[object] = []

    art: Optional[RunArtifacts] = None
    store: Optional[JsonlEventStore] = None
    if persist:
        art = artifacts_for(runs_dir=runs_dir or settings.runs_dir, run_id=run_id)
        art.ensure_dirs()
        store = JsonlEventStore(path=art.events_jsonl)
        # event log first: it sees every event before any other handler can raise
        components.append(EventLogComponent(store=store))

    components.append(reflector)
    components.extend(extra_components)

    router = ComponentRouter(bus=bus)
    wiring = router.register(components)

    log.info(
        "harness.assembled",
        run_id=run_id,
        case=case.name,
        length=case.length,
        components=list(wiring.components()),
        artifacts_dir=str(art.run_dir) if art is not None else None,
    )

    return HarnessHandle(
        run_id=run_id,
        case=case,
        bus=bus,
        state=state,
        sequencer=sequencer,
        reflector=reflector,
        lifecycle=lifecycle,
        triggers=triggers,
        automation=automation,
        interactive=interactive,
        snapshot=snapshot,
        router=router,
        wiring=wiring,
        components=tuple(components),
        artifacts=art,
        event_store=store,
    )
