from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from seqharness.cases import get_case
from seqharness.cases.base import HarnessCase
from seqharness.cases.text_layout_modified_metrics import CASE_NAME
from seqharness.core.engine.sequence import MutationSequence
from seqharness.core.events.base import Event
from seqharness.core.run.assembly import build_harness
from seqharness.core.run.harness import run_automation
from seqharness.scene.nodes import SceneRenderer
from seqharness.snapshot.capture import RecordingSnapshotter


class Display:
    def __init__(self) -> None:
        self.text = "?"


def test_automation_captures_every_index_once_in_order() -> None:
    case = get_case(CASE_NAME)(SceneRenderer())
    handle = build_harness(case=case, persist_events=False)

    report = asyncio.run(run_automation(handle))

    assert report.captures == 5
    assert report.indices == (0, 1, 2, 3, 4)
    assert report.complete

    snap = handle.snapshot
    assert isinstance(snap, RecordingSnapshotter)
    assert snap.indices == (0, 1, 2, 3, 4)
    assert [r.display for r in snap.records] == ["1", "2", "3", "4", "5"]
    assert not handle.state.is_running


def test_automation_resets_to_baseline_from_any_start() -> None:
    case = HarnessCase(name="unit", mutations=MutationSequence([lambda: None] * 4), status_node=Display())
    handle = build_harness(case=case, start_index=3, persist_events=False)

    report = asyncio.run(run_automation(handle))
    assert report.indices == (0, 1, 2, 3)


def test_automation_waits_for_each_snapshot_before_stepping() -> None:
    log: list[str] = []

    class SlowSnapshot:
        async def capture(self) -> None:
            log.append("capture.begin")
            await asyncio.sleep(0.001)
            log.append("capture.end")

    case = HarnessCase(
        name="unit",
        mutations=MutationSequence([(lambda i=i: log.append(f"mutate.{i}")) for i in range(3)]),
        status_node=Display(),
    )
    handle = build_harness(case=case, snapshot=SlowSnapshot(), persist_events=False)
    asyncio.run(run_automation(handle))

    assert log == [
        "mutate.0", "capture.begin", "capture.end",
        "mutate.1", "capture.begin", "capture.end",
        "mutate.2", "capture.begin", "capture.end",
    ]


def test_mutation_failure_aborts_the_run() -> None:
    def boom() -> None:
        raise RuntimeError("font failed to load")

    case = HarnessCase(
        name="unit",
        mutations=MutationSequence([lambda: None, lambda: None, boom, lambda: None]),
        status_node=Display(),
    )
    handle = build_harness(case=case, persist_events=False)
    errors: list[Event] = []
    handle.bus.subscribe(event_type="system.harness_error", handler=errors.append)

    with pytest.raises(RuntimeError, match="font failed to load"):
        asyncio.run(run_automation(handle))

    assert handle.snapshot.indices == (0, 1)
    assert len(errors) == 1
    assert errors[0].error_type == "RuntimeError"
    assert not handle.state.is_running


def test_event_log_records_the_run(tmp_path: Path) -> None:
    case = get_case(CASE_NAME)(SceneRenderer())
    handle = build_harness(case=case, run_id="automation_1", persist_events=True, runs_dir=tmp_path)

    asyncio.run(run_automation(handle))

    assert handle.artifacts is not None
    assert handle.artifacts.events_jsonl == (tmp_path / "automation_1" / "events.jsonl").resolve()
    assert handle.event_store is not None

    events = handle.event_store.iter_events()
    types = [e["event_type"] for e in events]

    assert types[0] == "system.run_started"
    assert types[-1] == "system.run_stopped"
    assert types.count("sequencer.mutation_applied") == 5
    assert types.count("snapshot.captured") == 5
    assert types.count("sequencer.exhausted") == 1

    applied = [e["index"] for e in events if e["event_type"] == "sequencer.mutation_applied"]
    assert applied == [0, 1, 2, 3, 4]

    sequences = [e["sequence"] for e in events]
    assert sequences == sorted(sequences)
    assert events[-1]["steps_applied"] == 5


def test_invalid_run_id_is_rejected(tmp_path: Path) -> None:
    case = get_case(CASE_NAME)(SceneRenderer())
    with pytest.raises(ValueError):
        build_harness(case=case, run_id="../escape", persist_events=True, runs_dir=tmp_path)
