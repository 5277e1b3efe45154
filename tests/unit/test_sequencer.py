from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from seqharness.core.engine.reflector import StatusReflector
from seqharness.core.engine.router import ComponentRouter
from seqharness.core.engine.sequence import MutationSequence
from seqharness.core.engine.sequencer import Sequencer
from seqharness.core.engine.state import HarnessState
from seqharness.core.events.base import Event
from seqharness.core.events.bus import EventBus


@dataclass
class Display:
    text: str = "1"


@dataclass
class Entities:
    """
    Shared entities: each mutation records its index here.
    """
    applied: list[int] = field(default_factory=list)


def _build(length: int = 5, *, start: int = 0):
    entities = Entities()
    mutations = MutationSequence([(lambda i=i: entities.applied.append(i)) for i in range(length)])
    bus = EventBus()
    state = HarnessState(run_id="test", length=length, index=start)
    sequencer = Sequencer(sequence=mutations, state=state, bus=bus)
    display = Display()
    ComponentRouter(bus=bus).register([StatusReflector(target=display)])
    return sequencer, entities, display


def test_concrete_non_looping_scenario() -> None:
    seq, entities, display = _build(5)

    assert seq.step(loop=False, target=0) is True
    assert display.text == "1"

    for expected in ("2", "3", "4"):
        assert seq.step(loop=False) is True
        assert display.text == expected
    assert seq.current_index == 3

    assert seq.step(loop=False) is True
    assert display.text == "5"
    assert seq.step(loop=False) is False

    assert seq.current_index == 4
    assert display.text == "5"
    assert entities.applied == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("start", range(5))
def test_non_looping_visits_remaining_indices_once(start: int) -> None:
    seq, entities, _ = _build(5, start=start)

    visited = []
    while seq.step(loop=False):
        visited.append(seq.current_index)

    assert visited == list(range(start + 1, 5))
    assert entities.applied == visited
    assert seq.current_index == 4


@pytest.mark.parametrize("start", range(5))
def test_looping_never_fails_and_is_periodic(start: int) -> None:
    seq, entities, display = _build(5, start=start)

    visited = []
    for _ in range(10):
        assert seq.step(loop=True) is True
        visited.append(seq.current_index)
        assert display.text == str(seq.current_index + 1)

    assert visited[:5] == visited[5:]
    assert sorted(visited[:5]) == [0, 1, 2, 3, 4]
    assert entities.applied == visited


def test_looping_wraps_from_last_index_to_zero() -> None:
    seq, _, display = _build(5)
    seq.step(loop=False, target=4)
    assert display.text == "5"

    assert seq.step(loop=True) is True
    assert seq.current_index == 0
    assert display.text == "1"


def test_failed_step_changes_nothing() -> None:
    seq, entities, display = _build(3)
    seq.step(loop=False, target=2)
    applied_before = list(entities.applied)

    for _ in range(3):
        assert seq.step(loop=False) is False

    assert seq.current_index == 2
    assert display.text == "3"
    assert entities.applied == applied_before


def test_explicit_target_past_end_without_loop_is_rejected() -> None:
    seq, entities, _ = _build(3)
    assert seq.step(loop=False, target=7) is False
    assert seq.current_index == 0
    assert entities.applied == []

    assert seq.step(loop=True, target=7) is True
    assert seq.current_index == 0
    assert entities.applied == [0]


def test_gap_in_sequence_is_a_silent_no_op() -> None:
    hits: list[int] = []
    mutations = MutationSequence.from_mapping({0: lambda: hits.append(0), 2: lambda: hits.append(2)}, length=3)
    bus = EventBus()
    state = HarnessState(run_id="test", length=3)
    seq = Sequencer(sequence=mutations, state=state, bus=bus)
    display = Display()
    ComponentRouter(bus=bus).register([StatusReflector(target=display)])

    assert seq.step(target=0) is True
    assert seq.step() is True
    assert seq.current_index == 1
    assert display.text == "2"
    assert seq.step() is True
    assert hits == [0, 2]


def test_negative_target_is_rejected_without_state_change() -> None:
    seq, entities, display = _build(3)
    seq.step(target=1)

    with pytest.raises(ValueError):
        seq.step(target=-1)

    assert seq.current_index == 1
    assert display.text == "2"
    assert entities.applied == [1]


def test_mutation_failure_propagates_and_skips_reflector() -> None:
    def boom() -> None:
        raise RuntimeError("font not loaded")

    bus = EventBus()
    state = HarnessState(run_id="test", length=2)
    seq = Sequencer(sequence=MutationSequence([lambda: None, boom]), state=state, bus=bus)
    display = Display()
    ComponentRouter(bus=bus).register([StatusReflector(target=display)])

    seq.step(target=0)
    with pytest.raises(RuntimeError, match="font not loaded"):
        seq.step()

    # index already committed, display not refreshed
    assert seq.current_index == 1
    assert display.text == "1"


def test_step_publishes_mutation_applied_and_exhausted() -> None:
    seq, _, _ = _build(2)
    bus = seq._bus  # type: ignore[attr-defined]
    seen: list[Event] = []
    bus.subscribe(event_type="sequencer.mutation_applied", handler=seen.append)
    bus.subscribe(event_type="sequencer.exhausted", handler=seen.append)

    seq.step(target=0)
    seq.step()
    seq.step()

    assert [e.event_type for e in seen] == [
        "sequencer.mutation_applied",
        "sequencer.mutation_applied",
        "sequencer.exhausted",
    ]
    assert [e.sequence for e in seen] == [1, 2, 3]


def test_sequence_validation() -> None:
    with pytest.raises(ValueError):
        MutationSequence([])
    with pytest.raises(TypeError):
        MutationSequence([lambda: None, "not callable"])  # type: ignore[list-item]
    with pytest.raises(ValueError):
        MutationSequence.from_mapping({3: lambda: None}, length=3)
    with pytest.raises(ValueError):
        HarnessState(run_id="test", length=3, index=3)
