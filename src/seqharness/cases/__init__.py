from __future__ import annotations

from typing import Callable

from seqharness.cases.base import HarnessCase
from seqharness.cases.text_layout_modified_metrics import (
    CASE_NAME as _TEXT_LAYOUT_MODIFIED_METRICS,
    build as _build_text_layout_modified_metrics,
)
from seqharness.scene.nodes import RenderingEngine

CaseBuilder = Callable[[RenderingEngine], HarnessCase]

CASES: dict[str, CaseBuilder] = {
    _TEXT_LAYOUT_MODIFIED_METRICS: _build_text_layout_modified_metrics,
}


def get_case(name: str) -> CaseBuilder:
    try:
        return CASES[name]
    except KeyError:
        raise KeyError(f"unknown case: {name!r} (known: {sorted(CASES)})") from None
