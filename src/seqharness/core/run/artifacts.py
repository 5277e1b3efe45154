from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

_RUN_ID_RE = re.compile(r"^[A-Za-z0-9_\-]+$")


def validate_run_id(run_id: str) -> None:
    if not run_id or not _RUN_ID_RE.match(run_id):
        raise ValueError(f"invalid run_id: {run_id!r}")


@dataclass(frozen=True, slots=True)
class RunArtifacts:
    """
    Artifact layout of a harness run directory.
    """
    run_dir: Path

    @property
    def events_jsonl(self) -> Path:
        return self.run_dir / "events.jsonl"

    def ensure_dirs(self) -> None:
        self.run_dir.mkdir(parents=True, exist_ok=True)


def artifacts_for(*, runs_dir: Path, run_id: str) -> RunArtifacts:
    validate_run_id(run_id)
    run_dir = (runs_dir / run_id).resolve()

    base = runs_dir.resolve()
    if base not in run_dir.parents:
        raise ValueError("invalid run_dir resolution")

    return RunArtifacts(run_dir=run_dir)
