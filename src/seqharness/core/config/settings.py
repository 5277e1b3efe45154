from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

InteractivePolicy = Literal["serialize", "overlap"]


class HarnessSettings(BaseSettings):
    """
    Process-level configuration for the harness.

    Single source of truth for:
    - environment selection
    - logging behavior
    - interactive trigger policy
    - run artifact locations
    """

    model_config = SettingsConfigDict(
        env_prefix="SEQH_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "ci", "staging"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # ---- Interactive mode --------------------------------------------

    advance_key: str = Field(
        default="ArrowRight",
        description="Trigger key that advances the sequence in interactive mode",
    )

    interactive_policy: InteractivePolicy = Field(
        default="serialize",
        description="serialize: one advance in flight at a time; overlap: fire-and-forget",
    )

    case: Optional[str] = Field(
        default=None,
        description="Case the HTTP app binds on startup (interactive mode)",
    )

    # ---- Runs & artifacts --------------------------------------------

    runs_dir: Path = Field(
        default=Path("runs"),
        description="Root directory for run artifacts",
    )

    persist_events: bool = Field(
        default=False,
        description="Append harness events to <runs_dir>/<run_id>/events.jsonl",
    )


# Singleton settings object
settings = HarnessSettings()
