"""
docpublish: job and pipeline output contracts.

Every publish returns a PublishResult with full traceability:
timings, the branch and pull request produced, and what was superseded.
"""

from __future__ import annotations

import enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class JobState(str, enum.Enum):
    RECEIVED = "RECEIVED"
    RESOLVED = "RESOLVED"
    BUILT = "BUILT"
    CLONED = "CLONED"
    COMMITTED = "COMMITTED"
    PR_OPENED = "PR_OPENED"
    MERGED = "MERGED"
    DONE = "DONE"
    FAILED = "FAILED"


class PullRequestState(str, enum.Enum):
    SEARCHING = "SEARCHING"
    DEDUP = "DEDUP"
    PUSHED = "PUSHED"
    CREATED = "CREATED"
    DONE = "DONE"
    MERGE_GATE = "MERGE_GATE"


class BuildVariant(str, enum.Enum):
    PUBLIC = "public"
    INSIDERS = "insiders"

    @property
    def config_file(self) -> str:
        return f"mkdocs.{self.value}.yml"

    @property
    def requirements_file(self) -> str:
        if self is BuildVariant.INSIDERS:
            return "docs/requirements-insiders.txt"
        return "docs/requirements.txt"


class PublishJob(BaseModel):
    """Per-run identity, created once and threaded through every stage."""

    model_config = ConfigDict(frozen=True)

    version: str
    display_name: str
    branch_name: str
    timestamp: int


class SiteArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    variant: BuildVariant


class PullRequestRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    branch_ref: str = ""
    url: str = ""


class CommitResult(BaseModel):
    sha: str
    changed: bool


class StepTiming(BaseModel):
    step: str
    duration_ms: int
    status: str = "ok"  # ok | skipped | failed
    detail: str = ""


class PublishResult(BaseModel):
    """Complete output contract for one publish run."""

    job: PublishJob
    variant: BuildVariant
    state: JobState
    commit: CommitResult | None = None
    pull_request: PullRequestRecord | None = None
    superseded: list[int] = Field(default_factory=list)
    close_failures: list[int] = Field(default_factory=list)
    merge_attempted: bool = False
    merged: bool = False
    timings: list[StepTiming] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
