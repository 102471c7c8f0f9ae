"""docpublish data models: typed contracts for the entire pipeline."""

from docpublish.models.release import (
    ReleaseContext,
    ReleasePlan,
)
from docpublish.models.job import (
    BuildVariant,
    CommitResult,
    JobState,
    PublishJob,
    PublishResult,
    PullRequestRecord,
    PullRequestState,
    SiteArtifact,
    StepTiming,
)

__all__ = [
    "ReleaseContext",
    "ReleasePlan",
    "BuildVariant",
    "CommitResult",
    "JobState",
    "PublishJob",
    "PublishResult",
    "PullRequestRecord",
    "PullRequestState",
    "SiteArtifact",
    "StepTiming",
]
