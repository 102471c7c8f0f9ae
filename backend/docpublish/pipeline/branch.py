"""
docpublish: branch naming.

Branch names are `update-docs-<display name>-<unix timestamp>`. The
timestamp is the only uniqueness guarantee: two runs for the same version
started within the same second produce the same name, and the second push
is rejected.
"""

from __future__ import annotations

import re
import time

from docpublish.models.job import PublishJob
from docpublish.models.release import ReleaseContext
from docpublish.pipeline.version import display_name_for, resolve_version

BRANCH_PREFIX = "update-docs"

_DISALLOWED = re.compile(r"[^A-Za-z0-9._]")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def sanitize_branch_component(name: str) -> str:
    """Replace characters outside [A-Za-z0-9._] with '-' and collapse runs."""
    return _HYPHEN_RUNS.sub("-", _DISALLOWED.sub("-", name))


def branch_name_for(display_name: str, timestamp: int) -> str:
    return f"{BRANCH_PREFIX}-{sanitize_branch_component(display_name)}-{timestamp}"


def build_job(ctx: ReleaseContext, now: int | None = None) -> PublishJob:
    """Resolve everything that identifies this run, exactly once."""
    version = resolve_version(ctx)
    display_name = display_name_for(version)
    timestamp = int(time.time()) if now is None else now
    return PublishJob(
        version=version,
        display_name=display_name,
        branch_name=branch_name_for(display_name, timestamp),
        timestamp=timestamp,
    )
