"""
docpublish: version resolution.

Turns the trigger context into the version being published and the name
shown in commit messages and pull request titles.
"""

from __future__ import annotations

from docpublish.models.release import ReleaseContext

DEFAULT_VERSION = "latest"


def resolve_version(ctx: ReleaseContext) -> str:
    """Announcement tag first, then the dispatched ref, then 'latest'."""
    if ctx.plan is not None and ctx.plan.announcement_tag:
        return ctx.plan.announcement_tag
    if ctx.ref:
        return ctx.ref
    return DEFAULT_VERSION


def display_name_for(version: str) -> str:
    # Identity for now; kept separate so titles can diverge from versions.
    return version
