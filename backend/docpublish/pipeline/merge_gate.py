"""
docpublish: merge gate.

Only explicitly tagged releases are merged automatically; manual dispatches
and implicit releases wait for a human. There is one merge attempt per run.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Protocol

from docpublish.errors import DocPublishError, MergeError
from docpublish.models.job import PullRequestRecord
from docpublish.models.release import ReleaseContext
from docpublish.utils.logging import logger, step_timer

DEFAULT_GRACE_SECONDS = 10.0


class MergeAPI(Protocol):
    async def merge_pull(self, number: int, method: str = "squash") -> dict[str, Any]: ...


def should_auto_merge(ctx: ReleaseContext) -> bool:
    return ctx.plan is not None and not ctx.plan.announcement_tag_is_implicit


class MergeGate:
    def __init__(
        self,
        api: MergeAPI,
        grace_seconds: float = DEFAULT_GRACE_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.api = api
        self.grace_seconds = grace_seconds
        self._sleep = sleep

    async def run(self, ctx: ReleaseContext, pull: PullRequestRecord) -> bool:
        """Merge `pull` if the trigger allows it. Returns whether it merged.

        Raises MergeError when a permitted merge fails; the pull request is
        left open.
        """
        if not should_auto_merge(ctx):
            logger.info("  Leaving pull request #%d open for review", pull.number)
            return False

        with step_timer(f"Squash-merge pull request #{pull.number}"):
            # Lets required status checks register on the new pull request.
            await self._sleep(self.grace_seconds)
            try:
                await self.api.merge_pull(pull.number, method="squash")
            except DocPublishError as exc:
                raise MergeError(pull.number, exc.message) from exc
        return True
