"""
docpublish: pull request lifecycle.

  SEARCHING → DEDUP → PUSHED → CREATED → (DONE | MERGE_GATE)

Only the newest publish for a version stays actionable: open pull requests
carrying the same canonical title are closed before the new one is opened.
Searching and closing are best-effort; pushing and creating are fatal.

Supersession is keyed on the title alone and is not locked. Two concurrent
runs for one version can each miss the other's pull request, or one can
close a request the other has just opened.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from docpublish.errors import DocPublishError
from docpublish.models.job import PublishJob, PullRequestRecord, PullRequestState
from docpublish.utils.logging import logger, step_timer


class PullRequestAPI(Protocol):
    async def list_open_pulls(self) -> list[PullRequestRecord]: ...
    async def close_pull(self, number: int) -> None: ...
    async def create_pull(self, base: str, head: str, title: str, body: str) -> PullRequestRecord: ...
    async def add_labels(self, number: int, labels: list[str]) -> None: ...


class BranchPusher(Protocol):
    async def push(self, branch_name: str, remote: str = "origin") -> None: ...


def canonical_title(project_name: str, display_name: str) -> str:
    return f"Update {project_name} documentation for {display_name}"


def pull_request_body(display_name: str) -> str:
    return f"Automated documentation update for {display_name}"


def superseded_pull_numbers(title: str, open_pulls: Iterable[PullRequestRecord]) -> set[int]:
    """Open pull requests that a new publish under `title` replaces."""
    return {pr.number for pr in open_pulls if pr.title == title}


@dataclass
class LifecycleOutcome:
    pull_request: PullRequestRecord
    superseded: list[int] = field(default_factory=list)
    close_failures: list[int] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class PullRequestLifecycle:
    def __init__(
        self,
        api: PullRequestAPI,
        project_name: str,
        base_branch: str = "main",
        label: str | None = "documentation",
    ):
        self.api = api
        self.project_name = project_name
        self.base_branch = base_branch
        self.label = label
        self.state = PullRequestState.SEARCHING

    async def _search(self, title: str, outcome: LifecycleOutcome) -> set[int]:
        self.state = PullRequestState.SEARCHING
        try:
            open_pulls = await self.api.list_open_pulls()
        except DocPublishError as exc:
            msg = f"Could not list open pull requests ({exc.code}); skipping dedup"
            logger.warning("  %s", msg)
            outcome.warnings.append(msg)
            return set()
        return superseded_pull_numbers(title, open_pulls)

    async def _dedup(self, numbers: set[int], outcome: LifecycleOutcome) -> None:
        self.state = PullRequestState.DEDUP
        for number in sorted(numbers):
            try:
                await self.api.close_pull(number)
            except DocPublishError as exc:
                msg = f"Could not close superseded pull request #{number} ({exc.code})"
                logger.warning("  %s", msg)
                outcome.close_failures.append(number)
                outcome.warnings.append(msg)
                continue
            logger.info("  Closed superseded pull request #%d", number)
            outcome.superseded.append(number)

    async def run(self, job: PublishJob, repo: BranchPusher) -> LifecycleOutcome:
        """Supersede, push and open the pull request for `job`."""
        title = canonical_title(self.project_name, job.display_name)
        outcome = LifecycleOutcome(pull_request=PullRequestRecord(number=0, title=title))

        with step_timer("Supersede open pull requests"):
            numbers = await self._search(title, outcome)
            await self._dedup(numbers, outcome)

        await repo.push(job.branch_name)
        self.state = PullRequestState.PUSHED

        with step_timer("Open pull request"):
            pr = await self.api.create_pull(
                base=self.base_branch,
                head=job.branch_name,
                title=title,
                body=pull_request_body(job.display_name),
            )
            if self.label:
                await self.api.add_labels(pr.number, [self.label])
            logger.info("  Opened pull request #%d %s", pr.number, pr.url)

        self.state = PullRequestState.CREATED
        outcome.pull_request = pr
        return outcome
