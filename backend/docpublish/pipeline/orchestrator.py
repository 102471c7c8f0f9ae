"""
docpublish: publish orchestrator.

Runs the full publication pipeline as a state machine:

  RECEIVED → RESOLVED → BUILT → CLONED → COMMITTED → PR_OPENED
  → (MERGED | DONE)

Each step is timed, logged, and recorded in the PublishResult. Nothing is
retried; a failed step marks the run FAILED and re-raises.
"""

from __future__ import annotations

import asyncio
import tempfile
import time
from pathlib import Path
from typing import Any, Awaitable, Callable

from docpublish.core.config import AppConfig, settings, validate_config
from docpublish.errors import DocPublishError
from docpublish.git.repository import DocsRepository
from docpublish.github.auth import GitHubCredentials
from docpublish.github.client import GitHubClient
from docpublish.models.job import (
    BuildVariant,
    CommitResult,
    JobState,
    PublishJob,
    PublishResult,
    PullRequestRecord,
    SiteArtifact,
    StepTiming,
)
from docpublish.models.release import ReleaseContext
from docpublish.pipeline.branch import build_job
from docpublish.pipeline.merge_gate import MergeGate, should_auto_merge
from docpublish.pipeline.pull_requests import PullRequestLifecycle, canonical_title
from docpublish.site.builder import SiteBuilder, select_variant
from docpublish.utils.logging import logger

Cloner = Callable[..., Awaitable[DocsRepository]]


class PipelineContext:
    """Mutable per-step outputs; the job itself is immutable."""

    def __init__(self):
        self.job: PublishJob | None = None
        self.variant: BuildVariant | None = None
        self.artifact: SiteArtifact | None = None
        self.repo: DocsRepository | None = None
        self.commit: CommitResult | None = None
        self.pull_request: PullRequestRecord | None = None
        self.superseded: list[int] = []
        self.close_failures: list[int] = []
        self.merge_attempted: bool = False
        self.merged: bool = False
        self.warnings: list[str] = []


class PublishOrchestrator:
    """
    State-machine orchestrator for the documentation publish pipeline.

    Collaborators default to the real MkDocs builder, git CLI and GitHub
    API and can be replaced for tests.
    """

    def __init__(
        self,
        release: ReleaseContext,
        config: AppConfig | None = None,
        builder: SiteBuilder | None = None,
        github: Any = None,
        cloner: Cloner | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
        now: Callable[[], float] = time.time,
    ):
        self.release = release
        self.config = config or settings
        self.builder = builder or SiteBuilder(
            project_dir=self.config.project_dir,
            site_dir=self.config.site_dir,
            install_deps=self.config.install_deps,
        )
        self.github = github or GitHubClient(
            api_url=self.config.docs_repo.api_url,
            owner=self.config.docs_repo.owner,
            repo=self.config.docs_repo.name,
            credentials=GitHubCredentials(token=self.config.docs_repo.token),
        )
        self.cloner = cloner or DocsRepository.clone
        self.merge_gate = MergeGate(
            self.github,
            grace_seconds=self.config.merge_grace_seconds,
            sleep=sleep or asyncio.sleep,
        )
        self._now = now
        self.state = JobState.RECEIVED
        self.ctx = PipelineContext()
        self.timings: list[StepTiming] = []

    def _record_step(self, name: str, start: float, status: str = "ok", detail: str = ""):
        ms = int((time.perf_counter() - start) * 1000)
        self.timings.append(StepTiming(step=name, duration_ms=ms, status=status, detail=detail))
        symbol = "✓" if status == "ok" else ("⊘" if status == "skipped" else "✗")
        logger.info("  %s %s — %dms %s", symbol, name, ms, detail)

    async def run(self) -> PublishResult:
        """Execute the full pipeline. Returns a complete PublishResult."""
        logger.info("=" * 60)
        logger.info("Publish starting (repo=%s)", self.config.docs_repo.full_name)
        logger.info("=" * 60)
        pipeline_start = time.perf_counter()

        try:
            self._step_resolve()
            await self._step_build()
            if self.config.clone_dir:
                await self._publish(Path(self.config.clone_dir))
            else:
                with tempfile.TemporaryDirectory(prefix="docpublish-") as tmp:
                    await self._publish(Path(tmp) / self.config.docs_repo.name)
        except DocPublishError as exc:
            self.state = JobState.FAILED
            logger.error("Publish failed: [%s] %s", exc.code, exc.message)
            raise
        except Exception:
            self.state = JobState.FAILED
            raise

        self.state = JobState.MERGED if self.ctx.merged else JobState.DONE
        total_ms = int((time.perf_counter() - pipeline_start) * 1000)
        logger.info("=" * 60)
        logger.info(
            "Publish complete — %s → #%d (merged=%s), %dms",
            self.ctx.job.branch_name, self.ctx.pull_request.number, self.ctx.merged, total_ms,
        )
        logger.info("=" * 60)
        return self.result()

    def result(self) -> PublishResult:
        return PublishResult(
            job=self.ctx.job,
            variant=self.ctx.variant,
            state=self.state,
            commit=self.ctx.commit,
            pull_request=self.ctx.pull_request,
            superseded=self.ctx.superseded,
            close_failures=self.ctx.close_failures,
            merge_attempted=self.ctx.merge_attempted,
            merged=self.ctx.merged,
            timings=self.timings,
            warnings=self.ctx.warnings,
        )

    async def _publish(self, clone_dest: Path) -> None:
        await self._step_clone(clone_dest)
        await self._step_commit()
        await self._step_pull_request()
        await self._step_merge()

    def _step_resolve(self):
        t = time.perf_counter()
        validate_config(self.config)
        self.ctx.job = build_job(self.release, now=int(self._now()))
        self.ctx.variant = select_variant(self.config.insiders_key)
        self.state = JobState.RESOLVED
        logger.info(
            "  Version: %s | branch: %s | variant: %s",
            self.ctx.job.version, self.ctx.job.branch_name, self.ctx.variant.value,
        )
        self._record_step("resolve", t)

    async def _step_build(self):
        t = time.perf_counter()
        try:
            self.ctx.artifact = await self.builder.build(self.ctx.variant)
        except DocPublishError as exc:
            self._record_step("build", t, "failed", exc.code)
            raise
        self.state = JobState.BUILT
        self._record_step("build", t, detail=self.ctx.variant.value)

    async def _step_clone(self, dest: Path):
        t = time.perf_counter()
        self.ctx.repo = await self.cloner(
            self.config.docs_repo.clone_url(), dest, branch=self.config.docs_repo.base_branch,
        )
        self.state = JobState.CLONED
        self._record_step("clone", t)

    async def _step_commit(self):
        t = time.perf_counter()
        repo = self.ctx.repo
        repo.replace_subtree(self.config.target_path, self.ctx.artifact)
        self.ctx.commit = await repo.commit(
            branch_name=self.ctx.job.branch_name,
            message=canonical_title(self.config.project_name, self.ctx.job.version),
            target_path=self.config.target_path,
            committer=self.config.committer,
        )
        self.state = JobState.COMMITTED
        self._record_step("commit", t, detail=f"changed={self.ctx.commit.changed}")

    async def _step_pull_request(self):
        t = time.perf_counter()
        lifecycle = PullRequestLifecycle(
            self.github,
            project_name=self.config.project_name,
            base_branch=self.config.docs_repo.base_branch,
            label=self.config.pr_label or None,
        )
        outcome = await lifecycle.run(self.ctx.job, self.ctx.repo)
        self.ctx.pull_request = outcome.pull_request
        self.ctx.superseded = outcome.superseded
        self.ctx.close_failures = outcome.close_failures
        self.ctx.warnings.extend(outcome.warnings)
        self.state = JobState.PR_OPENED
        self._record_step("pull_request", t, detail=f"#{outcome.pull_request.number}")

    async def _step_merge(self):
        t = time.perf_counter()
        if not should_auto_merge(self.release):
            self._record_step("merge", t, "skipped", "manual review")
            return
        self.ctx.merge_attempted = True
        try:
            self.ctx.merged = await self.merge_gate.run(self.release, self.ctx.pull_request)
        except DocPublishError as exc:
            self._record_step("merge", t, "failed", exc.code)
            raise
        self._record_step("merge", t)
