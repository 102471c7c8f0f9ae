"""
docpublish: documentation repository client.

Thin wrapper over the git CLI: clone → replace subtree → commit → push.
Every git failure is fatal and surfaces as GitCommandError.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from docpublish.core.config import CommitterConfig
from docpublish.errors import GitCommandError
from docpublish.models.job import CommitResult, SiteArtifact
from docpublish.utils.logging import logger, step_timer
from docpublish.utils.process import Runner, run_command


class DocsRepository:
    """A local clone of the documentation repository."""

    def __init__(self, path: Path | str, runner: Runner = run_command):
        self.path = Path(path)
        self._run = runner

    @classmethod
    async def clone(
        cls,
        url: str,
        dest: Path | str,
        branch: str | None = None,
        runner: Runner = run_command,
    ) -> "DocsRepository":
        """Full clone of `url` into `dest`, checked out at `branch` when given."""
        dest = Path(dest)
        args = ["git", "clone"]
        if branch:
            args += ["--branch", branch]
        with step_timer("Clone docs repository"):
            result = await runner([*args, url, str(dest)])
            if not result.ok:
                raise GitCommandError("clone", result.returncode, result.stderr)
        return cls(dest, runner=runner)

    async def _git(self, operation: str, *args: str) -> str:
        result = await self._run(["git", *args], cwd=self.path)
        if not result.ok:
            raise GitCommandError(operation, result.returncode, result.stderr)
        return result.stdout.strip()

    def replace_subtree(self, target_path: str, artifact: SiteArtifact) -> Path:
        """Make `target_path` an exact mirror of the artifact tree."""
        target = self.path / target_path
        with step_timer(f"Copy site into {target_path}"):
            if target.exists():
                shutil.rmtree(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(artifact.path, target)
        return target

    async def configure_identity(self, committer: CommitterConfig) -> None:
        await self._git("config", "config", "user.name", committer.name)
        await self._git("config", "config", "user.email", committer.email)

    async def has_staged_changes(self) -> bool:
        result = await self._run(["git", "diff", "--cached", "--quiet"], cwd=self.path)
        if result.returncode not in (0, 1):
            raise GitCommandError("diff", result.returncode, result.stderr)
        return result.returncode == 1

    async def commit(
        self,
        branch_name: str,
        message: str,
        target_path: str,
        committer: CommitterConfig,
    ) -> CommitResult:
        """Create `branch_name` from the checked-out base tip and commit the subtree.

        An unchanged tree is recorded as an empty commit so that the branch
        still differs from its base and a pull request can be opened.
        """
        with step_timer(f"Commit on {branch_name}"):
            await self.configure_identity(committer)
            await self._git("checkout", "checkout", "-b", branch_name)
            await self._git("add", "add", "--all", "--", target_path)

            changed = await self.has_staged_changes()
            if changed:
                await self._git("commit", "commit", "-m", message)
            else:
                logger.info("  No changes under %s; recording an empty commit", target_path)
                await self._git("commit", "commit", "--allow-empty", "-m", message)

            sha = await self._git("rev-parse", "rev-parse", "HEAD")
            logger.info("  Committed %s (changed=%s)", sha[:12], changed)
            return CommitResult(sha=sha, changed=changed)

    async def push(self, branch_name: str, remote: str = "origin") -> None:
        with step_timer(f"Push {branch_name}"):
            await self._git("push", "push", remote, branch_name)
