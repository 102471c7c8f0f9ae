"""
docpublish: MkDocs site builder.

The variant is picked once from credential presence, then the site is built
in strict mode so any warning fails the run before the docs repository is
touched.

  PUBLIC   → mkdocs build --strict -f mkdocs.public.yml
  INSIDERS → mkdocs build --strict -f mkdocs.insiders.yml
"""

from __future__ import annotations

import sys
from pathlib import Path

from docpublish.errors import SiteArtifactMissingError, SiteBuildError
from docpublish.models.job import BuildVariant, SiteArtifact
from docpublish.utils.logging import logger, step_timer
from docpublish.utils.process import Runner, run_command


def select_variant(insiders_key: str | None) -> BuildVariant:
    """Insiders iff the insiders credential is present."""
    if insiders_key and insiders_key.strip():
        return BuildVariant.INSIDERS
    return BuildVariant.PUBLIC


class SiteBuilder:
    def __init__(
        self,
        project_dir: Path | str,
        site_dir: str = "site/uv",
        install_deps: bool = False,
        runner: Runner = run_command,
    ):
        self.project_dir = Path(project_dir)
        self.site_dir = site_dir
        self.install_deps = install_deps
        self._run = runner

    def build_command(self, variant: BuildVariant) -> list[str]:
        return ["mkdocs", "build", "--strict", "-f", variant.config_file]

    async def build(self, variant: BuildVariant) -> SiteArtifact:
        """Build the site for `variant` and return the output directory."""
        if self.install_deps:
            await self._install(variant)

        with step_timer(f"Build {variant.value} docs"):
            result = await self._run(self.build_command(variant), cwd=self.project_dir)
            if not result.ok:
                logger.error("  mkdocs failed:\n%s", result.stderr)
                raise SiteBuildError(variant.value, result.returncode, result.stderr)

        artifact = self.project_dir / self.site_dir
        if not artifact.is_dir():
            raise SiteArtifactMissingError(str(artifact))
        return SiteArtifact(path=artifact, variant=variant)

    async def _install(self, variant: BuildVariant) -> None:
        with step_timer(f"Install {variant.value} dependencies"):
            result = await self._run(
                [sys.executable, "-m", "pip", "install", "-r", variant.requirements_file],
                cwd=self.project_dir,
            )
            if not result.ok:
                raise SiteBuildError(variant.value, result.returncode, result.stderr)
