"""
docpublish CLI.

  docpublish publish --plan '<release plan JSON>'   (release pipeline callback)
  docpublish publish --ref v1.2.3                   (manual dispatch)
  docpublish resolve --ref v1.2.3                   (print the job, no side effects)

Exits 0 whether or not the pull request was merged, 1 on any failure.
"""

import asyncio
import dataclasses
import json
from typing import Optional

import typer

from docpublish.core.config import settings
from docpublish.errors import DocPublishError
from docpublish.models.release import ReleaseContext
from docpublish.pipeline.branch import build_job
from docpublish.pipeline.merge_gate import should_auto_merge
from docpublish.pipeline.orchestrator import PublishOrchestrator
from docpublish.site.builder import select_variant
from docpublish.utils.logging import logger

app = typer.Typer(name="docpublish", help="Build the documentation site and publish it to the docs repository.")

REF_HELP = "Commit SHA, tag, or branch being published."
PLAN_HELP = "Release plan JSON from the release pipeline."


def _context(ref: Optional[str], plan: Optional[str]) -> ReleaseContext:
    try:
        return ReleaseContext.from_inputs(ref=ref, plan=plan)
    except DocPublishError as exc:
        typer.echo(json.dumps(exc.to_dict(), indent=2), err=True)
        raise typer.Exit(code=1)


@app.command()
def resolve(
    ref: Optional[str] = typer.Option(None, "--ref", help=REF_HELP),
    plan: Optional[str] = typer.Option(None, "--plan", help=PLAN_HELP),
):
    """
    Print the version, branch name, variant and merge decision for a trigger.
    """
    ctx = _context(ref, plan)
    job = build_job(ctx)
    payload = job.model_dump()
    payload["variant"] = select_variant(settings.insiders_key).value
    payload["auto_merge"] = should_auto_merge(ctx)
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def publish(
    ref: Optional[str] = typer.Option(None, "--ref", help=REF_HELP),
    plan: Optional[str] = typer.Option(None, "--plan", help=PLAN_HELP),
    project_dir: Optional[str] = typer.Option(None, "--project-dir", help="Directory holding the MkDocs configs."),
    no_merge_wait: bool = typer.Option(False, "--no-merge-wait", help="Skip the grace period before merging."),
):
    """
    Build the site, open a pull request on the docs repository, and merge it
    for explicitly tagged releases.
    """
    ctx = _context(ref, plan)
    config = settings
    if project_dir:
        config = dataclasses.replace(config, project_dir=project_dir)
    if no_merge_wait:
        config = dataclasses.replace(config, merge_grace_seconds=0.0)

    try:
        result = asyncio.run(PublishOrchestrator(ctx, config=config).run())
    except DocPublishError as exc:
        typer.echo(json.dumps(exc.to_dict(), indent=2), err=True)
        raise typer.Exit(code=1)
    except Exception:
        logger.exception("Publish failed unexpectedly")
        raise typer.Exit(code=1)

    typer.echo(result.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
