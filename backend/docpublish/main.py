"""
docpublish: FastAPI backend.

Endpoints:
  POST /v1/publish  — Trigger inputs → build, pull request, optional merge
  POST /v1/resolve  — Trigger inputs → the job a publish would run (no side effects)
  GET  /health      — Health check
"""

import time
import uuid

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from docpublish.core.config import settings
from docpublish.errors import ConfigError, DocPublishError, InvalidPlanError
from docpublish.models.release import ReleaseContext
from docpublish.pipeline.branch import build_job
from docpublish.pipeline.merge_gate import should_auto_merge
from docpublish.pipeline.orchestrator import PublishOrchestrator
from docpublish.site.builder import select_variant
from docpublish.utils.logging import logger

VERSION = "1.0.0"

app = FastAPI(
    title="docpublish API",
    description="Build the documentation site and publish it to the docs repository.",
    version=VERSION,
)


class PublishRequest(BaseModel):
    ref: str | None = Field(
        default=None,
        description="The commit SHA, tag, or branch to publish",
    )
    plan: str | None = Field(
        default=None,
        description="Release plan JSON supplied by the release pipeline",
    )


def _context(req: PublishRequest) -> ReleaseContext:
    try:
        return ReleaseContext.from_inputs(ref=req.ref, plan=req.plan)
    except InvalidPlanError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict())


@app.get("/health")
async def health():
    return {"status": "ok", "service": "docpublish-api", "version": VERSION}


@app.post("/v1/resolve")
async def resolve(req: PublishRequest):
    """Return the version, branch, variant and merge decision for a trigger."""
    ctx = _context(req)
    job = build_job(ctx)
    return {
        **job.model_dump(),
        "variant": select_variant(settings.insiders_key).value,
        "auto_merge": should_auto_merge(ctx),
    }


@app.post("/v1/publish")
async def publish(req: PublishRequest):
    """
    Run one publish and return the PublishResult.

    Configuration problems map to 422; build, git, GitHub and merge
    failures map to 502 with the structured error as detail.
    """
    request_id = uuid.uuid4().hex[:12]
    start = time.perf_counter()
    ctx = _context(req)
    logger.info("[%s] POST /v1/publish — ref=%s plan=%s", request_id, ctx.ref, ctx.plan is not None)

    try:
        result = await PublishOrchestrator(ctx, config=settings).run()
    except ConfigError as exc:
        logger.warning("[%s] Config error: %s", request_id, exc.code)
        raise HTTPException(status_code=422, detail=exc.to_dict())
    except DocPublishError as exc:
        logger.warning("[%s] Publish error: %s", request_id, exc.code)
        raise HTTPException(status_code=502, detail=exc.to_dict())
    except Exception as exc:
        logger.exception("[%s] Publish failed", request_id)
        raise HTTPException(status_code=500, detail=str(exc))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("[%s] Complete — #%d in %.0f ms", request_id, result.pull_request.number, elapsed_ms)
    return result.model_dump(mode="json")
