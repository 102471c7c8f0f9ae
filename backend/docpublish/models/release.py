"""
docpublish: trigger context models.

A run is started either by a manual dispatch (a ref) or by the release
pipeline (a plan). Both arrive as strings and are normalised here.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from docpublish.errors import InvalidPlanError


class ReleasePlan(BaseModel):
    """The subset of the release-pipeline plan this pipeline reads."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    announcement_tag: str = ""
    announcement_tag_is_implicit: bool = False

    @field_validator("announcement_tag", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


class ReleaseContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    ref: str | None = None
    plan: ReleasePlan | None = None

    @field_validator("ref", mode="before")
    @classmethod
    def _blank_ref_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_inputs(cls, ref: str | None = None, plan: str | None = None) -> "ReleaseContext":
        """Build a context from raw trigger inputs; `plan` is a JSON string."""
        parsed = None
        if plan is not None and plan.strip():
            try:
                parsed = ReleasePlan.model_validate_json(plan)
            except ValidationError as exc:
                raise InvalidPlanError(str(exc.errors()[0].get("msg", exc))) from exc
        return cls(ref=ref, plan=parsed)

    @property
    def from_release(self) -> bool:
        return self.plan is not None
