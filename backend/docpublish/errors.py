"""
docpublish: structured error catalog.

Every error has a code, human message, and suggested fix.
Fatal errors abort the run; the orchestrator never retries.
"""

from __future__ import annotations

from typing import Any


class DocPublishError(Exception):
    """Base error with structured code + suggestion."""

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class ConfigError(DocPublishError):
    def __init__(self, missing: list[str], invalid: list[str] | None = None):
        self.missing = missing
        self.invalid = invalid or []
        problems = [*(f"{name} (missing)" for name in missing), *(f"{name} (invalid)" for name in self.invalid)]
        super().__init__(
            code="CONFIG_MISSING" if missing else "CONFIG_INVALID",
            message=f"Missing or invalid configuration: {', '.join(problems)}",
            suggestion="Set the variables in the environment or in a .env file.",
            detail=[*missing, *self.invalid],
        )


class InvalidPlanError(DocPublishError):
    def __init__(self, reason: str):
        super().__init__(
            code="INVALID_PLAN",
            message=f"Release plan could not be parsed: {reason}",
            suggestion="Pass the plan as a JSON object with an 'announcement_tag' field.",
        )


class SiteBuildError(DocPublishError):
    def __init__(self, variant: str, returncode: int, output: str = ""):
        super().__init__(
            code="SITE_BUILD_FAILED",
            message=f"{variant} documentation build exited with status {returncode}",
            suggestion="Strict mode treats warnings as errors. Fix the reported warnings and re-run.",
            detail=output[-2000:] if output else None,
        )


class SiteArtifactMissingError(DocPublishError):
    def __init__(self, path: str):
        super().__init__(
            code="SITE_ARTIFACT_MISSING",
            message=f"Built site not found at {path}",
            suggestion="Check DOCS_SITE_DIR matches the site_dir of the MkDocs configuration.",
        )


class GitCommandError(DocPublishError):
    def __init__(self, operation: str, returncode: int, stderr: str = ""):
        self.operation = operation
        super().__init__(
            code=f"GIT_{operation.upper().replace(' ', '_')}_FAILED",
            message=f"git {operation} failed with status {returncode}",
            suggestion="Check the repository token, network access and branch state.",
            detail=stderr[-2000:] if stderr else None,
        )


class GitHubAPIError(DocPublishError):
    def __init__(self, operation: str, status: int, body: str = ""):
        self.operation = operation
        self.status = status
        super().__init__(
            code=f"GITHUB_{operation.upper().replace(' ', '_')}_ERROR",
            message=f"GitHub {operation} returned HTTP {status}",
            suggestion="Check that the token can write to the documentation repository.",
            detail=body[:500] if body else None,
        )


class MergeError(DocPublishError):
    def __init__(self, pull_number: int, reason: str):
        self.pull_number = pull_number
        super().__init__(
            code="MERGE_FAILED",
            message=f"Squash-merge of pull request #{pull_number} failed: {reason}",
            suggestion="The pull request was left open. Merge it by hand once checks pass.",
        )
