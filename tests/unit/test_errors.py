"""Unit tests for the structured error catalog."""

from docpublish.errors import (
    ConfigError, DocPublishError, GitCommandError, GitHubAPIError,
    InvalidPlanError, MergeError, SiteArtifactMissingError, SiteBuildError,
)


class TestErrorCatalog:
    def test_base_error(self):
        e = DocPublishError(code="TEST", message="test msg", suggestion="try this")
        d = e.to_dict()
        assert d["error_code"] == "TEST"
        assert d["message"] == "test msg"
        assert d["suggestion"] == "try this"
        assert "detail" not in d

    def test_config_error(self):
        e = ConfigError(["ASTRAL_DOCS_PAT"])
        assert e.code == "CONFIG_MISSING"
        assert "ASTRAL_DOCS_PAT" in e.message
        assert e.to_dict()["detail"] == ["ASTRAL_DOCS_PAT"]

    def test_config_error_invalid_only(self):
        e = ConfigError([], ["DOCS_MERGE_GRACE_SECONDS"])
        assert e.code == "CONFIG_INVALID"
        assert "DOCS_MERGE_GRACE_SECONDS (invalid)" in e.message

    def test_invalid_plan(self):
        assert InvalidPlanError("bad json").code == "INVALID_PLAN"

    def test_site_build_error_keeps_output_tail(self):
        e = SiteBuildError("public", 1, "x" * 5000)
        assert e.code == "SITE_BUILD_FAILED"
        assert "public" in e.message
        assert len(e.detail) == 2000

    def test_site_artifact_missing(self):
        e = SiteArtifactMissingError("/tmp/site/uv")
        assert e.code == "SITE_ARTIFACT_MISSING"

    def test_git_command_error(self):
        e = GitCommandError("clone", 128, "Authentication failed")
        assert e.code == "GIT_CLONE_FAILED"
        assert e.operation == "clone"
        assert "128" in e.message

    def test_github_api_error(self):
        e = GitHubAPIError("create pull", 422, "Validation Failed")
        assert e.code == "GITHUB_CREATE_PULL_ERROR"
        assert e.status == 422
        assert "422" in e.message

    def test_merge_error(self):
        e = MergeError(12, "checks pending")
        assert e.code == "MERGE_FAILED"
        assert e.pull_number == 12
        assert "#12" in e.message

    def test_all_errors_are_catalog_errors(self):
        for cls in (
            ConfigError, InvalidPlanError, SiteBuildError, SiteArtifactMissingError,
            GitCommandError, GitHubAPIError, MergeError,
        ):
            assert issubclass(cls, DocPublishError)
