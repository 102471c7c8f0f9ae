"""Unit tests for the pull request lifecycle and supersede policy."""

import pytest

from docpublish.errors import GitCommandError, GitHubAPIError
from docpublish.models.job import PublishJob, PullRequestRecord, PullRequestState
from docpublish.pipeline.pull_requests import (
    PullRequestLifecycle,
    canonical_title,
    pull_request_body,
    superseded_pull_numbers,
)

TITLE = "Update uv documentation for v1.2.3"


@pytest.fixture
def job():
    return PublishJob(
        version="v1.2.3",
        display_name="v1.2.3",
        branch_name="update-docs-v1.2.3-1718000000",
        timestamp=1718000000,
    )


def _pr(number, title=TITLE):
    return PullRequestRecord(number=number, title=title, branch_ref=f"b{number}")


class TestPolicy:
    def test_canonical_title(self):
        assert canonical_title("uv", "0.8.4") == "Update uv documentation for 0.8.4"

    def test_body(self):
        assert pull_request_body("0.8.4") == "Automated documentation update for 0.8.4"

    def test_exact_title_match_only(self):
        pulls = [
            _pr(1),
            _pr(2),
            _pr(3, "Update uv documentation for v1.2.3-rc1"),
            _pr(4, "update uv documentation for v1.2.3"),
            _pr(5, "Update ruff documentation for v1.2.3"),
        ]
        assert superseded_pull_numbers(TITLE, pulls) == {1, 2}

    def test_nothing_open(self):
        assert superseded_pull_numbers(TITLE, []) == set()


class TestLifecycle:
    async def test_closes_duplicates_then_opens_new(self, job, fake_github, fake_repo):
        fake_github.open_pulls = [_pr(11), _pr(12), _pr(13, "Update uv documentation for latest")]
        lifecycle = PullRequestLifecycle(fake_github, project_name="uv")
        outcome = await lifecycle.run(job, fake_repo)

        assert outcome.superseded == [11, 12]
        assert outcome.close_failures == []
        assert lifecycle.state is PullRequestState.CREATED
        open_with_title = [pr.number for pr in fake_github.open_pulls if pr.title == TITLE]
        assert open_with_title == [outcome.pull_request.number]
        assert [pr.number for pr in fake_github.open_pulls if pr.title != TITLE] == [13]

    async def test_order_of_operations(self, job, fake_github, fake_repo):
        fake_github.open_pulls = [_pr(11)]
        await PullRequestLifecycle(fake_github, project_name="uv").run(job, fake_repo)
        assert [c[0] for c in fake_github.calls] == ["list", "close", "create", "label"]
        assert fake_repo.calls == [("push", job.branch_name)]

    async def test_create_arguments(self, job, fake_github, fake_repo):
        await PullRequestLifecycle(fake_github, project_name="uv", base_branch="main").run(job, fake_repo)
        (_, base, head, title, body), = fake_github.called("create")
        assert (base, head, title, body) == (
            "main",
            job.branch_name,
            TITLE,
            "Automated documentation update for v1.2.3",
        )
        assert fake_github.called("label") == [("label", 100, ("documentation",))]

    async def test_no_label_configured(self, job, fake_github, fake_repo):
        await PullRequestLifecycle(fake_github, project_name="uv", label=None).run(job, fake_repo)
        assert fake_github.called("label") == []

    async def test_listing_failure_is_not_fatal(self, job, fake_github, fake_repo):
        fake_github.fail_list = True
        outcome = await PullRequestLifecycle(fake_github, project_name="uv").run(job, fake_repo)
        assert outcome.pull_request.number == 100
        assert outcome.superseded == []
        assert any("skipping dedup" in w for w in outcome.warnings)
        assert fake_github.called("close") == []

    async def test_close_failure_is_not_fatal(self, job, fake_github, fake_repo):
        fake_github.open_pulls = [_pr(11), _pr(12)]
        fake_github.fail_close = {11}
        outcome = await PullRequestLifecycle(fake_github, project_name="uv").run(job, fake_repo)
        assert outcome.superseded == [12]
        assert outcome.close_failures == [11]
        assert outcome.pull_request.number == 100

    async def test_push_failure_is_fatal(self, job, fake_github, fake_repo):
        fake_repo.fail_push = True
        lifecycle = PullRequestLifecycle(fake_github, project_name="uv")
        with pytest.raises(GitCommandError):
            await lifecycle.run(job, fake_repo)
        assert fake_github.called("create") == []

    async def test_create_failure_is_fatal(self, job, fake_github, fake_repo):
        fake_github.fail_create = True
        lifecycle = PullRequestLifecycle(fake_github, project_name="uv")
        with pytest.raises(GitHubAPIError):
            await lifecycle.run(job, fake_repo)
        assert lifecycle.state is PullRequestState.PUSHED
