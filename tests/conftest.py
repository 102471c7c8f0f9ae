"""Shared test configuration and fixtures for the docpublish test suite."""

import sys
from pathlib import Path

import pytest

# Add backend to Python path so imports work without an install
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from docpublish.core.config import load_config  # noqa: E402
from docpublish.errors import GitHubAPIError  # noqa: E402
from docpublish.models.job import CommitResult, PullRequestRecord, SiteArtifact  # noqa: E402


@pytest.fixture
def env():
    return {
        "ASTRAL_DOCS_PAT": "ghp_testtoken",
        "DOCS_REPO_OWNER": "astral-sh",
        "DOCS_REPO_NAME": "docs",
        "DOCS_MERGE_GRACE_SECONDS": "10",
    }


@pytest.fixture
def config(env, tmp_path):
    env = {**env, "DOCS_PROJECT_DIR": str(tmp_path / "project"), "DOCS_CLONE_DIR": str(tmp_path / "clone")}
    return load_config(env)


@pytest.fixture
def site_artifact(tmp_path):
    from docpublish.models.job import BuildVariant

    site = tmp_path / "built" / "uv"
    (site / "guides").mkdir(parents=True)
    (site / "index.html").write_text("<h1>uv</h1>")
    (site / "guides" / "install.html").write_text("<p>install</p>")
    return SiteArtifact(path=site, variant=BuildVariant.PUBLIC)


class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(self, open_pulls=None, next_number=100):
        self.open_pulls = list(open_pulls or [])
        self.next_number = next_number
        self.calls: list[tuple] = []
        self.fail_list = False
        self.fail_close: set[int] = set()
        self.fail_create = False
        self.fail_merge = False

    async def list_open_pulls(self):
        self.calls.append(("list",))
        if self.fail_list:
            raise GitHubAPIError("list pulls", 502, "bad gateway")
        return list(self.open_pulls)

    async def close_pull(self, number):
        self.calls.append(("close", number))
        if number in self.fail_close:
            raise GitHubAPIError("close pull", 403, "forbidden")
        self.open_pulls = [pr for pr in self.open_pulls if pr.number != number]

    async def create_pull(self, base, head, title, body):
        self.calls.append(("create", base, head, title, body))
        if self.fail_create:
            raise GitHubAPIError("create pull", 422, "no commits between main and head")
        pr = PullRequestRecord(
            number=self.next_number,
            title=title,
            branch_ref=head,
            url=f"https://github.com/astral-sh/docs/pull/{self.next_number}",
        )
        self.next_number += 1
        self.open_pulls.append(pr)
        return pr

    async def add_labels(self, number, labels):
        self.calls.append(("label", number, tuple(labels)))

    async def merge_pull(self, number, method="squash"):
        self.calls.append(("merge", number, method))
        if self.fail_merge:
            raise GitHubAPIError("merge pull", 405, "Required status check is expected")
        self.open_pulls = [pr for pr in self.open_pulls if pr.number != number]
        return {"merged": True}

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


class FakeRepo:
    """Records repository operations without touching git."""

    def __init__(self, path, changed=True):
        self.path = Path(path)
        self.changed = changed
        self.calls: list[tuple] = []
        self.fail_push = False

    def replace_subtree(self, target_path, artifact):
        self.calls.append(("replace", target_path, artifact.path))
        return self.path / target_path

    async def commit(self, branch_name, message, target_path, committer):
        self.calls.append(("commit", branch_name, message))
        return CommitResult(sha="a" * 40, changed=self.changed)

    async def push(self, branch_name, remote="origin"):
        from docpublish.errors import GitCommandError

        self.calls.append(("push", branch_name))
        if self.fail_push:
            raise GitCommandError("push", 1, "rejected")


class FakeBuilder:
    def __init__(self, artifact, error=None):
        self.artifact = artifact
        self.error = error
        self.variants = []

    async def build(self, variant):
        self.variants.append(variant)
        if self.error:
            raise self.error
        return SiteArtifact(path=self.artifact.path, variant=variant)


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def fake_repo(tmp_path):
    return FakeRepo(tmp_path / "clone")


@pytest.fixture
def fake_builder(site_artifact):
    return FakeBuilder(site_artifact)


@pytest.fixture
def make_repo(tmp_path):
    def _make(name="clone", changed=True):
        return FakeRepo(tmp_path / name, changed=changed)
    return _make
