"""
docpublish: configuration.
Loads .env automatically, then reads all settings from environment variables.
"""

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from docpublish.errors import ConfigError

_env_path = Path(__file__).resolve().parent.parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass(frozen=True)
class DocsRepoConfig:
    """Target documentation repository and its credentials."""
    owner: str
    name: str
    base_branch: str
    token: str
    server_url: str
    api_url: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def clone_url(self) -> str:
        host = self.server_url.split("://", 1)[-1].rstrip("/")
        scheme = self.server_url.split("://", 1)[0] if "://" in self.server_url else "https"
        return f"{scheme}://{self.token}@{host}/{self.full_name}.git"


@dataclass(frozen=True)
class CommitterConfig:
    name: str
    email: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""
    project_name: str
    project_dir: str
    site_dir: str
    target_path: str
    pr_label: str
    merge_grace_seconds: float
    install_deps: bool
    clone_dir: str | None
    insiders_key: str
    docs_repo: DocsRepoConfig
    committer: CommitterConfig


def _seconds(raw: str) -> float:
    """Parse a duration; unparsable values become NaN and fail validation."""
    try:
        return float(raw)
    except ValueError:
        return float("nan")


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    env = os.environ if environ is None else environ
    return AppConfig(
        project_name=env.get("DOCS_PROJECT_NAME", "uv"),
        project_dir=env.get("DOCS_PROJECT_DIR", "."),
        site_dir=env.get("DOCS_SITE_DIR", "site/uv"),
        target_path=env.get("DOCS_TARGET_PATH", "site/uv"),
        pr_label=env.get("DOCS_PR_LABEL", "documentation"),
        merge_grace_seconds=_seconds(env.get("DOCS_MERGE_GRACE_SECONDS", "10")),
        install_deps=env.get("DOCS_INSTALL_DEPS", "false").lower() == "true",
        clone_dir=env.get("DOCS_CLONE_DIR") or None,
        insiders_key=env.get("MKDOCS_INSIDERS_SSH_KEY", ""),
        docs_repo=DocsRepoConfig(
            owner=env.get("DOCS_REPO_OWNER", "astral-sh"),
            name=env.get("DOCS_REPO_NAME", "docs"),
            base_branch=env.get("DOCS_BASE_BRANCH", "main"),
            token=env.get("ASTRAL_DOCS_PAT", ""),
            server_url=env.get("GITHUB_SERVER_URL", "https://github.com"),
            api_url=env.get("GITHUB_API_URL", "https://api.github.com"),
        ),
        committer=CommitterConfig(
            name=env.get("DOCS_COMMITTER_NAME", "astral-docs-bot"),
            email=env.get(
                "DOCS_COMMITTER_EMAIL",
                "176161322+astral-docs-bot@users.noreply.github.com",
            ),
        ),
    )


def validate_config(cfg: AppConfig) -> None:
    """Fail fast on a missing write credential or an unusable setting."""
    missing: list[str] = []
    invalid: list[str] = []
    if not cfg.docs_repo.token:
        missing.append("ASTRAL_DOCS_PAT")
    if not cfg.docs_repo.owner:
        missing.append("DOCS_REPO_OWNER")
    if not cfg.docs_repo.name:
        missing.append("DOCS_REPO_NAME")
    if not (math.isfinite(cfg.merge_grace_seconds) and cfg.merge_grace_seconds >= 0):
        invalid.append("DOCS_MERGE_GRACE_SECONDS")
    if missing or invalid:
        raise ConfigError(missing, invalid)


settings = load_config()
