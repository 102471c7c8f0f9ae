"""
docpublish: GitHub API authentication helpers.

The REST API authenticates with a bearer token on every request.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GitHubCredentials:
    token: str

    def as_headers(self) -> dict[str, str]:
        """Return the auth headers required by the GitHub REST API."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
