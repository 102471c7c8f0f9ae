"""
docpublish: GitHub REST API client.

Key endpoints used:
  GET   /repos/{owner}/{repo}/pulls?state=open     — list open pull requests
  PATCH /repos/{owner}/{repo}/pulls/{n}            — close a pull request
  POST  /repos/{owner}/{repo}/pulls                — open a pull request
  POST  /repos/{owner}/{repo}/issues/{n}/labels    — apply labels
  PUT   /repos/{owner}/{repo}/pulls/{n}/merge      — merge a pull request
"""

from __future__ import annotations

from typing import Any

import httpx

from docpublish.errors import GitHubAPIError
from docpublish.github.auth import GitHubCredentials
from docpublish.models.job import PullRequestRecord
from docpublish.utils.logging import logger

PAGE_SIZE = 100
MAX_PAGES = 10


def _to_record(data: dict[str, Any]) -> PullRequestRecord:
    return PullRequestRecord(
        number=data["number"],
        title=data.get("title") or "",
        branch_ref=(data.get("head") or {}).get("ref", ""),
        url=data.get("html_url") or "",
    )


class GitHubClient:
    """Thin async wrapper around the GitHub pull request endpoints."""

    def __init__(
        self,
        api_url: str,
        owner: str,
        repo: str,
        credentials: GitHubCredentials,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.owner = owner
        self.repo = repo
        self.credentials = credentials
        self.timeout = timeout
        self._transport = transport

    @property
    def _repo_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.credentials.as_headers(),
            transport=self._transport,
        )

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            async with self._client() as client:
                resp = await client.request(method, f"{self._repo_url}{path}", **kwargs)
        except httpx.TransportError as exc:
            raise GitHubAPIError(operation, 0, str(exc)) from exc
        if not resp.is_success:
            logger.error(
                "  GitHub %s %s returned %d: %s",
                method, path, resp.status_code, resp.text[:500],
            )
            raise GitHubAPIError(operation, resp.status_code, resp.text)
        return resp

    async def list_open_pulls(self) -> list[PullRequestRecord]:
        """Return every open pull request, following pagination."""
        pulls: list[PullRequestRecord] = []
        for page in range(1, MAX_PAGES + 1):
            resp = await self._request(
                "list pulls",
                "GET",
                "/pulls",
                params={"state": "open", "per_page": PAGE_SIZE, "page": page},
            )
            try:
                batch = resp.json()
                pulls.extend(_to_record(item) for item in batch)
            except (ValueError, KeyError, TypeError, httpx.HTTPError) as exc:
                logger.error("  GitHub GET /pulls returned an unreadable listing: %s", exc)
                raise GitHubAPIError("list pulls", resp.status_code, resp.text) from exc
            if len(batch) < PAGE_SIZE:
                break
        return pulls

    async def close_pull(self, number: int) -> None:
        await self._request("close pull", "PATCH", f"/pulls/{number}", json={"state": "closed"})

    async def create_pull(self, base: str, head: str, title: str, body: str) -> PullRequestRecord:
        resp = await self._request(
            "create pull",
            "POST",
            "/pulls",
            json={"base": base, "head": head, "title": title, "body": body},
        )
        return _to_record(resp.json())

    async def add_labels(self, number: int, labels: list[str]) -> None:
        await self._request("add labels", "POST", f"/issues/{number}/labels", json={"labels": labels})

    async def merge_pull(self, number: int, method: str = "squash") -> dict[str, Any]:
        resp = await self._request(
            "merge pull",
            "PUT",
            f"/pulls/{number}/merge",
            json={"merge_method": method},
        )
        return resp.json()
