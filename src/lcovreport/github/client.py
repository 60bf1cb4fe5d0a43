"""Minimal GitHub REST client for the calls the reporter needs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from lcovreport._meta import __version__, logger
from lcovreport.errors import GitHubAPIError

if TYPE_CHECKING:
    from collections.abc import Iterator

_API_VERSION = "2022-11-28"
_PER_PAGE = 100
_TIMEOUT = 30


class GitHubClient:
    """Issue/commit comments and pull request file listing."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        *,
        base_url: str = "https://api.github.com",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": _API_VERSION,
                "User-Agent": f"lcovreport/{__version__}",
            },
            timeout=_TIMEOUT,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            msg = f"{method} {url} failed: {exc}"
            raise GitHubAPIError(msg) from exc
        if response.status_code >= 300:  # noqa: PLR2004
            msg = f"{method} {response.url.path} returned {response.status_code}: {response.text}"
            raise GitHubAPIError(msg, status_code=response.status_code)
        return response

    def create_issue_comment(self, issue_number: int, body: str) -> None:
        self._request(
            "POST",
            f"{self._repo_path}/issues/{issue_number}/comments",
            json={"body": body},
        )

    def create_commit_comment(self, commit_sha: str, body: str) -> None:
        self._request(
            "POST",
            f"{self._repo_path}/commits/{commit_sha}/comments",
            json={"body": body},
        )

    def _paginate(self, url: str) -> Iterator[dict[str, Any]]:
        next_url: str | None = url
        params: dict[str, Any] | None = {"per_page": _PER_PAGE}
        while next_url:
            response = self._request("GET", next_url, params=params)
            try:
                entries = response.json()
            except ValueError as exc:
                msg = f"GET {response.url.path} returned a body that is not JSON"
                raise GitHubAPIError(msg, status_code=response.status_code) from exc
            yield from entries
            # The next link already carries the query string.
            params = None
            next_url = response.links.get("next", {}).get("url")

    def list_pull_request_files(self, pull_number: int) -> list[str]:
        """Return the file names touched by pull request *pull_number*, all pages."""
        files = [
            entry["filename"] for entry in self._paginate(f"{self._repo_path}/pulls/{pull_number}/files")
        ]
        logger.debug("pull request #%d changes %d file(s)", pull_number, len(files))
        return files


__all__ = ["GitHubClient"]
