"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import base64
import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from code_reviewer.domain.entities import FileNode, RepoMetadata, RepoTree
from code_reviewer.domain.exceptions import (
    GitHubRateLimitError,
    RemoteFetchError,
    RemoteServiceError,
)

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_RAW_BASE = "https://raw.githubusercontent.com"


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        *,
        api_url: str = _GITHUB_API,
        raw_url: str = _RAW_BASE,
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._raw_url = raw_url.rstrip("/")
        self._headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "code-reviewer/1.0",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, owner: str, repo: str) -> RepoMetadata:
        """GET /repos/{owner}/{repo} → RepoMetadata."""
        resp = await self._api_get(f"/repos/{owner}/{repo}")
        data = resp.json()
        try:
            default_branch = data["default_branch"]
        except (KeyError, TypeError) as exc:
            raise RemoteServiceError(
                f"GitHub API returned no default branch for {owner}/{repo}.",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc
        return RepoMetadata(owner=owner, repo=repo, default_branch=default_branch)

    async def fetch_tree(self, owner: str, repo: str, ref: str) -> RepoTree:
        """GET /repos/{owner}/{repo}/git/trees/{ref}?recursive=1 → RepoTree."""
        resp = await self._api_get(
            f"/repos/{owner}/{repo}/git/trees/{quote(ref, safe='')}",
            params={"recursive": "1"},
        )
        data = resp.json()
        nodes = [
            FileNode(path=item["path"], type=item.get("type", "blob"))
            for item in data.get("tree", [])
        ]
        return RepoTree(nodes=nodes, truncated=bool(data.get("truncated", False)))

    async def fetch_file_content(
        self, owner: str, repo: str, ref: str, path: str
    ) -> str:
        """Fetch a file through the contents API, falling back to the raw host.

        The contents API answers with base64 for regular files; anything
        else (directories, submodules, LFS pointers served elsewhere) is
        retried against raw.githubusercontent.com by direct path.
        """
        try:
            resp = await self._api_get(
                f"/repos/{owner}/{repo}/contents/{quote(path, safe='/')}",
                params={"ref": ref},
            )
        except GitHubRateLimitError:
            raise
        except RemoteServiceError as exc:
            detail = str(exc) if exc.status_code is None else f"{exc.status_code}: {exc.body}"
            raise RemoteFetchError(
                path,
                f"GitHub content error for {path}: {detail}",
                status_code=exc.status_code,
                body=exc.body,
            ) from exc

        data: Any = resp.json()
        if (
            isinstance(data, dict)
            and data.get("encoding") == "base64"
            and data.get("content")
        ):
            return base64.b64decode(data["content"]).decode("utf-8", errors="replace")

        logger.debug("No base64 content for %s — trying raw endpoint", path)
        return await self._fetch_raw(owner, repo, ref, path)

    async def _fetch_raw(self, owner: str, repo: str, ref: str, path: str) -> str:
        raw_url = f"{self._raw_url}/{owner}/{repo}/{ref}/{quote(path, safe='/')}"
        try:
            resp = await self._client.get(raw_url, headers=self._headers)
        except httpx.HTTPError as exc:
            raise RemoteFetchError(
                path, f"Network error fetching {raw_url}: {exc}"
            ) from exc

        if resp.status_code == 200:
            return resp.text

        raise RemoteFetchError(path, status_code=resp.status_code, body=resp.text)

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._api_url}{endpoint}"
        try:
            resp = await self._client.get(url, headers=self._headers, params=params)
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        body = resp.text

        if resp.status_code == 403 and resp.headers.get("x-ratelimit-remaining") == "0":
            reset_raw = resp.headers.get("x-ratelimit-reset", "")
            try:
                reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                    "%Y-%m-%d %H:%M:%S UTC"
                )
            except (ValueError, OSError):
                reset_str = reset_raw or "unknown"
            raise GitHubRateLimitError(
                f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                "Set the GITHUB_TOKEN environment variable to increase the limit.",
                status_code=403,
                body=body,
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError(
                "GitHub API rate limit exceeded (HTTP 429).",
                status_code=429,
                body=body,
            )

        raise RemoteServiceError.from_response(resp.status_code, body)
