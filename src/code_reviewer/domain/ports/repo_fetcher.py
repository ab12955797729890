"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from code_reviewer.domain.entities import RepoMetadata, RepoTree


class RepoFetcher(Protocol):
    """Abstract contract for reading GitHub repository data."""

    async def fetch_metadata(self, owner: str, repo: str) -> RepoMetadata:
        """Return high-level repository metadata."""
        ...

    async def fetch_tree(self, owner: str, repo: str, ref: str) -> RepoTree:
        """Return the recursive file tree at the given ref."""
        ...

    async def fetch_file_content(
        self, owner: str, repo: str, ref: str, path: str
    ) -> str:
        """Return the decoded text content of a single file."""
        ...
