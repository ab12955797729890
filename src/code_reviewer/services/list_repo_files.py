"""List-repository-files use case — resolve a GitHub URL to reviewable paths."""

from __future__ import annotations

import logging

from code_reviewer.domain.entities import RepoListing
from code_reviewer.domain.ports.repo_fetcher import RepoFetcher
from code_reviewer.domain.value_objects import RepoReference
from code_reviewer.services.file_filter import filter_tree

logger = logging.getLogger(__name__)


class ListRepoFilesUseCase:
    """Parse a GitHub URL, resolve its ref and return the filtered file list."""

    def __init__(self, repo_fetcher: RepoFetcher) -> None:
        self._fetcher = repo_fetcher

    async def execute(self, repo_url: str) -> RepoListing:
        reference = RepoReference.from_url(repo_url)

        ref = reference.ref
        if not ref:
            metadata = await self._fetcher.fetch_metadata(reference.owner, reference.repo)
            ref = metadata.default_branch
            logger.debug("Resolved default branch of %s to %s", reference.full_name, ref)

        tree = await self._fetcher.fetch_tree(reference.owner, reference.repo, ref)
        if tree.truncated:
            logger.warning(
                "GitHub truncated the tree of %s@%s; the file list is incomplete",
                reference.full_name,
                ref,
            )

        files = filter_tree(tree.nodes, reference.path)
        logger.info(
            "Listed %d of %d entries in %s@%s",
            len(files),
            len(tree.nodes),
            reference.full_name,
            ref,
        )
        return RepoListing(
            owner=reference.owner,
            repo=reference.repo,
            ref=ref,
            files=files,
            root_path=reference.path,
            tree_truncated=tree.truncated,
        )
