"""Review-code use case — the main orchestration pipeline.

This is the single entry point for the review logic.  It depends only on
the two ports (:class:`RepoFetcher` and :class:`LlmGateway`) and the pure
service modules.  The interface layer injects concrete adapters at runtime.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from code_reviewer.domain.entities import BoundedFile, FetchedFile, ReviewOutcome
from code_reviewer.domain.exceptions import InvalidInputError
from code_reviewer.domain.ports.llm_gateway import LlmGateway
from code_reviewer.domain.ports.repo_fetcher import RepoFetcher
from code_reviewer.services.content_assembler import request_review
from code_reviewer.services.content_budget import (
    MAX_FILE_BYTES,
    MAX_FILES,
    MAX_TOTAL_BYTES,
    bound_file,
    build_bundle,
    cap_files,
)

logger = logging.getLogger(__name__)

DEFAULT_SNIPPET_PATH = "snippet.ts"


class ReviewCodeUseCase:
    """Orchestrates the files → bounded bundle → model review pipeline.

    Parameters
    ----------
    repo_fetcher:
        Adapter that can fetch file content from GitHub.
    llm_gateway:
        Adapter that can send prompts to an LLM.
    max_file_bytes:
        Per-file ceiling; larger files keep only their head and tail.
    max_total_bytes:
        Aggregate ceiling for the bundle.
    max_files:
        Files beyond this position are dropped before anything else.
    fetch_concurrency:
        Number of GitHub fetches in flight; 1 fetches strictly in order.
    """

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        llm_gateway: LlmGateway,
        max_file_bytes: int = MAX_FILE_BYTES,
        max_total_bytes: int = MAX_TOTAL_BYTES,
        max_files: int = MAX_FILES,
        fetch_concurrency: int = 1,
    ) -> None:
        self._fetcher = repo_fetcher
        self._llm = llm_gateway
        self._max_file_bytes = max_file_bytes
        self._max_total_bytes = max_total_bytes
        self._max_files = max_files
        self._concurrency = max(fetch_concurrency, 1)

    # ── Public entry points ─────────────────────────────────────────────

    async def review_snippets(self, files: Sequence[FetchedFile]) -> ReviewOutcome:
        """Review pasted files."""
        selected = [
            FetchedFile(path=f.path or DEFAULT_SNIPPET_PATH, content=f.content or "")
            for f in cap_files(files, self._max_files)
        ]
        return await self._review(selected)

    async def review_repository(
        self, owner: str, repo: str, ref: str, paths: Sequence[str]
    ) -> ReviewOutcome:
        """Fetch *paths* from ``owner/repo@ref`` and review them."""
        selected = cap_files(paths, self._max_files)
        logger.info(
            "Fetching %d of %d requested file(s) from %s/%s@%s",
            len(selected),
            len(paths),
            owner,
            repo,
            ref,
        )
        fetched = await self._fetch_files(owner, repo, ref, selected)
        return await self._review(fetched)

    # ── Fetch ───────────────────────────────────────────────────────────

    async def _fetch_files(
        self, owner: str, repo: str, ref: str, paths: list[str]
    ) -> list[FetchedFile]:
        """Fetch file contents; results keep the order of *paths*.

        Any single failure aborts the whole request.
        """
        if self._concurrency == 1:
            files: list[FetchedFile] = []
            for path in paths:
                content = await self._fetcher.fetch_file_content(owner, repo, ref, path)
                files.append(FetchedFile(path=path, content=content))
            return files

        sem = asyncio.Semaphore(self._concurrency)

        async def _fetch_one(path: str) -> FetchedFile:
            async with sem:
                content = await self._fetcher.fetch_file_content(owner, repo, ref, path)
                return FetchedFile(path=path, content=content)

        results = await asyncio.gather(*(_fetch_one(p) for p in paths))
        return list(results)

    # ── Budget + model ──────────────────────────────────────────────────

    async def _review(self, files: list[FetchedFile]) -> ReviewOutcome:
        if not files:
            raise InvalidInputError("No files to analyze.")

        bounded: list[BoundedFile] = [bound_file(f, self._max_file_bytes) for f in files]
        bundle = build_bundle(bounded, self._max_total_bytes)
        if len(bundle.files) < len(bounded):
            logger.info(
                "Aggregate limit reached: keeping %d of %d file(s)",
                len(bundle.files),
                len(bounded),
            )

        text = await request_review(bundle, self._llm)
        return ReviewOutcome(
            text=text,
            truncated=bundle.truncated_any,
            total_bytes=bundle.total_bytes,
            file_count=len(bundle.files),
        )
