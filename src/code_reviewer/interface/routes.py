"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from code_reviewer.domain.entities import FetchedFile
from code_reviewer.interface.dependencies import (
    get_list_files_use_case,
    get_review_use_case,
)
from code_reviewer.interface.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    ListFilesRequest,
    ListFilesResponse,
    parse_review,
)
from code_reviewer.services.list_repo_files import ListRepoFilesUseCase
from code_reviewer.services.review_code import ReviewCodeUseCase

router = APIRouter(prefix="/api")


@router.post(
    "/github/list-files",
    response_model=ListFilesResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid or non-GitHub URL"},
        429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
        502: {"model": ErrorResponse, "description": "GitHub API error"},
    },
)
async def list_files(
    body: ListFilesRequest,
    use_case: ListRepoFilesUseCase = Depends(get_list_files_use_case),
) -> ListFilesResponse:
    """List reviewable files of a GitHub repository (or a folder in it)."""
    listing = await use_case.execute(body.repo_url)
    return ListFilesResponse(
        owner=listing.owner,
        repo=listing.repo,
        ref=listing.ref,
        root_path=listing.root_path,
        files=listing.files,
        tree_truncated=listing.tree_truncated,
    )


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Model service not configured"},
        502: {"model": ErrorResponse, "description": "GitHub or model provider error"},
    },
)
async def analyze(
    body: AnalyzeRequest,
    use_case: ReviewCodeUseCase = Depends(get_review_use_case),
) -> AnalyzeResponse:
    """Review pasted snippets or files from a GitHub repository."""
    if body.mode == "snippet":
        outcome = await use_case.review_snippets(
            [FetchedFile(path=f.path or "", content=f.content or "") for f in body.files or []]
        )
    else:
        outcome = await use_case.review_repository(
            body.owner or "",
            body.repo or "",
            body.ref or "",
            body.paths or [],
        )

    return AnalyzeResponse(
        text=outcome.text,
        truncated=outcome.truncated,
        total_bytes=outcome.total_bytes,
        file_count=outcome.file_count,
        review=parse_review(outcome.text),
    )
