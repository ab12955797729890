"""FastAPI dependency injection wiring.

Shared clients live on ``app.state``; they are created by :func:`startup`
inside the application lifespan and closed by :func:`shutdown`.
"""

from __future__ import annotations

import httpx
from fastapi import Depends, FastAPI, Request

from code_reviewer.domain.exceptions import ConfigurationError
from code_reviewer.domain.ports.llm_gateway import LlmGateway
from code_reviewer.domain.ports.repo_fetcher import RepoFetcher
from code_reviewer.infrastructure.config import Settings, get_settings
from code_reviewer.infrastructure.github_rest_adapter import GitHubRestAdapter
from code_reviewer.infrastructure.openai_adapter import OpenAIAdapter
from code_reviewer.services.list_repo_files import ListRepoFilesUseCase
from code_reviewer.services.review_code import ReviewCodeUseCase


async def startup(app: FastAPI, settings: Settings | None = None) -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    settings = settings or get_settings()
    app.state.settings = settings
    app.state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds)
    )
    app.state.llm_gateway = (
        OpenAIAdapter(
            api_key=settings.openai_api_key.get_secret_value(),
            model=settings.openai_model,
        )
        if settings.openai_api_key
        else None
    )


async def shutdown(app: FastAPI) -> None:
    """Release shared resources."""
    client: httpx.AsyncClient | None = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()
        app.state.http_client = None
    gateway: OpenAIAdapter | None = getattr(app.state, "llm_gateway", None)
    if gateway is not None:
        await gateway.close()
        app.state.llm_gateway = None


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_repo_fetcher(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> RepoFetcher:
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)
    assert client is not None, "startup() was not called"

    token = settings.github_token.get_secret_value() if settings.github_token else None
    return GitHubRestAdapter(
        client=client,
        token=token,
        api_url=settings.github_api_url,
        raw_url=settings.github_raw_url,
    )


def get_llm_gateway(request: Request) -> LlmGateway:
    gateway: LlmGateway | None = getattr(request.app.state, "llm_gateway", None)
    if gateway is None:
        raise ConfigurationError(
            "OPENAI_API_KEY is not set; code review is unavailable."
        )
    return gateway


def get_list_files_use_case(
    fetcher: RepoFetcher = Depends(get_repo_fetcher),
) -> ListRepoFilesUseCase:
    return ListRepoFilesUseCase(repo_fetcher=fetcher)


def get_review_use_case(
    fetcher: RepoFetcher = Depends(get_repo_fetcher),
    llm: LlmGateway = Depends(get_llm_gateway),
    settings: Settings = Depends(get_app_settings),
) -> ReviewCodeUseCase:
    """Build the review use-case with injected adapters."""
    return ReviewCodeUseCase(
        repo_fetcher=fetcher,
        llm_gateway=llm,
        max_file_bytes=settings.max_file_bytes,
        max_total_bytes=settings.max_total_bytes,
        max_files=settings.max_files,
        fetch_concurrency=settings.fetch_concurrency,
    )
