"""Shared test fixtures — fake GitHub fetcher, fake model, ASGI client."""

import os

# No real credentials in tests, whatever the shell environment holds.
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("GITHUB_TOKEN", None)

import json
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from code_reviewer.domain.entities import FileNode, RepoMetadata, RepoTree
from code_reviewer.domain.exceptions import RemoteFetchError
from code_reviewer.infrastructure.config import Settings
from code_reviewer.interface.app import create_app
from code_reviewer.interface.dependencies import get_llm_gateway, get_repo_fetcher

VALID_REVIEW = {
    "fileName": "a.py",
    "categories": [
        {
            "category": "Correctness / Logic",
            "findings": ["Off-by-one in loop bound"],
            "severity": "HIGH",
            "suggestions": [
                {"description": "Use range(len(xs))", "codeExample": "for i in range(len(xs)):"}
            ],
        }
    ],
}


class FakeRepoFetcher:
    """In-memory RepoFetcher that records every call."""

    def __init__(self) -> None:
        self.default_branch = "main"
        self.nodes: list[FileNode] = []
        self.tree_truncated = False
        self.contents: dict[str, str] = {}
        self.failing: set[str] = set()
        self.metadata_calls = 0
        self.tree_refs: list[str] = []
        self.fetched: list[str] = []

    async def fetch_metadata(self, owner: str, repo: str) -> RepoMetadata:
        self.metadata_calls += 1
        return RepoMetadata(owner=owner, repo=repo, default_branch=self.default_branch)

    async def fetch_tree(self, owner: str, repo: str, ref: str) -> RepoTree:
        self.tree_refs.append(ref)
        return RepoTree(nodes=list(self.nodes), truncated=self.tree_truncated)

    async def fetch_file_content(self, owner: str, repo: str, ref: str, path: str) -> str:
        self.fetched.append(path)
        if path in self.failing:
            raise RemoteFetchError(path, status_code=404, body="Not Found")
        return self.contents.get(path, f"// {path}\n")


@pytest.fixture
def fake_fetcher() -> FakeRepoFetcher:
    return FakeRepoFetcher()


@pytest.fixture
def fake_llm() -> AsyncMock:
    llm = AsyncMock()
    llm.generate.return_value = json.dumps(VALID_REVIEW)
    return llm


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest_asyncio.fixture
async def client(settings: Settings, fake_fetcher: FakeRepoFetcher, fake_llm: AsyncMock):
    """Test client with the GitHub fetcher and model replaced by fakes."""
    app = create_app(settings)
    app.dependency_overrides[get_repo_fetcher] = lambda: fake_fetcher
    app.dependency_overrides[get_llm_gateway] = lambda: fake_llm

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
