"""Tests for API routes using httpx AsyncClient."""

from __future__ import annotations

import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from code_reviewer.domain.entities import FileNode
from code_reviewer.domain.exceptions import ModelError
from code_reviewer.infrastructure.config import Settings
from code_reviewer.infrastructure.openai_adapter import OpenAIAdapter
from code_reviewer.interface.app import create_app
from code_reviewer.interface.dependencies import get_repo_fetcher


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestListFiles:
    @pytest.mark.asyncio
    async def test_lists_filtered_files(self, client: AsyncClient, fake_fetcher) -> None:
        fake_fetcher.nodes = [
            FileNode("app/main.py", "blob"),
            FileNode("app/static/hero.jpg", "blob"),
            FileNode("README.md", "blob"),
        ]
        resp = await client.post(
            "/api/github/list-files",
            json={"repoUrl": "https://github.com/o/r/tree/main/app"},
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "owner": "o",
            "repo": "r",
            "ref": "main",
            "rootPath": "app",
            "files": ["app/main.py"],
            "treeTruncated": False,
        }

    @pytest.mark.asyncio
    async def test_root_path_omitted_when_absent(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/github/list-files", json={"repoUrl": "https://github.com/o/r"}
        )
        assert resp.status_code == 200
        assert "rootPath" not in resp.json()

    @pytest.mark.asyncio
    async def test_unsupported_host(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/github/list-files", json={"repoUrl": "https://gitlab.com/x/y"}
        )
        assert resp.status_code == 400
        assert "gitlab.com" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_missing_repo_url(self, client: AsyncClient) -> None:
        resp = await client.post("/api/github/list-files", json={})
        assert resp.status_code == 400
        assert "error" in resp.json()

    @pytest.mark.asyncio
    async def test_blank_repo_url(self, client: AsyncClient) -> None:
        resp = await client.post("/api/github/list-files", json={"repoUrl": "  "})
        assert resp.status_code == 400
        assert "repoUrl is required" in resp.json()["error"]


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_snippet_mode(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/analyze",
            json={"mode": "snippet", "files": [{"path": "a.py", "content": "print(1)"}]},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["truncated"] is False
        assert body["fileCount"] == 1
        assert body["totalBytes"] == len("print(1)")
        assert json.loads(body["text"])["fileName"] == "a.py"
        assert body["review"]["categories"][0]["severity"] == "HIGH"
        assert body["review"]["categories"][0]["suggestions"][0]["codeExample"]

    @pytest.mark.asyncio
    async def test_unparseable_model_text_is_returned_raw(
        self, client: AsyncClient, fake_llm
    ) -> None:
        fake_llm.generate.return_value = "Looks fine to me."
        resp = await client.post(
            "/api/analyze",
            json={"mode": "snippet", "files": [{"path": "a.py", "content": "x"}]},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["text"] == "Looks fine to me."
        assert "review" not in body

    @pytest.mark.asyncio
    async def test_fenced_model_text_is_parsed(self, client: AsyncClient, fake_llm) -> None:
        fake_llm.generate.return_value = (
            '```json\n{"fileName": "a.py", "categories": []}\n```'
        )
        resp = await client.post(
            "/api/analyze",
            json={"mode": "snippet", "files": [{"path": "a.py", "content": "x"}]},
        )
        assert resp.json()["review"] == {"fileName": "a.py", "categories": []}

    @pytest.mark.asyncio
    async def test_github_mode_caps_at_fifty(self, client: AsyncClient, fake_fetcher) -> None:
        paths = [f"f{i}.py" for i in range(60)]
        resp = await client.post(
            "/api/analyze",
            json={"mode": "github", "owner": "o", "repo": "r", "ref": "main", "paths": paths},
        )
        assert resp.status_code == 200
        assert resp.json()["fileCount"] == 50
        assert fake_fetcher.fetched == paths[:50]

    @pytest.mark.asyncio
    async def test_github_fetch_failure(self, client: AsyncClient, fake_fetcher) -> None:
        fake_fetcher.failing = {"b.py"}
        resp = await client.post(
            "/api/analyze",
            json={"mode": "github", "owner": "o", "repo": "r", "ref": "main", "paths": ["a.py", "b.py"]},
        )
        assert resp.status_code == 502
        assert "b.py" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_github_mode_requires_ref(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/analyze",
            json={"mode": "github", "owner": "o", "repo": "r", "paths": ["a.py"]},
        )
        assert resp.status_code == 400
        assert "ref" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_unsupported_mode(self, client: AsyncClient) -> None:
        resp = await client.post("/api/analyze", json={"mode": "gitlab"})
        assert resp.status_code == 400
        assert "Unsupported mode" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_null_snippet_fields_use_defaults(self, client: AsyncClient, fake_llm) -> None:
        resp = await client.post(
            "/api/analyze",
            json={"mode": "snippet", "files": [{"path": None, "content": None}]},
        )
        assert resp.status_code == 200
        assert resp.json()["fileCount"] == 1
        assert resp.json()["totalBytes"] == 0
        assert "===== FILE: snippet.ts =====" in fake_llm.generate.await_args.args[0]

    @pytest.mark.asyncio
    async def test_empty_snippets(self, client: AsyncClient) -> None:
        resp = await client.post("/api/analyze", json={"mode": "snippet", "files": []})
        assert resp.status_code == 400
        assert resp.json() == {"error": "No files to analyze."}

    @pytest.mark.asyncio
    async def test_model_failure(self, client: AsyncClient, fake_llm) -> None:
        fake_llm.generate.side_effect = ModelError("Model call failed: overloaded")
        resp = await client.post(
            "/api/analyze",
            json={"mode": "snippet", "files": [{"path": "a.py", "content": "x"}]},
        )
        assert resp.status_code == 502
        assert resp.json() == {"error": "Model call failed: overloaded"}


class TestLifespan:
    @pytest.mark.asyncio
    async def test_without_model_key_analyze_fails_but_listing_works(
        self, settings: Settings, fake_fetcher
    ) -> None:
        app = create_app(settings)
        app.dependency_overrides[get_repo_fetcher] = lambda: fake_fetcher
        fake_fetcher.nodes = [FileNode("a.py", "blob")]

        async with app.router.lifespan_context(app):
            assert app.state.llm_gateway is None
            assert isinstance(app.state.http_client, httpx.AsyncClient)

            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
                listed = await c.post(
                    "/api/github/list-files", json={"repoUrl": "https://github.com/o/r"}
                )
                analyzed = await c.post(
                    "/api/analyze",
                    json={"mode": "snippet", "files": [{"path": "a.py", "content": "x"}]},
                )

        assert listed.status_code == 200
        assert analyzed.status_code == 500
        assert "OPENAI_API_KEY" in analyzed.json()["error"]

    @pytest.mark.asyncio
    async def test_model_key_creates_openai_adapter(self) -> None:
        settings = Settings(_env_file=None, openai_api_key="sk-test")  # type: ignore[call-arg]
        app = create_app(settings)

        async with app.router.lifespan_context(app):
            assert isinstance(app.state.llm_gateway, OpenAIAdapter)

        assert app.state.llm_gateway is None

    @pytest.mark.asyncio
    async def test_shutdown_closes_http_client(self, settings: Settings) -> None:
        app = create_app(settings)

        async with app.router.lifespan_context(app):
            client = app.state.http_client
            assert not client.is_closed

        assert client.is_closed
        assert app.state.http_client is None
