"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from code_reviewer.infrastructure.config import Settings
from code_reviewer.interface.dependencies import shutdown, startup
from code_reviewer.interface.error_handlers import register_error_handlers
from code_reviewer.interface.routes import router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and wire the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage startup / shutdown of shared resources."""
        await startup(app, settings)
        yield
        await shutdown(app)

    app = FastAPI(
        title="AI Code Reviewer",
        version="1.0.0",
        description=(
            "Takes pasted code or files from a public GitHub repository and "
            "returns a structured, categorised review produced by an LLM."
        ),
        lifespan=_lifespan,
    )
    if settings is not None:
        app.state.settings = settings

    register_error_handlers(app)
    app.include_router(router)

    # ── Health check (liveness) ───────────────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
