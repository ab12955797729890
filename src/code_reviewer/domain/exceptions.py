"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class CodeReviewerError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidInputError(CodeReviewerError):
    """Malformed URL, missing required field or unsupported request mode."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class RemoteServiceError(CodeReviewerError):
    """The GitHub API answered with a non-success status (or not at all)."""

    def __init__(
        self, message: str, *, status_code: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_response(cls, status_code: int, body: str) -> RemoteServiceError:
        return cls(
            f"GitHub API error {status_code}: {body}",
            status_code=status_code,
            body=body,
        )


class GitHubRateLimitError(RemoteServiceError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class RemoteFetchError(RemoteServiceError):
    """A single file could not be retrieved by any strategy."""

    def __init__(
        self,
        path: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(
            message or f"Failed to fetch raw content for {path}",
            status_code=status_code,
            body=body,
        )
        self.path = path


# ── LLM errors ──────────────────────────────────────────────────────────────


class ModelError(CodeReviewerError):
    """Any error originating from the generative model provider."""


# ── Configuration ───────────────────────────────────────────────────────────


class ConfigurationError(CodeReviewerError):
    """A setting required for the requested operation is missing."""
