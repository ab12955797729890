"""Pydantic request / response DTOs for the API boundary.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── List files ──────────────────────────────────────────────────────────────


class ListFilesRequest(CamelModel):
    """Request body for ``POST /api/github/list-files``."""

    repo_url: str

    @field_validator("repo_url")
    @classmethod
    def _must_not_be_empty(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "repoUrl is required"
            raise ValueError(msg)
        return stripped


class ListFilesResponse(CamelModel):
    owner: str
    repo: str
    ref: str
    root_path: str | None = None
    files: list[str]
    tree_truncated: bool = False


# ── Analyze ─────────────────────────────────────────────────────────────────


class SnippetFile(CamelModel):
    path: str | None = None
    content: str | None = None


class AnalyzeRequest(CamelModel):
    """Request body for ``POST /api/analyze``.

    ``mode="snippet"`` carries ``files``; ``mode="github"`` carries
    ``owner``, ``repo``, ``ref`` and ``paths``.
    """

    mode: str
    files: list[SnippetFile] | None = None
    owner: str | None = None
    repo: str | None = None
    ref: str | None = None
    paths: list[str] | None = None

    @model_validator(mode="after")
    def _check_mode_fields(self) -> AnalyzeRequest:
        if self.mode == "snippet":
            return self
        if self.mode == "github":
            missing = [name for name in ("owner", "repo", "ref") if not getattr(self, name)]
            if missing:
                msg = f"github mode requires: {', '.join(missing)}"
                raise ValueError(msg)
            return self
        msg = f"Unsupported mode: '{self.mode}'"
        raise ValueError(msg)


class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ReviewSuggestion(CamelModel):
    description: str
    code_example: str | None = None


class ReviewCategory(CamelModel):
    category: str
    findings: list[str]
    severity: Severity
    suggestions: list[ReviewSuggestion] | None = None


class ReviewResult(CamelModel):
    """Structured review the model is asked to produce."""

    file_name: str
    categories: list[ReviewCategory]


class AnalyzeResponse(CamelModel):
    text: str
    truncated: bool
    total_bytes: int
    file_count: int
    review: ReviewResult | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    error: str


def _strip_code_fence(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        first_nl = text.index("\n") if "\n" in text else 3
        text = text[first_nl + 1 :]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def parse_review(raw: str) -> ReviewResult | None:
    """Parse model output into a :class:`ReviewResult`, or *None* if it doesn't fit.

    Handles common failure modes: markdown fences, invalid JSON, wrong shape.
    """
    try:
        return ReviewResult.model_validate_json(_strip_code_fence(raw))
    except ValidationError as exc:
        logger.debug("Model output is not a ReviewResult: %s", exc)
        return None
