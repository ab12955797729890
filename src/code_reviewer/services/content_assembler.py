"""Content assembler — renders a bundle into the review prompt.

This is the final transformation before text is handed to the model.
"""

from __future__ import annotations

import logging
from typing import Any

from code_reviewer.domain.entities import Bundle
from code_reviewer.domain.exceptions import ModelError
from code_reviewer.domain.ports.llm_gateway import LlmGateway

logger = logging.getLogger(__name__)

# ── Prompt template ─────────────────────────────────────────────────────────

REVIEW_CATEGORIES: tuple[str, ...] = (
    "Code Quality & Readability",
    "Correctness / Logic",
    "Security & Vulnerability",
    "Performance & Optimization",
    "Maintainability & Scalability",
    "Documentation & Comments",
    "Testing & Coverage",
    "Standards & Conventions",
    "Dependency Management",
    "Security Compliance",
    "Code Structure & Architecture",
    "Reusability & Modularity",
)

SEVERITIES: tuple[str, ...] = ("HIGH", "MEDIUM", "LOW")


def _render_header() -> str:
    numbered = "\n".join(
        f"{i}. {name}" for i, name in enumerate(REVIEW_CATEGORIES, start=1)
    )
    return (
        "You are a senior code reviewer. Analyze the following files and provide "
        "a structured review in JSON format with the following categories "
        "(only give categories that are relevant, skip others):\n"
        f"{numbered}\n\n"
        "For each category, provide findings, severity "
        f"({', '.join(SEVERITIES)}), and specific suggestions with code "
        "examples where applicable.\n"
    )


REVIEW_HEADER = _render_header()

REVIEW_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "fileName": {"type": "string"},
        "categories": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {"type": "string"},
                    "findings": {"type": "array", "items": {"type": "string"}},
                    "severity": {"type": "string", "enum": list(SEVERITIES)},
                    "suggestions": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "description": {"type": "string"},
                                "codeExample": {"type": "string"},
                            },
                            "required": ["description"],
                        },
                    },
                },
                "required": ["category", "findings", "severity"],
            },
        },
    },
    "required": ["fileName", "categories"],
}


def file_marker(path: str) -> str:
    return f"===== FILE: {path} ====="


def assemble(bundle: Bundle) -> str:
    """Combine the instruction header and every bundled file into one prompt."""
    sections = [f"{file_marker(f.path)}\n{f.content}\n" for f in bundle.files]
    return f"{REVIEW_HEADER}\n" + "\n".join(sections)


async def request_review(bundle: Bundle, llm: LlmGateway) -> str:
    """Send the assembled prompt to *llm* and return its raw text."""
    prompt = assemble(bundle)
    logger.info(
        "Requesting review of %d file(s), %d content bytes",
        len(bundle.files),
        bundle.total_bytes,
    )
    try:
        return await llm.generate(prompt, REVIEW_RESPONSE_SCHEMA)
    except ModelError:
        raise
    except Exception as exc:
        raise ModelError(str(exc) or "Failed to analyze") from exc
