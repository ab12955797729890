"""Deterministic byte-budget enforcement.

Two ceilings apply to every review request: a per-file limit, enforced by
keeping the head and tail of an oversized file, and an aggregate limit,
enforced by keeping the longest prefix of the file sequence that fits.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from code_reviewer.domain.entities import BoundedFile, Bundle, FetchedFile

# ── Constants ───────────────────────────────────────────────────────────────

MAX_FILE_BYTES = 40_000
MAX_TOTAL_BYTES = 200_000
MAX_FILES = 50

TRUNCATION_MARKER = "\n/* ... truncated middle due to size limits ... */\n"

T = TypeVar("T")


# ── Public helpers ──────────────────────────────────────────────────────────


def byte_length(text: str) -> int:
    """Return the UTF-8 encoded size of *text*."""
    return len(text.encode("utf-8"))


def cap_files(items: Sequence[T], max_files: int = MAX_FILES) -> list[T]:
    """Keep only the first *max_files* items, in order."""
    return list(items[: max(max_files, 0)])


def truncate_content(content: str, limit: int = MAX_FILE_BYTES) -> tuple[str, bool]:
    """Bound *content* to *limit* bytes plus the marker, eliding the middle.

    Head and tail are ``limit // 2`` bytes each; a multi-byte character cut
    at either edge is dropped.  Returns ``(text, truncated)``.
    """
    raw = content.encode("utf-8")
    if len(raw) <= limit:
        return content, False

    half = max(0, limit // 2)
    head = raw[:half].decode("utf-8", errors="ignore")
    tail = raw[len(raw) - half :].decode("utf-8", errors="ignore") if half else ""
    return head + TRUNCATION_MARKER + tail, True


def bound_file(file: FetchedFile, limit: int = MAX_FILE_BYTES) -> BoundedFile:
    text, truncated = truncate_content(file.content, limit)
    return BoundedFile(path=file.path, content=text, truncated=truncated)


# ── Bundle budgeting ────────────────────────────────────────────────────────


def build_bundle(
    files: Iterable[BoundedFile],
    max_total_bytes: int = MAX_TOTAL_BYTES,
    *,
    truncated_any: bool = False,
) -> Bundle:
    """Accumulate *files* in order until the next one would overflow.

    The first file that does not fit ends accumulation: it and everything
    after it are excluded, so the result is always a prefix of *files*.
    Any per-file truncation flag also marks the bundle as truncated.

    Parameters
    ----------
    files:
        Files already passed through :func:`truncate_content`.
    max_total_bytes:
        Aggregate ceiling for the summed UTF-8 size of the included files.
    truncated_any:
        Truncation already signalled upstream.
    """
    included: list[BoundedFile] = []
    total = 0
    overflowed = False

    for f in files:
        truncated_any = truncated_any or f.truncated
        if overflowed:
            continue
        size = f.size_bytes
        if total + size > max_total_bytes:
            overflowed = True
            truncated_any = True
            continue
        total += size
        included.append(f)

    return Bundle(files=included, total_bytes=total, truncated_any=truncated_any)
