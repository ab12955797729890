"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class FileNode:
    """A single node from the GitHub tree API (blob or sub-tree)."""

    path: str
    type: str  # "blob" or "tree"


@dataclass(frozen=True, slots=True)
class RepoMetadata:
    """High-level metadata about a GitHub repository."""

    owner: str
    repo: str
    default_branch: str


@dataclass(frozen=True, slots=True)
class RepoTree:
    """Recursive tree listing at one ref.

    ``truncated`` mirrors GitHub's own flag for trees too large to return
    in a single response.
    """

    nodes: list[FileNode]
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class RepoListing:
    """Filtered file paths for a repository reference."""

    owner: str
    repo: str
    ref: str
    files: list[str]
    root_path: str | None = None
    tree_truncated: bool = False


@dataclass(frozen=True, slots=True)
class FetchedFile:
    """A file with its decoded text content."""

    path: str
    content: str


@dataclass(frozen=True, slots=True)
class BoundedFile:
    """A file whose content has passed through the per-file size limit."""

    path: str
    content: str
    truncated: bool = False

    @property
    def size_bytes(self) -> int:
        return len(self.content.encode("utf-8"))


@dataclass(frozen=True, slots=True)
class Bundle:
    """Ordered, size-bounded collection of files for one review request."""

    files: list[BoundedFile] = field(default_factory=list)
    total_bytes: int = 0
    truncated_any: bool = False


@dataclass(frozen=True, slots=True)
class ReviewOutcome:
    """Raw model output plus the bundle figures the caller reports."""

    text: str
    truncated: bool
    total_bytes: int
    file_count: int
