"""File filtering — decide which tree entries are offered for review."""

from __future__ import annotations

from code_reviewer.domain.entities import FileNode

SKIP_EXTENSIONS: frozenset[str] = frozenset(
    {
        # images
        ".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico",
        ".bmp", ".tif", ".tiff", ".psd",
        # documents / archives
        ".pdf",
        ".zip", ".gz", ".tgz", ".tar", ".bz2", ".xz", ".rar", ".7z",
        # audio / video
        ".mp3", ".wav", ".flac", ".ogg", ".m4a",
        ".mp4", ".mov", ".avi", ".mkv", ".ogv", ".webm",
        # 3D models
        ".glb", ".gltf", ".fbx", ".obj", ".stl",
    }
)


def _filename(path: str) -> str:
    return path.rsplit("/", maxsplit=1)[-1]


def extension(path: str) -> str | None:
    """Return the lower-cased extension (with the dot), or *None* if absent."""
    name = _filename(path)
    dot = name.rfind(".")
    if dot == -1:
        return None
    return name[dot:].lower()


def has_skip_extension(path: str) -> bool:
    ext = extension(path)
    return ext is not None and ext in SKIP_EXTENSIONS


def _prefix(root_path: str | None) -> str | None:
    if not root_path:
        return None
    return root_path if root_path.endswith("/") else f"{root_path}/"


def filter_tree(nodes: list[FileNode], root_path: str | None = None) -> list[str]:
    """Return blob paths under *root_path* that are not binary/media files.

    Order is preserved from *nodes*.
    """
    prefix = _prefix(root_path)
    results: list[str] = []
    for node in nodes:
        if node.type != "blob":
            continue
        if prefix is not None and not node.path.startswith(prefix):
            continue
        if has_skip_extension(node.path):
            continue
        results.append(node.path)
    return results
