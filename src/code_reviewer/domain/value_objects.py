"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from code_reviewer.domain.exceptions import InvalidInputError

_GITHUB_HOST = "github.com"
_REF_MARKERS = frozenset({"tree", "blob"})


@dataclass(frozen=True, slots=True)
class RepoReference:
    """Location inside a GitHub repository, parsed from a web URL.

    ``https://github.com/psf/requests`` yields owner and repo only;
    ``https://github.com/psf/requests/tree/main/src/requests`` additionally
    yields ``ref="main"`` and ``path="src/requests"``.  No network access
    happens here.
    """

    owner: str
    repo: str
    ref: str | None = None
    path: str | None = None

    @classmethod
    def from_url(cls, url: str) -> RepoReference:
        """Parse and validate a raw URL string."""
        url = url.strip()
        try:
            parts = urlsplit(url)
            host = parts.hostname
        except ValueError as exc:
            raise InvalidInputError(f"Invalid URL: '{url}'.") from exc

        if parts.scheme not in ("http", "https") or not host:
            raise InvalidInputError(f"Invalid URL: '{url}'.")
        if host.lower() != _GITHUB_HOST:
            raise InvalidInputError(
                f"Only github.com links are supported (got '{host}')."
            )

        segments = [unquote(s) for s in parts.path.split("/") if s]
        if len(segments) < 2:
            raise InvalidInputError(
                f"Invalid repository URL: '{url}'. "
                "Expected format: https://github.com/<owner>/<repo>"
            )

        owner, repo = segments[0], segments[1]
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        if not repo:
            raise InvalidInputError(f"Invalid repository URL: '{url}'.")

        if len(segments) > 3 and segments[2] in _REF_MARKERS:
            path = "/".join(segments[4:])
            return cls(owner=owner, repo=repo, ref=segments[3], path=path or None)

        return cls(owner=owner, repo=repo)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
