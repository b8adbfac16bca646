"""Data models for the artifact scanner engine."""

from __future__ import annotations

from dataclasses import dataclass

INVALID_ARCHIVE = "invalid archive structure"
PROXY_ERROR_PAGE = "contains proxy error page"


@dataclass(frozen=True)
class ArtifactLocation:
    """One artifact: the directory holding it and its file name without suffix."""

    folder: str
    base_name: str


@dataclass(frozen=True)
class InvalidArtifact:
    """An artifact the scanner classified as corrupted."""

    folder: str
    base_name: str
    reason: str
    detail: str | None = None

    @property
    def location(self) -> ArtifactLocation:
        return ArtifactLocation(folder=self.folder, base_name=self.base_name)


@dataclass(frozen=True)
class Verdict:
    """Outcome of validating a single file."""

    ok: bool
    reason: str | None = None
    detail: str | None = None

    @classmethod
    def valid(cls) -> Verdict:
        return cls(ok=True)

    @classmethod
    def invalid(cls, reason: str, detail: str | None = None) -> Verdict:
        return cls(ok=False, reason=reason, detail=detail)
