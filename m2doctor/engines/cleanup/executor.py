"""CleanupExecutor — delete artifacts and their companion files."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

import structlog

# Suffix registry must be populated to know which files are primaries.
import m2doctor.engines.artifact_scanner.validators  # noqa: F401
from m2doctor.engines.artifact_scanner.registry import known_suffixes
from m2doctor.engines.cleanup.models import CleanResult

log = structlog.get_logger("m2doctor.engine")

CHECKSUM_SUFFIXES = (".sha1", ".md5", ".sha256", ".sha512", ".asc", ".lastUpdated")

# Resolver bookkeeping that pins a folder to its (bad) download.
METADATA_FILES = (
    "_remote.repositories",
    "_maven.repositories",
    "resolver-status.properties",
)


class ArtifactRef(Protocol):
    folder: str
    base_name: str


class _ItemFailed(Exception):
    """Internal: primary deletion of one item failed; message is reportable."""


class CleanupExecutor:
    """Delete caller-selected artifacts, one item at a time.

    Each item runs in two phases: the primary files (``base_name`` plus a
    registered artifact suffix) must all be removed for the item to count;
    companions (checksums, classifier siblings, resolver metadata) are removed
    best-effort afterwards. Failures never stop the batch.

    When *root* is given, items whose folder lies outside it are refused.
    """

    def __init__(self, root: str | os.PathLike[str] | None = None) -> None:
        self._root = Path(root).resolve() if root is not None else None

    def clean(self, items: Iterable[ArtifactRef]) -> CleanResult:
        result = CleanResult()
        for item in items:
            folder = Path(item.folder)
            try:
                primaries = self._delete_primaries(folder, item.base_name)
            except _ItemFailed as exc:
                log.warning(
                    "cleanup.item_failed",
                    folder=item.folder,
                    base_name=item.base_name,
                    error=str(exc),
                )
                result.errors.append(str(exc))
                continue
            result.deleted_count += 1
            self._delete_companions(folder, item.base_name, primaries)

        log.info("cleanup.completed", deleted=result.deleted_count, failed=len(result.errors))
        return result

    # ── phase 1 ──────────────────────────────────────────────────────────

    def _delete_primaries(self, folder: Path, base_name: str) -> list[Path]:
        if self._root is not None and not self._is_inside_root(folder):
            raise _ItemFailed(f"refusing to delete outside repository: {folder}")

        primaries = [folder / f"{base_name}{suffix}" for suffix in known_suffixes()]
        primaries = [p for p in primaries if p.is_file()]
        if not base_name or not primaries:
            raise _ItemFailed(f"artifact not found: {folder / base_name}")

        for path in primaries:
            try:
                path.unlink()
            except OSError as exc:
                raise _ItemFailed(
                    f"failed to delete {path}: {exc.strerror or exc}"
                ) from exc
            log.debug("cleanup.deleted", path=str(path))
        return primaries

    def _is_inside_root(self, folder: Path) -> bool:
        try:
            folder.resolve().relative_to(self._root)
        except (OSError, ValueError):
            return False
        return True

    # ── phase 2 ──────────────────────────────────────────────────────────

    @staticmethod
    def _companions(folder: Path, base_name: str, primaries: list[Path]) -> list[Path]:
        paths: list[Path] = []
        for primary in primaries:
            paths.extend(primary.with_name(primary.name + s) for s in CHECKSUM_SUFFIXES)
        try:
            siblings = sorted(os.listdir(folder))
        except OSError:
            siblings = []
        for name in siblings:
            if name.startswith((f"{base_name}-", f"{base_name}.")):
                paths.append(folder / name)
        paths.extend(folder / name for name in METADATA_FILES)
        return list(dict.fromkeys(paths))

    def _delete_companions(self, folder: Path, base_name: str, primaries: list[Path]) -> None:
        for path in self._companions(folder, base_name, primaries):
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                log.debug("cleanup.companion_skipped", path=str(path), error=str(exc))
                continue
            log.debug("cleanup.companion_deleted", path=str(path))


def clean(items: Iterable[ArtifactRef]) -> CleanResult:
    """Delete every artifact in *items*; failures are reported, never raised."""
    return CleanupExecutor().clean(items)
