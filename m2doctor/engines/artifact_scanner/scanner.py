"""ArtifactScanner — walk a repository and validate artifacts in parallel."""

from __future__ import annotations

import asyncio
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import structlog

# Ensure validators are registered before any scan runs.
import m2doctor.engines.artifact_scanner.validators  # noqa: F401
from m2doctor.engines.artifact_scanner.models import InvalidArtifact
from m2doctor.engines.artifact_scanner.registry import ArtifactValidator, split_artifact_name
from m2doctor.exceptions import ScanIOError

log = structlog.get_logger("m2doctor.engine")

# Validation is dominated by disk reads, so oversubscribe the cores.
WORKERS_PER_CPU = 4


def default_worker_count() -> int:
    return (os.cpu_count() or 1) * WORKERS_PER_CPU


@dataclass(frozen=True)
class _Candidate:
    path: Path
    folder: str
    base_name: str
    validator: ArtifactValidator


def _ensure_scan_root(repo_path: str | os.PathLike[str]) -> Path:
    if not str(repo_path).strip():
        raise ScanIOError("", "repository path is empty")
    root = Path(repo_path).expanduser()
    if not root.exists():
        raise ScanIOError(str(root), "repository path does not exist")
    if not root.is_dir():
        raise ScanIOError(str(root), "repository path is not a directory")
    return root.absolute()


def _on_walk_error(exc: OSError) -> None:
    log.debug("scanner.listing_skipped", path=exc.filename, error=exc.strerror)


def discover_artifacts(root: Path) -> list[_Candidate]:
    """Enumerate artifact files under *root*, never entering hidden directories."""
    found: list[_Candidate] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            match = split_artifact_name(name)
            if match is None:
                continue
            path = Path(dirpath) / name
            if not path.is_file():
                continue
            base_name, validator = match
            found.append(_Candidate(path, dirpath, base_name, validator))
    return found


def _check(candidate: _Candidate) -> InvalidArtifact | None:
    """Run one validator; I/O failures on the file mean "no finding"."""
    try:
        verdict = candidate.validator.validate(candidate.path)
    except OSError as exc:
        log.debug("scanner.file_skipped", path=str(candidate.path), error=str(exc))
        return None
    if verdict.ok:
        return None
    return InvalidArtifact(
        folder=candidate.folder,
        base_name=candidate.base_name,
        reason=verdict.reason or "",
        detail=verdict.detail,
    )


class ArtifactScanner:
    """Scan a local repository tree for corrupted artifacts.

    The worker pool is sized from the CPU count; ``max_workers`` exists for
    tests that want single-threaded, fully deterministic runs.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        self._max_workers = max_workers or default_worker_count()

    def scan(self, repo_path: str | os.PathLike[str]) -> list[InvalidArtifact]:
        root = _ensure_scan_root(repo_path)
        start = time.perf_counter()
        log.info("scanner.started", root=str(root), workers=self._max_workers)

        candidates = discover_artifacts(root)
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="m2doctor-scan"
        ) as pool:
            results = [r for r in pool.map(_check, candidates) if r is not None]

        log.info(
            "scanner.completed",
            root=str(root),
            candidates=len(candidates),
            invalid=len(results),
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return results


def scan(repo_path: str | os.PathLike[str]) -> list[InvalidArtifact]:
    """Scan *repo_path* and return every corrupted artifact found."""
    return ArtifactScanner().scan(repo_path)


async def scan_async(repo_path: str | os.PathLike[str]) -> list[InvalidArtifact]:
    """Same as :func:`scan`, without blocking the event loop."""
    return await asyncio.to_thread(scan, repo_path)
