"""Dependency injection — engine singletons handed to the routers."""

from __future__ import annotations

from m2doctor.engines.artifact_scanner import ArtifactScanner
from m2doctor.engines.cleanup import CleanupExecutor
from m2doctor.engines.repo_resolver import RepositoryPathResolver

_scanner = ArtifactScanner()
_cleanup = CleanupExecutor()


def get_resolver() -> RepositoryPathResolver:
    # Built per request: the environment and settings files may have changed.
    return RepositoryPathResolver()


def get_scanner() -> ArtifactScanner:
    return _scanner


def get_cleanup_executor() -> CleanupExecutor:
    return _cleanup
