"""m2-doctor: find and remove corrupted artifacts in a local Maven repository."""

__version__ = "0.1.0"

from m2doctor.engines.artifact_scanner import (
    ArtifactLocation,
    ArtifactScanner,
    InvalidArtifact,
    scan,
    scan_async,
)
from m2doctor.engines.cleanup import CleanResult, CleanupExecutor, clean
from m2doctor.engines.repo_resolver import RepositoryPathResolver, resolve_repository_path
from m2doctor.exceptions import M2DoctorError, ResolutionError, ScanIOError

__all__ = [
    "ArtifactLocation",
    "ArtifactScanner",
    "CleanResult",
    "CleanupExecutor",
    "InvalidArtifact",
    "M2DoctorError",
    "RepositoryPathResolver",
    "ResolutionError",
    "ScanIOError",
    "clean",
    "resolve_repository_path",
    "scan",
    "scan_async",
]
