"""Artifact scanner engine — find corrupted archives and descriptors."""

from m2doctor.engines.artifact_scanner.models import (
    INVALID_ARCHIVE,
    PROXY_ERROR_PAGE,
    ArtifactLocation,
    InvalidArtifact,
    Verdict,
)
from m2doctor.engines.artifact_scanner.scanner import ArtifactScanner, scan, scan_async

__all__ = [
    "INVALID_ARCHIVE",
    "PROXY_ERROR_PAGE",
    "ArtifactLocation",
    "ArtifactScanner",
    "InvalidArtifact",
    "Verdict",
    "scan",
    "scan_async",
]
