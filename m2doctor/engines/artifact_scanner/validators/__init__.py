"""Artifact validators — auto-registered on import."""

from m2doctor.engines.artifact_scanner.validators import (
    archive,  # noqa: F401
    descriptor,  # noqa: F401
)
