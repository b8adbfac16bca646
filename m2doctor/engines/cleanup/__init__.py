"""Cleanup engine — delete flagged artifacts with per-item accounting."""

from m2doctor.engines.cleanup.executor import CleanupExecutor, clean
from m2doctor.engines.cleanup.models import CleanResult

__all__ = ["CleanResult", "CleanupExecutor", "clean"]
