"""Data models for the cleanup engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CleanResult:
    """Outcome of a cleanup batch: items removed plus one message per failure."""

    deleted_count: int = 0
    errors: list[str] = field(default_factory=list)
