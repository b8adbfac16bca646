"""Validator registry — match artifact files to validators by suffix."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from m2doctor.engines.artifact_scanner.models import Verdict


@runtime_checkable
class ArtifactValidator(Protocol):
    """Interface that every artifact validator must satisfy."""

    kind: str
    suffixes: list[str]

    def validate(self, path: Path) -> Verdict: ...


VALIDATOR_REGISTRY: dict[str, ArtifactValidator] = {}
_BY_SUFFIX: dict[str, ArtifactValidator] = {}


def register_validator(validator: ArtifactValidator) -> None:
    """Register a validator instance by its kind and claim its suffixes."""
    VALIDATOR_REGISTRY[validator.kind] = validator
    for suffix in validator.suffixes:
        _BY_SUFFIX[suffix] = validator


def known_suffixes() -> list[str]:
    """All registered suffixes, longest first so stripping is unambiguous."""
    return sorted(_BY_SUFFIX, key=len, reverse=True)


def split_artifact_name(file_name: str) -> tuple[str, ArtifactValidator] | None:
    """Return ``(base_name, validator)`` for an artifact file name, else None.

    Matching is case-sensitive, as Maven writes lowercase suffixes.
    """
    for suffix in known_suffixes():
        if file_name.endswith(suffix) and len(file_name) > len(suffix):
            return file_name[: -len(suffix)], _BY_SUFFIX[suffix]
    return None
