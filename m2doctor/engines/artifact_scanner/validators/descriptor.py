"""Descriptor heuristic — spot HTML error pages served in place of a POM."""

from __future__ import annotations

from pathlib import Path

from m2doctor.engines.artifact_scanner.models import PROXY_ERROR_PAGE, Verdict
from m2doctor.engines.artifact_scanner.registry import register_validator

# (category, marker) in match order. Matching is case-sensitive.
PROXY_ERROR_MARKERS: tuple[tuple[str, bytes], ...] = (
    ("html-doctype", b"<!DOCTYPE html>"),
    ("html-doctype", b"<!doctype html>"),
    ("harbor-title", b"<title>Harbor</title>"),
    ("harbor-login", b"Login to Harbor"),
)


class ContentHeuristic:
    """Flag descriptors whose bytes contain a known proxy error-page marker.

    The descriptor is not parsed; a broken but marker-free POM counts as valid.
    """

    kind = "descriptor"
    suffixes = [".pom"]

    def validate(self, path: Path) -> Verdict:
        content = path.read_bytes()
        for category, marker in PROXY_ERROR_MARKERS:
            if marker in content:
                return Verdict.invalid(PROXY_ERROR_PAGE, category)
        return Verdict.valid()


register_validator(ContentHeuristic())
