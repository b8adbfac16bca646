"""Shared pytest fixtures for m2-doctor tests."""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

MANIFEST = b"Manifest-Version: 1.0\nCreated-By: m2doctor-tests\n"

VALID_POM = b"""<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>lib</artifactId>
  <version>1.0</version>
</project>
"""

HARBOR_PAGE = b"<!DOCTYPE html><title>Harbor</title>"

_LOCAL_SIG = b"PK\x03\x04"
_CENTRAL_SIG = b"PK\x01\x02"


def zip_bytes(compression: int = zipfile.ZIP_DEFLATED, entries: dict[str, bytes] | None = None) -> bytes:
    """Build a small, well-formed archive in memory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        for name, data in (entries or {"META-INF/MANIFEST.MF": MANIFEST}).items():
            zf.writestr(name, data)
    return buf.getvalue()


def _patch_u16(data: bytearray, signature: bytes, offset: int, value: int) -> None:
    start = data.find(signature)
    while start != -1:
        data[start + offset : start + offset + 2] = value.to_bytes(2, "little")
        start = data.find(signature, start + 4)


def with_method(data: bytes, method: int) -> bytes:
    """Relabel every entry of a stored archive with another method id.

    Used to produce zstd (93) archives without a zstd-capable zipfile.
    """
    out = bytearray(data)
    _patch_u16(out, _LOCAL_SIG, 8, method)
    _patch_u16(out, _CENTRAL_SIG, 10, method)
    return bytes(out)


def zstd_zip_bytes() -> bytes:
    return with_method(zip_bytes(zipfile.ZIP_STORED), 93)


ARCHIVE_FAMILIES: dict[str, Callable[[], bytes]] = {
    "deflate": lambda: zip_bytes(zipfile.ZIP_DEFLATED),
    "stored": lambda: zip_bytes(zipfile.ZIP_STORED),
    "bzip2": lambda: zip_bytes(zipfile.ZIP_BZIP2),
    "zstd": zstd_zip_bytes,
}


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Callable[..., Path]:
    """Create ``<tmp>/<group path>/<artifact>/<version>`` and return it."""

    def _make(group: str = "com/acme", artifact: str = "lib", version: str = "1.0") -> Path:
        folder = tmp_path.joinpath(*group.split("/"), artifact, version)
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    return _make


@pytest.fixture
def acme_repo(tmp_path: Path) -> Path:
    """A repository with a good jar and a proxy-error pom for com.acme:lib:1.0."""
    folder = tmp_path / "com" / "acme" / "lib" / "1.0"
    folder.mkdir(parents=True)
    (folder / "lib-1.0.jar").write_bytes(zip_bytes())
    (folder / "lib-1.0.pom").write_bytes(HARBOR_PAGE)
    return tmp_path


@pytest.fixture
def restore_logging():
    """Undo setup_logging(): stdlib root handlers, package level, structlog config."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("m2doctor").setLevel(logging.NOTSET)
    structlog.reset_defaults()
