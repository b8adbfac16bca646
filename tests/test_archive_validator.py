"""Tests for the structural archive validator."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from conftest import ARCHIVE_FAMILIES, with_method, zip_bytes
from m2doctor.engines.artifact_scanner.models import INVALID_ARCHIVE
from m2doctor.engines.artifact_scanner.validators.archive import (
    ACCEPTED_METHODS,
    ArchiveValidator,
)


def _write(tmp_path: Path, data: bytes, name: str = "lib-1.0.jar") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


class TestWellFormed:
    @pytest.mark.parametrize("family", sorted(ARCHIVE_FAMILIES))
    def test_each_compression_family_is_valid(self, tmp_path, family):
        verdict = ArchiveValidator().validate(_write(tmp_path, ARCHIVE_FAMILIES[family]()))
        assert verdict.ok
        assert verdict.reason is None

    def test_empty_archive_is_valid(self, tmp_path):
        assert ArchiveValidator().validate(_write(tmp_path, zip_bytes(entries={}))).ok

    def test_many_entries(self, tmp_path):
        entries = {f"com/acme/C{i}.class": bytes([i % 256]) * 64 for i in range(50)}
        assert ArchiveValidator().validate(_write(tmp_path, zip_bytes(entries=entries))).ok

    def test_zstd_needs_no_decompressor(self):
        assert 93 in ACCEPTED_METHODS


class TestCorrupted:
    @pytest.mark.parametrize("family", sorted(ARCHIVE_FAMILIES))
    def test_truncated_download(self, tmp_path, family):
        data = ARCHIVE_FAMILIES[family]()
        verdict = ArchiveValidator().validate(_write(tmp_path, data[: len(data) // 2]))
        assert not verdict.ok
        assert verdict.reason == INVALID_ARCHIVE

    def test_empty_file(self, tmp_path):
        verdict = ArchiveValidator().validate(_write(tmp_path, b""))
        assert verdict.reason == INVALID_ARCHIVE
        assert verdict.detail == "not a zip archive"

    def test_html_instead_of_jar(self, tmp_path):
        verdict = ArchiveValidator().validate(
            _write(tmp_path, b"<!DOCTYPE html><html><body>502 Bad Gateway</body></html>")
        )
        assert verdict.reason == INVALID_ARCHIVE

    def test_damaged_local_header(self, tmp_path):
        data = bytearray(zip_bytes())
        data[0:4] = b"XXXX"
        verdict = ArchiveValidator().validate(_write(tmp_path, bytes(data)))
        assert verdict.reason == INVALID_ARCHIVE
        assert verdict.detail == "bad local header"

    def test_unknown_compression_method(self, tmp_path):
        data = with_method(zip_bytes(zipfile.ZIP_STORED), 99)
        verdict = ArchiveValidator().validate(_write(tmp_path, data))
        assert verdict.reason == INVALID_ARCHIVE
        assert verdict.detail == "unsupported compression method 99"

    def test_entry_larger_than_file(self, tmp_path):
        data = bytearray(zip_bytes(zipfile.ZIP_STORED))
        central = data.find(b"PK\x01\x02")
        # compressed size lives at offset 20 of the central directory header
        data[central + 20 : central + 24] = (0x7FFFFFFF).to_bytes(4, "little")
        verdict = ArchiveValidator().validate(_write(tmp_path, bytes(data)))
        assert verdict.reason == INVALID_ARCHIVE
        assert verdict.detail == "truncated entry"


class TestIOErrors:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            ArchiveValidator().validate(tmp_path / "gone.jar")

    def test_handle_is_released(self, tmp_path):
        path = _write(tmp_path, zip_bytes())
        ArchiveValidator().validate(path)
        path.unlink()
        assert not path.exists()
