"""Structural validator for zip-based archives (jar, war, ear, aar)."""

from __future__ import annotations

import os
import struct
import zipfile
from pathlib import Path
from typing import BinaryIO

from m2doctor.engines.artifact_scanner.models import INVALID_ARCHIVE, Verdict
from m2doctor.engines.artifact_scanner.registry import register_validator

# Central-directory compression method ids accepted as well-formed.
ZIP_STORED = 0
ZIP_DEFLATED = 8
ZIP_DEFLATE64 = 9
ZIP_BZIP2 = 12
ZIP_LZMA = 14
ZIP_ZSTANDARD = 93

ACCEPTED_METHODS = frozenset(
    {ZIP_STORED, ZIP_DEFLATED, ZIP_DEFLATE64, ZIP_BZIP2, ZIP_LZMA, ZIP_ZSTANDARD}
)

_LOCAL_HEADER = struct.Struct("<4s2B4HL2L2H")
_LOCAL_SIGNATURE = b"PK\x03\x04"
_NAME_LENGTH = 10
_EXTRA_LENGTH = 11


class ArchiveValidator:
    """Parse the zip container metadata without inflating any entry."""

    kind = "archive"
    suffixes = [".jar", ".war", ".ear", ".aar"]

    def validate(self, path: Path) -> Verdict:
        # OSError from open() is left to the caller: an unreadable file is not
        # a corrupted one.
        with open(path, "rb") as fh:
            size = os.fstat(fh.fileno()).st_size
            try:
                with zipfile.ZipFile(fh) as zf:
                    infos = zf.infolist()
            except zipfile.BadZipFile as exc:
                return Verdict.invalid(INVALID_ARCHIVE, _describe(exc))
            except (EOFError, ValueError, struct.error, zipfile.LargeZipFile) as exc:
                return Verdict.invalid(INVALID_ARCHIVE, f"unreadable central directory ({exc})")

            for info in infos:
                problem = self._check_entry(fh, info, size)
                if problem is not None:
                    return Verdict.invalid(INVALID_ARCHIVE, problem)
        return Verdict.valid()

    @staticmethod
    def _check_entry(fh: BinaryIO, info: zipfile.ZipInfo, size: int) -> str | None:
        if info.compress_type not in ACCEPTED_METHODS:
            return f"unsupported compression method {info.compress_type}"

        if info.header_offset < 0 or info.header_offset + _LOCAL_HEADER.size > size:
            return "truncated entry"
        fh.seek(info.header_offset)
        raw = fh.read(_LOCAL_HEADER.size)
        if len(raw) != _LOCAL_HEADER.size:
            return "truncated entry"

        header = _LOCAL_HEADER.unpack(raw)
        if header[0] != _LOCAL_SIGNATURE:
            return "bad local header"

        data_start = (
            info.header_offset + _LOCAL_HEADER.size + header[_NAME_LENGTH] + header[_EXTRA_LENGTH]
        )
        if data_start + info.compress_size > size:
            return "truncated entry"
        return None


def _describe(exc: zipfile.BadZipFile) -> str:
    message = str(exc)
    if message == "File is not a zip file":
        return "not a zip archive"
    return message.lower() or "bad zip file"


register_validator(ArchiveValidator())
