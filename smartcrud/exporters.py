# File: smartcrud/exporters.py
"""
SmartCRUD - Artifact Writer
============================

Writes rendered artifacts to disk.

Responsible for:
    1. Honouring the overwrite policy (existing files are skipped unless
       ``force`` is set).
    2. Creating missing parent directories.
    3. Writing atomically (temp file in the target directory, fsync,
       ``os.replace``), so a target is either the old file or the
       complete new one.
    4. Returning a ``FileRecord`` (size, line count, checksum) per write.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from smartcrud.models import WriteStatus
from smartcrud.utils import count_lines, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("smartcrud.exporters")


# ---------------------------------------------------------------------------
# Data classes for write results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single written file."""

    path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=True, slots=True)
class WriteResult:
    status: WriteStatus
    path: str
    record: Optional[FileRecord] = None

    @property
    def written(self) -> bool:
        return self.status is WriteStatus.WRITTEN


# ---------------------------------------------------------------------------
# Atomic write
# ---------------------------------------------------------------------------


def _target_mode(target_path: Path) -> int:
    """Permission bits for the replaced file: the existing target's, else umask-based."""
    try:
        return stat.S_IMODE(os.stat(target_path).st_mode)
    except FileNotFoundError:
        umask: int = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write_text(target_path: Path, text: str) -> FileRecord:
    """
    Write ``text`` to ``target_path`` atomically and return its record.

    The temporary file is created in the target's directory so that
    ``os.replace`` stays on one filesystem. It takes the permissions of
    the file it replaces, or the umask default for a new file. On any
    failure the temporary file is removed and the exception propagates;
    the target is left as it was.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data: bytes = text.encode("utf-8")
    mode: int = _target_mode(target_path)

    tmp_path: str = ""
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(target_path.parent),
            prefix=f".{target_path.name}.",
            suffix=".tmp",
        )
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fchmod(handle.fileno(), mode)
            os.fsync(handle.fileno())

        os.replace(tmp_path, str(target_path))
        tmp_path = ""
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)

    return FileRecord(
        path=str(target_path),
        size_bytes=len(data),
        line_count=count_lines(text),
        sha256=sha256_hex(text),
    )


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class ArtifactWriter:
    """
    Applies the overwrite policy and writes artifacts.

    Keeps the records of every file it wrote, in order, for reporting.
    """

    def __init__(self) -> None:
        self._records: List[FileRecord] = []

    @property
    def records(self) -> List[FileRecord]:
        return list(self._records)

    def write(self, path: Path, content: str, force: bool = False) -> WriteResult:
        if path.exists() and not force:
            logger.info("Skipped existing file: %s", path)
            return WriteResult(status=WriteStatus.SKIPPED, path=str(path))

        record: FileRecord = atomic_write_text(path, content)
        self._records.append(record)
        logger.debug(
            "Wrote file: %s (%d bytes, %d lines).",
            path,
            record.size_bytes,
            record.line_count,
        )
        return WriteResult(status=WriteStatus.WRITTEN, path=str(path), record=record)


__all__: List[str] = [
    "FileRecord",
    "WriteResult",
    "atomic_write_text",
    "ArtifactWriter",
]
