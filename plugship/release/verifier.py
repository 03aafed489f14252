# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Packaged artifact verification.

The zip itself is produced by the toolchain's own publish targets; this
module only checks what came out. It's advisory: a missing or unreadable
archive gets logged as a warning and recorded on the report, but never
fails the run.

For an artifact that exists, the report contains:
  - size in bytes, and in binary units (B, KB, MB, ...)
  - SHA256 of the file
  - the shared-library entries inside the archive, in archive order
"""

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from plugship.logging.logger import get_logger
from plugship.utils.hashing import compute_sha256

_logger: logging.Logger = get_logger(__name__)

SIZE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB")
SIZE_BASE: int = 1024


@dataclass(frozen=True)
class ArtifactReport:
    """Outcome of checking the packaged artifact."""

    path: str
    exists: bool
    size_bytes: Optional[int] = None
    size_human: Optional[str] = None
    sha256: Optional[str] = None
    listed_entries: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def format_size(size_bytes: int) -> str:
    """
    Render a byte count in binary units.

    Plain bytes print as an integer ("0 B", "1023 B"). Once the value reaches
    1024 it's divided down and printed with one decimal ("1.5 KB", "1.0 GB").
    PB is the largest unit; anything bigger stays in PB.
    """
    if size_bytes < 0:
        raise ValueError(f"Size cannot be negative: {size_bytes}")

    value = float(size_bytes)
    unit_index = 0
    while value >= SIZE_BASE and unit_index < len(SIZE_UNITS) - 1:
        value /= SIZE_BASE
        unit_index += 1

    if unit_index == 0:
        return f"{size_bytes} {SIZE_UNITS[0]}"
    return f"{value:.1f} {SIZE_UNITS[unit_index]}"


def list_library_entries(archive_path: Path, extension: str = ".dll") -> list[str]:
    """
    Names of archive entries ending in `extension` (any letter case).

    Raises:
        zipfile.BadZipFile: If the file is not a zip archive.
        OSError: If the file can't be opened.
    """
    suffix = extension.lower()
    with zipfile.ZipFile(archive_path) as archive:
        return [
            info.filename
            for info in archive.infolist()
            if not info.is_dir() and info.filename.lower().endswith(suffix)
        ]


def verify_artifact(artifact_path: Path, library_extension: str = ".dll") -> ArtifactReport:
    """
    Check the packaged artifact and describe it.

    Args:
        artifact_path: Where the archive is expected.
        library_extension: Entries with this suffix are listed.

    Returns:
        ArtifactReport. `exists` is False (with a warning) when the file is
        missing; an existing file that can't be read gets a warning and no
        size or digest.
    """
    if not artifact_path.is_file():
        message = f"Packaged artifact not found: {artifact_path}"
        _logger.warning(
            "Artifact missing",
            extra={"path": str(artifact_path)},
        )
        return ArtifactReport(path=str(artifact_path), exists=False, warnings=[message])

    try:
        size_bytes = artifact_path.stat().st_size
        digest = compute_sha256(artifact_path)
    except OSError as err:
        message = f"Could not read packaged artifact {artifact_path}: {err}"
        _logger.warning(
            "Artifact unreadable",
            extra={"path": str(artifact_path), "error": str(err)},
        )
        return ArtifactReport(path=str(artifact_path), exists=True, warnings=[message])

    size_human = format_size(size_bytes)
    warnings: list[str] = []

    try:
        entries = list_library_entries(artifact_path, library_extension)
    except (zipfile.BadZipFile, OSError) as err:
        entries = []
        warnings.append(f"Could not list archive contents of {artifact_path}: {err}")
        _logger.warning(
            "Archive contents unreadable",
            extra={"path": str(artifact_path), "error": str(err)},
        )

    _logger.info(
        "Artifact verified",
        extra={
            "path": str(artifact_path),
            "size": size_human,
            "size_bytes": size_bytes,
            "sha256": digest,
        },
    )
    for entry in entries:
        _logger.info("Archive entry", extra={"entry": entry})

    return ArtifactReport(
        path=str(artifact_path),
        exists=True,
        size_bytes=size_bytes,
        size_human=size_human,
        sha256=digest,
        listed_entries=entries,
        warnings=warnings,
    )
