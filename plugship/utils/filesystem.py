# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers for plugship.

Two jobs: write the build report atomically, and wipe the build output
directory for --clean.

Atomic writes go to a temporary file in the same directory as the target,
then get renamed over it. Rename on the same filesystem is atomic on POSIX,
so a crash leaves either the old report or the new one, never half of one.
"""

import shutil
import tempfile
from pathlib import Path


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # delete=False so the file survives closing and can be renamed.
    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".plugship_tmp_",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def remove_tree(directory: Path) -> bool:
    """
    Recursively delete a directory if it exists.

    Returns:
        True if something was removed, False if the directory wasn't there.

    Raises:
        NotADirectoryError: If the path exists but is a regular file.
        OSError: If removal fails part way (permissions, open handles).
    """
    if not directory.exists():
        return False
    if not directory.is_dir():
        raise NotADirectoryError(f"Expected a directory, got a file: {directory}")
    shutil.rmtree(directory)
    return True
