# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
File helpers for the generated bench project and for --include sources.

cargo may be pointed at a workspace the moment its files exist, so each file
appears in one step: the text is written next to its final location under a
hidden `.rtimeit_tmp_` name and renamed over the target. A run that dies
halfway leaves either the previous file or no file, never a truncated
Cargo.toml.
"""

import os
import tempfile
from pathlib import Path

TEMP_PREFIX = ".rtimeit_tmp_"


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Put `content` at `target_path` in a single rename.

    Missing parent directories (`benches/`) are created. On any failure,
    including an encoding error, the partial temp file is deleted and the
    exception propagates with the target unchanged.
    """
    directory = target_path.parent
    directory.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=".tmp", dir=str(directory))
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(content)
        temp_path.replace(target_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def safe_read(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a user-supplied source file.

    A directory is refused up front so the error names the problem instead
    of surfacing as a bare permission error on some platforms.

    Raises:
        FileNotFoundError: nothing exists at `file_path`.
        IsADirectoryError: `file_path` is a directory.
        UnicodeDecodeError: the file isn't valid in `encoding`.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if file_path.is_dir():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    return file_path.read_text(encoding=encoding)
