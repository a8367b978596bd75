"""
Local file helpers.

Files are read fully before any network call and written only after one
completes, so no handle stays open across a retry wait.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from autonomi_transfer.errors.filesystem import (
    LocalFileError,
    LocalFileNotFoundError,
    OutputWriteError,
)


def read_local_file(path: Union[str, Path]) -> bytes:
    """
    Read a whole file into memory.

    Raises:
        LocalFileNotFoundError: If the file does not exist
        LocalFileError: If it exists but cannot be read
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError:
        raise LocalFileNotFoundError(path) from None
    except IsADirectoryError:
        raise LocalFileError(path, reason="is a directory") from None
    except OSError as e:
        raise LocalFileError(path, reason=e.strerror or str(e)) from e


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create a directory and any missing parents.

    Raises:
        OutputWriteError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(path, reason=e.strerror or str(e)) from e
    return path


def write_output_file(path: Union[str, Path], data: bytes) -> Path:
    """
    Write bytes to ``path``, creating parent directories as needed.

    A partially written file is left behind if the write fails midway.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    path = Path(path)
    ensure_directory(path.parent)
    try:
        path.write_bytes(data)
    except OSError as e:
        raise OutputWriteError(path, reason=e.strerror or str(e)) from e
    return path
