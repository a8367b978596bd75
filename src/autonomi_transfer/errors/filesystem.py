"""
Local filesystem exceptions.

Raised when reading the file to upload or writing downloaded content fails.
Both are fatal: retrying a local I/O error is never attempted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from autonomi_transfer.errors.base import TransferError


class LocalFileError(TransferError):
    """
    Raised when a local input file cannot be read.

    Example:
        >>> raise LocalFileError("photos/cat.jpg", reason="Permission denied")
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["path"] = str(path)
        details["reason"] = reason

        super().__init__(
            f"Cannot read {path}: {reason}",
            code="LOCAL_FILE_ERROR",
            details=details,
        )
        self.path = Path(path)
        self.reason = reason


class LocalFileNotFoundError(LocalFileError):
    """
    Raised when the file to upload does not exist.

    Example:
        >>> raise LocalFileNotFoundError("missing.bin")
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(path, reason="file not found", details=details)
        self.code = "LOCAL_FILE_NOT_FOUND"


class OutputWriteError(TransferError):
    """
    Raised when downloaded content cannot be written to disk.

    A partially written file is left in place.

    Example:
        >>> raise OutputWriteError("out/a.txt", reason="No space left on device")
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["path"] = str(path)
        details["reason"] = reason

        super().__init__(
            f"Cannot write {path}: {reason}",
            code="OUTPUT_WRITE_ERROR",
            details=details,
        )
        self.path = Path(path)
        self.reason = reason
