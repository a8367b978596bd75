"""
Security utilities for autonomi-transfer.

Archive manifests come from the network, so the paths inside them are
untrusted input. Everything written during an archive download goes
through ``validate_path`` first.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


def validate_path(requested_path: Union[str, Path], base_directory: Union[str, Path]) -> Path:
    """
    Validate and sanitize a file path to prevent path traversal attacks.

    Ensures the requested path is within the allowed base directory
    by resolving symlinks and checking for directory escape attempts.

    Args:
        requested_path: Path relative to the base; an absolute path replaces the
            base when joined and is rejected unless it lies inside it.
        base_directory: The allowed base directory.

    Returns:
        Sanitized absolute path within the base directory.

    Raises:
        ValueError: If the path attempts to escape the base directory.

    Example:
        >>> validate_path("../../../etc/passwd", "/srv/downloads")
        ValueError: Path traversal attempt detected
        >>> validate_path("docs/report.pdf", "/srv/downloads")
        PosixPath('/srv/downloads/docs/report.pdf')
    """
    base = Path(base_directory).resolve()
    full_path = (base / Path(requested_path)).resolve()

    if full_path == base:
        raise ValueError(f"Path {requested_path} resolves to the base directory itself")

    try:
        full_path.relative_to(base)
    except ValueError:
        raise ValueError(
            f"Path traversal attempt detected: {requested_path} escapes {base_directory}"
        )

    return full_path
