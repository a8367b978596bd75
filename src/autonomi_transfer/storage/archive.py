"""
Archive Model

An archive is an ordered manifest mapping relative paths to content
addresses. It is stored on the network as the client library's
``PublicArchive`` and named by an ArchiveAddress; this module only holds
the validated in-memory form and converts to and from the
``(path, hex address, metadata)`` triples the network client exchanges.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from autonomi_transfer.errors.storage import ArchiveFormatError, ArchivePathError
from autonomi_transfer.storage.types import ArchiveAddress, ContentAddress, FileMetadata


DEFAULT_ARCHIVE_PATH = "archived_file"
"""Entry path used when archiving existing data without an explicit path."""

_DRIVE_ROOT = re.compile(r"^[A-Za-z]:/")

NetworkEntry = Tuple[str, str, Any]
"""(path, hex address, metadata) as exchanged with the network client."""


def archive_path_problem(path: Any) -> Optional[str]:
    """
    Explain why ``path`` is not a valid archive entry path.

    Args:
        path: Candidate entry path

    Returns:
        A reason string, or None if the path is valid
    """
    if not isinstance(path, str) or not path:
        return "path must be a non-empty string"
    if "\x00" in path:
        return "NUL characters are not allowed"
    if "\\" in path:
        return "use '/' as the separator"
    if path.startswith("/"):
        return "path must be relative"
    if _DRIVE_ROOT.match(path):
        return "drive-rooted paths are not allowed"

    for segment in path.split("/"):
        if segment == "":
            return "empty path segments are not allowed"
        if segment in (".", ".."):
            return f"'{segment}' segments are not allowed"

    return None


def validate_archive_path(path: str) -> str:
    """
    Validate an archive entry path.

    Args:
        path: Forward-slash separated relative path

    Returns:
        The path, unchanged

    Raises:
        ArchivePathError: If the path is empty, absolute or escapes its root
    """
    problem = archive_path_problem(path)
    if problem is not None:
        raise ArchivePathError(str(path), reason=problem)
    return path


class ArchiveEntry(BaseModel):
    """One (path, address) pair of an archive."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(
        ...,
        description="Relative, forward-slash separated path of the entry",
    )
    address: ContentAddress = Field(
        ...,
        description="Address of the entry's content",
    )
    metadata: FileMetadata = Field(
        ...,
        description="Timestamps and size of the entry",
    )

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        problem = archive_path_problem(value)
        if problem is not None:
            raise ValueError(problem)
        return value

    @field_validator("address", mode="before")
    @classmethod
    def _parse_address(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"value": value}
        return value


class Archive(BaseModel):
    """
    Ordered, immutable manifest of archive entries.

    Paths are unique. Build one with ArchiveBuilder.
    """

    model_config = ConfigDict(frozen=True)

    entries: Tuple[ArchiveEntry, ...] = Field(
        default=(),
        description="Entries in insertion order",
    )

    @model_validator(mode="after")
    def _check_unique_paths(self) -> Archive:
        seen = set()
        for entry in self.entries:
            if entry.path in seen:
                raise ValueError(f"duplicate entry path {entry.path!r}")
            seen.add(entry.path)
        return self

    @property
    def paths(self) -> List[str]:
        """Entry paths in order."""
        return [entry.path for entry in self.entries]

    @property
    def is_empty(self) -> bool:
        """Whether the archive has no entries."""
        return not self.entries

    def to_network(self) -> List[Tuple[str, str, FileMetadata]]:
        """Entries as (path, hex address, metadata) triples, in order."""
        return [(entry.path, entry.address.value, entry.metadata) for entry in self.entries]

    @classmethod
    def from_network(
        cls,
        items: Iterable[NetworkEntry],
        *,
        address: Optional[ArchiveAddress] = None,
    ) -> Archive:
        """
        Validate entries read from a stored archive.

        Args:
            items: (path, hex address, metadata) triples; metadata may be a
                FileMetadata or a mapping with created/modified/size
            address: Where the archive came from, for error context

        Returns:
            The archive

        Raises:
            ArchiveFormatError: If any entry is malformed or a path repeats
        """
        where = address.value if address is not None else None
        try:
            entries = tuple(
                ArchiveEntry(path=path, address=hex_address, metadata=metadata)
                for path, hex_address, metadata in items
            )
            return cls(entries=entries)
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {"msg": str(e), "loc": ()}
            location = ".".join(str(part) for part in first.get("loc", ()))
            reason = f"{location}: {first['msg']}" if location else first["msg"]
            raise ArchiveFormatError(
                reason,
                address=where,
                details={"error_count": e.error_count()},
            ) from None
        except (TypeError, ValueError) as e:
            raise ArchiveFormatError(f"malformed entry: {e}", address=where) from None
