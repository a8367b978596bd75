"""
Archive Builder

Fluent builder for creating archives with path validation.
"""

from __future__ import annotations

from typing import Dict, Optional

from autonomi_transfer.storage.archive import Archive, ArchiveEntry, validate_archive_path
from autonomi_transfer.storage.types import ContentAddress, FileMetadata


class ArchiveBuilder:
    """
    Fluent builder for creating archives.

    Adding a path that is already present replaces that entry in place.

    Example:
        ```python
        from autonomi_transfer.storage import ArchiveBuilder

        archive = (
            ArchiveBuilder()
            .add_file("a.txt", address_a)
            .add_file("dir/b.txt", address_b, FileMetadata.now(size=42))
            .build()
        )
        ```
    """

    def __init__(self) -> None:
        """Initialize builder with no entries."""
        self._entries: Dict[str, ArchiveEntry] = {}

    def add_file(
        self,
        path: str,
        address: ContentAddress,
        metadata: Optional[FileMetadata] = None,
    ) -> ArchiveBuilder:
        """
        Add an entry.

        Args:
            path: Relative, forward-slash separated entry path
            address: Address of the content
            metadata: Entry metadata (defaults to now, size 0)

        Returns:
            Self for chaining

        Raises:
            ArchivePathError: If the path is invalid
            TypeError: If address is not a ContentAddress
        """
        if not isinstance(address, ContentAddress):
            raise TypeError(
                f"Archive entries reference a ContentAddress, got {type(address).__name__}"
            )
        validate_archive_path(path)

        self._entries[path] = ArchiveEntry(
            path=path,
            address=address,
            metadata=metadata or FileMetadata.now(),
        )
        return self

    def build(self) -> Archive:
        """
        Build the archive.

        Returns:
            Immutable Archive with entries in insertion order
        """
        return Archive(entries=tuple(self._entries.values()))


def single_entry_archive(
    path: str,
    address: ContentAddress,
    metadata: Optional[FileMetadata] = None,
) -> Archive:
    """
    Build an archive holding exactly one entry.

    Args:
        path: Entry path
        address: Address of the content
        metadata: Entry metadata

    Returns:
        Archive
    """
    return ArchiveBuilder().add_file(path, address, metadata).build()
