"""
Archive workflow for data that is already on the network.

Wraps an existing ContentAddress in a single-entry archive and stores it.
Unlike the archive step of an upload, the caller chooses the entry path,
including nested directory segments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from autonomi_transfer.storage.archive import DEFAULT_ARCHIVE_PATH, Archive
from autonomi_transfer.storage.archive_builder import single_entry_archive
from autonomi_transfer.storage.content_store import ContentStore
from autonomi_transfer.storage.types import ArchiveAddress, ContentAddress, FileMetadata
from autonomi_transfer.utils.logging import get_logger
from autonomi_transfer.utils.retry import RetryController, RetryOutcome

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ArchiveCreationReport:
    """Result of archiving existing data."""

    archive_address: ArchiveAddress
    data_address: ContentAddress
    entry_path: str
    attempts: int


async def store_archive(
    archive: Archive,
    store: ContentStore,
    retry: RetryController,
) -> RetryOutcome[ArchiveAddress]:
    """
    Store an archive under the retry policy.

    Args:
        archive: Archive to store
        store: Content store to write through
        retry: Retry controller for the write

    Returns:
        RetryOutcome holding the new ArchiveAddress

    Raises:
        RetriesExhaustedError: If every attempt failed transiently
        StorageError: On a fatal store failure
    """
    _logger.info("Uploading archive", extra={"entries": len(archive.entries)})
    outcome = await retry.execute(
        lambda: store.store_archive(archive),
        operation="archive upload",
    )
    _logger.info(
        "Archive uploaded",
        extra={"archive_address": outcome.value.value, "attempts": outcome.attempts},
    )
    return outcome


async def create_archive_for_data(
    address: ContentAddress,
    path: Optional[str] = None,
    *,
    store: ContentStore,
    retry: RetryController,
) -> ArchiveCreationReport:
    """
    Create and store a one-entry archive pointing at existing data.

    The address is trusted as given; it is not fetched or verified. The
    entry's metadata records size 0 because the data's size is unknown here.

    Args:
        address: Address of data already on the network
        path: Entry path (defaults to "archived_file")
        store: Content store to write through
        retry: Retry controller for the write

    Returns:
        ArchiveCreationReport

    Raises:
        TypeError: If ``address`` is not a ContentAddress
        ArchivePathError: If ``path`` is invalid (raised before any network call)
        RetriesExhaustedError: If every attempt failed transiently
        StorageError: On a fatal store failure
    """
    if not isinstance(address, ContentAddress):
        raise TypeError(
            f"Archives reference content; expected ContentAddress, got {type(address).__name__}"
        )

    entry_path = DEFAULT_ARCHIVE_PATH if path is None else path
    archive = single_entry_archive(entry_path, address, FileMetadata.now(size=0))

    outcome = await store_archive(archive, store, retry)
    return ArchiveCreationReport(
        archive_address=outcome.value,
        data_address=address,
        entry_path=entry_path,
        attempts=outcome.attempts,
    )
