"""
Download Orchestrator

Single-content mode writes one address to one file. Archive mode fetches a
manifest and recreates its relative paths under an output root; every
entry is downloaded independently and a failed entry never stops the rest.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from autonomi_transfer.errors.base import TransferError
from autonomi_transfer.errors.storage import RetriesExhaustedError
from autonomi_transfer.storage.archive import ArchiveEntry
from autonomi_transfer.storage.content_store import ContentStore
from autonomi_transfer.storage.types import ArchiveAddress, ContentAddress
from autonomi_transfer.utils.files import ensure_directory, write_output_file
from autonomi_transfer.utils.logging import get_logger
from autonomi_transfer.utils.retry import RetryController
from autonomi_transfer.utils.security import validate_path

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ContentDownloadReport:
    """Result of a single-content download."""

    address: ContentAddress
    output_path: Path
    size: int
    attempts: int


@dataclass(frozen=True)
class EntryOutcome:
    """What happened to one archive entry."""

    path: str
    address: ContentAddress
    succeeded: bool
    target: Optional[Path] = None
    size: Optional[int] = None
    attempts: Optional[int] = None
    failed_step: Optional[str] = None
    error: Optional[str] = None
    classification: Optional[str] = None


@dataclass(frozen=True)
class ArchiveDownloadSummary:
    """Per-entry outcomes of an archive download, in archive order."""

    address: ArchiveAddress
    output_root: Path
    outcomes: Tuple[EntryOutcome, ...] = ()

    @property
    def succeeded(self) -> List[EntryOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[EntryOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def ok(self) -> bool:
        """True when no entry failed (an empty archive is ok)."""
        return not self.failed


class DownloadOrchestrator:
    """
    Fetches content or whole archives to the local filesystem.

    Example:
        ```python
        orchestrator = DownloadOrchestrator(store, RetryController(), concurrency=4)
        summary = await orchestrator.download_archive(archive_address, Path("out"))
        for outcome in summary.failed:
            print(outcome.path, outcome.error)
        ```
    """

    def __init__(
        self,
        store: ContentStore,
        retry: RetryController,
        *,
        concurrency: int = 1,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            store: Content store to read through
            retry: Retry controller applied to every fetch
            concurrency: Archive entries fetched at the same time

        Raises:
            ValueError: If concurrency is less than 1
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self._store = store
        self._retry = retry
        self._concurrency = concurrency

    async def download_content(
        self,
        address: ContentAddress,
        output_path: Union[str, Path],
    ) -> ContentDownloadReport:
        """
        Download one piece of content to a file.

        Nothing is written if the fetch fails.

        Args:
            address: Content to fetch
            output_path: File to write (parent directories are created)

        Returns:
            ContentDownloadReport

        Raises:
            TypeError: If given an ArchiveAddress
            RetriesExhaustedError: If every attempt failed transiently
            StorageError: On a fatal fetch failure
            OutputWriteError: If the file cannot be written
        """
        if not isinstance(address, ContentAddress):
            raise TypeError(
                f"download_content expects a ContentAddress, got {type(address).__name__}; "
                "use download_archive for archives"
            )

        output_path = Path(output_path)
        outcome = await self._retry.execute(
            lambda: self._store.fetch(address),
            operation="download",
        )
        write_output_file(output_path, outcome.value)
        _logger.info(
            "Saved content",
            extra={"address": address.value, "path": str(output_path), "size": len(outcome.value)},
        )
        return ContentDownloadReport(
            address=address,
            output_path=output_path,
            size=len(outcome.value),
            attempts=outcome.attempts,
        )

    async def download_archive(
        self,
        address: ArchiveAddress,
        output_root: Union[str, Path],
    ) -> ArchiveDownloadSummary:
        """
        Download every entry of an archive beneath ``output_root``.

        Args:
            address: Archive to fetch
            output_root: Directory that entry paths are relative to

        Returns:
            ArchiveDownloadSummary with one outcome per entry

        Raises:
            TypeError: If given a ContentAddress
            RetriesExhaustedError: If the manifest fetch failed transiently throughout
            StorageError: On a fatal manifest fetch failure
            ArchiveFormatError: If the manifest is corrupt
            OutputWriteError: If ``output_root`` cannot be created
        """
        if not isinstance(address, ArchiveAddress):
            raise TypeError(
                f"download_archive expects an ArchiveAddress, got {type(address).__name__}; "
                "use download_content for plain content"
            )

        output_root = Path(output_root)
        fetched = await self._retry.execute(
            lambda: self._store.fetch_archive(address),
            operation="archive download",
        )
        archive = fetched.value

        if archive.is_empty:
            _logger.info("Archive is empty, nothing to download", extra={"address": address.value})
            return ArchiveDownloadSummary(address=address, output_root=output_root)

        ensure_directory(output_root)
        _logger.info(
            "Downloading archive",
            extra={
                "address": address.value,
                "entries": len(archive.entries),
                "output_root": str(output_root),
                "concurrency": self._concurrency,
            },
        )

        semaphore = asyncio.Semaphore(self._concurrency)

        async def bounded(entry: ArchiveEntry) -> EntryOutcome:
            async with semaphore:
                return await self._download_entry(entry, output_root)

        outcomes = await asyncio.gather(*(bounded(entry) for entry in archive.entries))
        summary = ArchiveDownloadSummary(
            address=address,
            output_root=output_root,
            outcomes=tuple(outcomes),
        )
        _logger.info(
            "Archive download complete",
            extra={"succeeded": len(summary.succeeded), "failed": len(summary.failed)},
        )
        return summary

    async def _download_entry(self, entry: ArchiveEntry, output_root: Path) -> EntryOutcome:
        try:
            target = validate_path(entry.path, output_root)
        except ValueError as e:
            return self._entry_failed(entry, "resolve", str(e), "fatal")

        try:
            ensure_directory(target.parent)
        except TransferError as e:
            return self._entry_failed(entry, "write", str(e), e.classification, target=target)

        try:
            outcome = await self._retry.execute(
                lambda: self._store.fetch(entry.address),
                operation=f"download {entry.path}",
            )
        except TransferError as e:
            attempts = e.attempts if isinstance(e, RetriesExhaustedError) else None
            return self._entry_failed(
                entry, "fetch", str(e), e.classification, target=target, attempts=attempts
            )
        except Exception as e:
            _logger.exception("Unexpected error fetching archive entry", extra={"path": entry.path})
            return self._entry_failed(entry, "fetch", f"{type(e).__name__}: {e}", "fatal", target=target)

        try:
            write_output_file(target, outcome.value)
        except TransferError as e:
            return self._entry_failed(
                entry, "write", str(e), e.classification, target=target, attempts=outcome.attempts
            )

        _logger.info(
            "Saved archive entry",
            extra={"path": entry.path, "target": str(target), "size": len(outcome.value)},
        )
        return EntryOutcome(
            path=entry.path,
            address=entry.address,
            succeeded=True,
            target=target,
            size=len(outcome.value),
            attempts=outcome.attempts,
        )

    def _entry_failed(
        self,
        entry: ArchiveEntry,
        step: str,
        error: str,
        classification: str,
        *,
        target: Optional[Path] = None,
        attempts: Optional[int] = None,
    ) -> EntryOutcome:
        _logger.warning(
            "Archive entry failed",
            extra={"path": entry.path, "step": step, "error": error},
        )
        return EntryOutcome(
            path=entry.path,
            address=entry.address,
            succeeded=False,
            target=target,
            attempts=attempts,
            failed_step=step,
            error=error,
            classification=classification,
        )
