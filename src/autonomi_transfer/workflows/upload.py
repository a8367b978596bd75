"""
Upload Orchestrator

Drives one paid upload through its states:

    START -> UPLOADING -> UPLOADED -> (VERIFYING)? -> (ARCHIVING)? -> DONE
                 |                                        |
                 +--------------> FAILED <----------------+

What to do after the upload (verify, archive) is decided up front in an
UploadIntent and never asked again once money is being spent. A failure in
a later step never retracts the Data Address obtained by the upload. A file
name that cannot be an archive entry path fails the run from START, before
the upload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from autonomi_transfer.errors.base import TransferError
from autonomi_transfer.errors.storage import ArchivePathError, RetriesExhaustedError
from autonomi_transfer.storage.archive import validate_archive_path
from autonomi_transfer.storage.archive_builder import single_entry_archive
from autonomi_transfer.storage.content_store import ContentStore
from autonomi_transfer.storage.types import ArchiveAddress, ContentAddress, FileMetadata
from autonomi_transfer.utils.files import read_local_file, write_output_file
from autonomi_transfer.utils.logging import get_logger
from autonomi_transfer.utils.retry import RetryController
from autonomi_transfer.workflows.archive import store_archive

_logger = get_logger(__name__)

MISMATCH_SUFFIX = ".mismatched"


class UploadState(str, Enum):
    """States of the upload state machine."""

    START = "start"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    VERIFYING = "verifying"
    ARCHIVING = "archiving"
    DONE = "done"
    FAILED = "failed"


class UploadIntent(BaseModel):
    """
    What to do once the upload succeeds, captured before it starts.

    Example:
        ```python
        intent = UploadIntent(verify=True, archive=False)
        report = await orchestrator.run(Path("photo.jpg"), intent)
        ```
    """

    model_config = ConfigDict(frozen=True)

    verify: bool = Field(
        default=False,
        description="Download the data again and compare it byte for byte",
    )
    archive: bool = Field(
        default=False,
        description="Store a one-entry archive naming the upload by its file name",
    )


class VerificationStatus(str, Enum):
    MATCHED = "matched"
    MISMATCHED = "mismatched"
    FETCH_FAILED = "fetch_failed"


@dataclass
class VerificationResult:
    """Outcome of reading an upload back. Never fatal to the upload."""

    status: VerificationStatus
    attempts: Optional[int] = None
    fetched_size: Optional[int] = None
    saved_to: Optional[Path] = None
    save_error: Optional[str] = None
    error: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.status == VerificationStatus.MATCHED


@dataclass
class UploadReport:
    """Everything the operator needs to know about one upload run."""

    file_path: Path
    intent: UploadIntent
    state: UploadState = UploadState.START
    transitions: List[UploadState] = field(default_factory=lambda: [UploadState.START])
    size: Optional[int] = None
    data_address: Optional[ContentAddress] = None
    upload_attempts: int = 0
    verification: Optional[VerificationResult] = None
    archive_address: Optional[ArchiveAddress] = None
    archive_entry_path: Optional[str] = None
    archive_attempts: int = 0
    failed_step: Optional[str] = None
    failure: Optional[str] = None
    failure_classification: Optional[str] = None
    cost: int = 0

    @property
    def uploaded(self) -> bool:
        """Whether a Data Address was obtained."""
        return self.data_address is not None

    @property
    def succeeded(self) -> bool:
        """Whether every requested step completed."""
        return self.state == UploadState.DONE

    def enter(self, state: UploadState) -> None:
        self.state = state
        self.transitions.append(state)


def archive_entry_path(file_path: Union[str, Path]) -> str:
    """
    Entry path for the archive created after an upload.

    Only the base file name is kept; directories in the local path are
    dropped.
    """
    return Path(file_path).name


class UploadOrchestrator:
    """
    Sequences upload, optional verification and optional archiving.

    Example:
        ```python
        orchestrator = UploadOrchestrator(store, RetryController())
        report = await orchestrator.run(
            Path("data/photo.jpg"),
            UploadIntent(verify=True, archive=True),
            output_dir=Path("verified"),
        )
        print(report.data_address, report.archive_address)
        ```
    """

    def __init__(self, store: ContentStore, retry: RetryController) -> None:
        self._store = store
        self._retry = retry

    async def run(
        self,
        file_path: Union[str, Path],
        intent: UploadIntent,
        output_dir: Optional[Union[str, Path]] = None,
    ) -> UploadReport:
        """
        Run the upload workflow.

        Args:
            file_path: Local file to upload
            intent: Post-upload choices, fixed for the whole run
            output_dir: Where to save the verified copy

        Returns:
            UploadReport; ``state`` is DONE or FAILED
        """
        file_path = Path(file_path)
        output_dir = Path(output_dir) if output_dir is not None else None
        report = UploadReport(file_path=file_path, intent=intent)
        cost_before = self._store.total_cost

        if intent.archive:
            # The entry path is checked before anything is paid for
            try:
                report.archive_entry_path = validate_archive_path(archive_entry_path(file_path))
            except ArchivePathError as e:
                self._fail(report, "archive", e)
                return report

        report.enter(UploadState.UPLOADING)
        try:
            data = read_local_file(file_path)
            report.size = len(data)
            _logger.info(
                "Uploading file",
                extra={"path": str(file_path), "size": len(data)},
            )
            outcome = await self._retry.execute(
                lambda: self._store.store(data),
                operation="upload",
            )
        except TransferError as e:
            self._fail(report, "upload", e)
            report.cost = self._store.total_cost - cost_before
            return report

        report.data_address = outcome.value
        report.upload_attempts = outcome.attempts
        report.enter(UploadState.UPLOADED)
        _logger.info(
            "Upload successful",
            extra={"address": outcome.value.value, "attempts": outcome.attempts},
        )

        if intent.verify:
            report.enter(UploadState.VERIFYING)
            report.verification = await self._verify(
                file_path, data, report.data_address, output_dir
            )

        if intent.archive:
            report.enter(UploadState.ARCHIVING)
            try:
                archive = single_entry_archive(
                    report.archive_entry_path,
                    report.data_address,
                    FileMetadata.now(size=len(data)),
                )
                archived = await store_archive(archive, self._store, self._retry)
            except TransferError as e:
                self._fail(report, "archive", e)
                report.cost = self._store.total_cost - cost_before
                return report
            report.archive_address = archived.value
            report.archive_attempts = archived.attempts

        report.enter(UploadState.DONE)
        report.cost = self._store.total_cost - cost_before
        return report

    async def _verify(
        self,
        file_path: Path,
        original: bytes,
        address: ContentAddress,
        output_dir: Optional[Path],
    ) -> VerificationResult:
        try:
            outcome = await self._retry.execute(
                lambda: self._store.fetch(address),
                operation="verify download",
            )
        except TransferError as e:
            _logger.warning(
                "Verification download failed",
                extra={"address": address.value, "error": str(e)},
            )
            return VerificationResult(
                status=VerificationStatus.FETCH_FAILED,
                attempts=e.attempts if isinstance(e, RetriesExhaustedError) else None,
                error=str(e),
            )
        except Exception as e:
            _logger.exception(
                "Unexpected error during verification download",
                extra={"address": address.value},
            )
            return VerificationResult(
                status=VerificationStatus.FETCH_FAILED,
                error=f"{type(e).__name__}: {e}",
            )

        fetched = outcome.value
        if fetched == original:
            result = VerificationResult(
                status=VerificationStatus.MATCHED,
                attempts=outcome.attempts,
                fetched_size=len(fetched),
            )
            _logger.info("Verification successful", extra={"address": address.value})
            if output_dir is not None:
                self._save(result, output_dir / file_path.name, fetched)
            return result

        result = VerificationResult(
            status=VerificationStatus.MISMATCHED,
            attempts=outcome.attempts,
            fetched_size=len(fetched),
        )
        _logger.warning(
            "Verification failed: data mismatch",
            extra={
                "address": address.value,
                "original_size": len(original),
                "fetched_size": len(fetched),
            },
        )
        # Keep what came back for inspection
        target_dir = output_dir if output_dir is not None else Path.cwd()
        self._save(result, target_dir / f"{file_path.name}{MISMATCH_SUFFIX}", fetched)
        return result

    def _save(self, result: VerificationResult, target: Path, data: bytes) -> None:
        try:
            result.saved_to = write_output_file(target, data)
        except TransferError as e:
            result.save_error = str(e)
            _logger.warning(
                "Failed to save downloaded copy",
                extra={"path": str(target), "error": str(e)},
            )

    def _fail(self, report: UploadReport, step: str, error: TransferError) -> None:
        report.failed_step = step
        report.failure = str(error)
        report.failure_classification = error.classification
        if isinstance(error, RetriesExhaustedError):
            if step == "upload":
                report.upload_attempts = error.attempts
            else:
                report.archive_attempts = error.attempts
        report.enter(UploadState.FAILED)
        _logger.error(
            "Upload workflow failed",
            extra={"step": step, "classification": error.classification, "error": str(error)},
        )
