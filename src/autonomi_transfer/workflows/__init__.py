"""
Workflows - upload, archive and download orchestration.
"""

from autonomi_transfer.workflows.archive import (
    ArchiveCreationReport,
    create_archive_for_data,
    store_archive,
)
from autonomi_transfer.workflows.download import (
    ArchiveDownloadSummary,
    ContentDownloadReport,
    DownloadOrchestrator,
    EntryOutcome,
)
from autonomi_transfer.workflows.upload import (
    UploadIntent,
    UploadOrchestrator,
    UploadReport,
    UploadState,
    VerificationResult,
    VerificationStatus,
    archive_entry_path,
)

__all__ = [
    # Upload
    "UploadIntent",
    "UploadOrchestrator",
    "UploadReport",
    "UploadState",
    "VerificationResult",
    "VerificationStatus",
    "archive_entry_path",
    # Archive
    "ArchiveCreationReport",
    "create_archive_for_data",
    "store_archive",
    # Download
    "DownloadOrchestrator",
    "ContentDownloadReport",
    "ArchiveDownloadSummary",
    "EntryOutcome",
]
