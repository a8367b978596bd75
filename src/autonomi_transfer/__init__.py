"""
autonomi-transfer - move files to and from the Autonomi network.

Quick Start:
    >>> import asyncio
    >>> from autonomi_transfer import (
    ...     AutonomiNetworkClient, ContentStore, RetryController, UploadIntent,
    ...     UploadOrchestrator, load_config,
    ... )
    >>>
    >>> async def main():
    ...     config = load_config()
    ...     store = ContentStore(
    ...         AutonomiNetworkClient.connect(config.network_config(), wallet=config.wallet())
    ...     )
    ...     orchestrator = UploadOrchestrator(store, RetryController(config.retry_config()))
    ...     report = await orchestrator.run("photo.jpg", UploadIntent(verify=True))
    ...     print(report.data_address)
    ...
    >>> asyncio.run(main())

Modules:
- `storage`: addresses, archives, the content store and the network client
- `workflows`: upload, archive and download orchestration
- `errors`: exception hierarchy with transient/fatal classification
- `utils`: retry controller, logging, path safety and file helpers
- `cli`: the ``autonomi-transfer`` command
"""

from autonomi_transfer.version import __version__, __version_info__

# Configuration
from autonomi_transfer.config import TransferConfig, load_config

# Errors
from autonomi_transfer.errors import (
    ArchiveFormatError,
    ArchivePathError,
    ConfigurationError,
    RetriesExhaustedError,
    StorageError,
    TransferError,
    TransientStorageError,
)

# Storage
from autonomi_transfer.storage import (
    Archive,
    ArchiveAddress,
    ArchiveBuilder,
    ArchiveEntry,
    ContentAddress,
    ContentStore,
    FileMetadata,
    AutonomiNetworkClient,
    NetworkConfig,
    Wallet,
)

# Utilities
from autonomi_transfer.utils import RetryConfig, RetryController

# Workflows
from autonomi_transfer.workflows import (
    ArchiveDownloadSummary,
    DownloadOrchestrator,
    UploadIntent,
    UploadOrchestrator,
    UploadReport,
    UploadState,
    create_archive_for_data,
)

__all__ = [
    "__version__",
    "__version_info__",
    # Configuration
    "TransferConfig",
    "load_config",
    # Errors
    "TransferError",
    "ConfigurationError",
    "StorageError",
    "TransientStorageError",
    "RetriesExhaustedError",
    "ArchiveFormatError",
    "ArchivePathError",
    # Storage
    "ContentAddress",
    "ArchiveAddress",
    "FileMetadata",
    "Archive",
    "ArchiveEntry",
    "ArchiveBuilder",
    "ContentStore",
    "AutonomiNetworkClient",
    "NetworkConfig",
    "Wallet",
    # Utilities
    "RetryConfig",
    "RetryController",
    # Workflows
    "UploadIntent",
    "UploadOrchestrator",
    "UploadReport",
    "UploadState",
    "create_archive_for_data",
    "DownloadOrchestrator",
    "ArchiveDownloadSummary",
]
