"""
Exception hierarchy for autonomi-transfer.

TransferError
├── ConfigurationError
├── LocalFileError
│   └── LocalFileNotFoundError
├── OutputWriteError
└── StorageError                (fatal unless transient)
    ├── TransientStorageError
    │   ├── NetworkTimeoutError
    │   └── ServiceUnavailableError
    ├── InsufficientFundsError
    ├── InvalidContentError
    ├── ContentNotFoundError
    ├── ContentDecodeError
    ├── InvalidAddressError
    ├── WalletError
    ├── ArchiveFormatError
    ├── ArchivePathError
    └── RetriesExhaustedError
"""

from autonomi_transfer.errors.base import ConfigurationError, TransferError
from autonomi_transfer.errors.filesystem import (
    LocalFileError,
    LocalFileNotFoundError,
    OutputWriteError,
)
from autonomi_transfer.errors.storage import (
    ArchiveFormatError,
    ArchivePathError,
    ContentDecodeError,
    ContentNotFoundError,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidContentError,
    NetworkTimeoutError,
    RetriesExhaustedError,
    ServiceUnavailableError,
    StorageError,
    TransientStorageError,
    WalletError,
)

__all__ = [
    # Base
    "TransferError",
    "ConfigurationError",
    # Filesystem
    "LocalFileError",
    "LocalFileNotFoundError",
    "OutputWriteError",
    # Storage
    "StorageError",
    "TransientStorageError",
    "NetworkTimeoutError",
    "ServiceUnavailableError",
    "InsufficientFundsError",
    "InvalidContentError",
    "ContentNotFoundError",
    "ContentDecodeError",
    "InvalidAddressError",
    "WalletError",
    # Archive
    "ArchiveFormatError",
    "ArchivePathError",
    # Retry
    "RetriesExhaustedError",
]
