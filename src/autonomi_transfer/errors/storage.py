"""
Storage-related exceptions for network transfers.

Every storage failure is classified as either transient (worth retrying:
timeouts, unreachable peers, temporary unavailability) or fatal (retrying cannot
help: payment rejected, content missing, malformed input, corrupt archive).
Transient errors derive from TransientStorageError; everything else that
derives from StorageError is fatal.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from autonomi_transfer.errors.base import TransferError


class StorageError(TransferError):
    """
    Base exception for storage operations.

    Example:
        >>> raise StorageError("Network returned an unexpected response")
    """

    transient = False

    def __init__(
        self,
        message: str,
        *,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if address:
            details["address"] = address

        super().__init__(
            message,
            code="STORAGE_ERROR",
            details=details,
        )
        self.address = address

    @property
    def classification(self) -> str:
        """Either "transient" or "fatal"."""
        return "transient" if self.transient else "fatal"


# ============================================================================
# Transient Errors
# ============================================================================


class TransientStorageError(StorageError):
    """
    Storage failure that may succeed on retry.

    Examples: network timeouts, unreachable peers, temporary service unavailability.
    """

    transient = True

    def __init__(
        self,
        message: str,
        *,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, address=address, details=details)
        self.code = "TRANSIENT_STORAGE_ERROR"


class NetworkTimeoutError(TransientStorageError):
    """
    Raised when a network round trip times out.

    Example:
        >>> raise NetworkTimeoutError("put", timeout_ms=120000)
    """

    def __init__(
        self,
        operation: str,
        *,
        timeout_ms: Optional[int] = None,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["operation"] = operation
        if timeout_ms is not None:
            details["timeout_ms"] = timeout_ms

        message = f"{operation} timed out"
        if timeout_ms is not None:
            message += f" after {timeout_ms}ms"

        super().__init__(message, address=address, details=details)
        self.code = "NETWORK_TIMEOUT"
        self.operation = operation
        self.timeout_ms = timeout_ms


class ServiceUnavailableError(TransientStorageError):
    """
    Raised when the network is temporarily unreachable or overloaded.

    Example:
        >>> raise ServiceUnavailableError("put failed: no peers reachable")
    """

    def __init__(
        self,
        message: str = "Storage service temporarily unavailable",
        *,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, address=address, details=details)
        self.code = "SERVICE_UNAVAILABLE"


# ============================================================================
# Fatal Errors
# ============================================================================


class InsufficientFundsError(StorageError):
    """
    Raised when the network rejects payment for a write.

    Example:
        >>> raise InsufficientFundsError("Wallet balance too low for 4 chunks")
    """

    def __init__(
        self,
        message: str = "Payment rejected: insufficient funds",
        *,
        wallet_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if wallet_address:
            details["wallet_address"] = wallet_address

        super().__init__(message, details=details)
        self.code = "INSUFFICIENT_FUNDS"
        self.wallet_address = wallet_address


class InvalidContentError(StorageError):
    """
    Raised when the network refuses a request as malformed.

    Example:
        >>> raise InvalidContentError("put rejected: content too large")
    """

    def __init__(
        self,
        message: str,
        *,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, address=address, details=details)
        self.code = "INVALID_CONTENT"


class ContentNotFoundError(StorageError):
    """
    Raised when content cannot be found on the network.

    Example:
        >>> raise ContentNotFoundError("a3f1...")
    """

    def __init__(
        self,
        address: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            f"Content not found: {address}",
            address=address,
            details=details,
        )
        self.code = "CONTENT_NOT_FOUND"


class ContentDecodeError(StorageError):
    """
    Raised when a network response cannot be decoded.

    Example:
        >>> raise ContentDecodeError("Malformed download result: not bytes")
    """

    def __init__(
        self,
        message: str,
        *,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, address=address, details=details)
        self.code = "CONTENT_DECODE_ERROR"


class InvalidAddressError(StorageError):
    """
    Raised when a string is not a well-formed network address.

    Example:
        >>> raise InvalidAddressError("xyz", reason="must be 64 hex characters")
    """

    def __init__(
        self,
        value: str,
        *,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["value"] = value
        if reason:
            details["reason"] = reason

        message = f"Invalid address: {value!r}"
        if reason:
            message += f" ({reason})"

        super().__init__(message, details=details)
        self.code = "INVALID_ADDRESS"
        self.value = value
        self.reason = reason


class WalletError(StorageError):
    """
    Raised when a wallet is missing or cannot be built from its key.

    Example:
        >>> raise WalletError("Uploads require a wallet")
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.code = "WALLET_ERROR"


# ============================================================================
# Archive Errors
# ============================================================================


class ArchiveFormatError(StorageError):
    """
    Raised when a stored archive is malformed or the address holds no archive.

    Example:
        >>> raise ArchiveFormatError("entries: field required")
    """

    def __init__(
        self,
        reason: str,
        *,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["reason"] = reason

        super().__init__(
            f"Corrupt archive: {reason}",
            address=address,
            details=details,
        )
        self.code = "ARCHIVE_CORRUPT"
        self.reason = reason


class ArchivePathError(StorageError):
    """
    Raised when an archive entry path is not a safe relative path.

    Example:
        >>> raise ArchivePathError("../etc/passwd", reason="'..' segments are not allowed")
    """

    def __init__(
        self,
        path: str,
        *,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["path"] = path
        details["reason"] = reason

        super().__init__(f"Invalid archive path {path!r}: {reason}", details=details)
        self.code = "INVALID_ARCHIVE_PATH"
        self.path = path
        self.reason = reason


# ============================================================================
# Retry Errors
# ============================================================================


class RetriesExhaustedError(StorageError):
    """
    Raised when a transient failure persisted through every allowed attempt.

    Example:
        >>> raise RetriesExhaustedError("upload", 50, NetworkTimeoutError("put"))
    """

    def __init__(
        self,
        operation: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["operation"] = operation
        details["attempts"] = attempts
        if last_error is not None:
            details["last_error"] = str(last_error)

        message = f"{operation} failed after {attempts} attempts"
        if last_error is not None:
            message += f": {last_error}"

        super().__init__(message, details=details)
        self.code = "RETRIES_EXHAUSTED"
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error

    @property
    def classification(self) -> str:
        return "retries exhausted"
