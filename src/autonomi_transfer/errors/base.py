"""
Base exception class for autonomi-transfer.

All transfer-specific exceptions inherit from TransferError, which provides
structured error information including an error code and additional
context details.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class TransferError(Exception):
    """
    Base exception for all transfer errors.

    Provides structured error information that can be serialized and logged.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "CONTENT_NOT_FOUND").
        details: Optional dictionary with additional error context.

    Example:
        >>> raise TransferError(
        ...     "Upload failed",
        ...     code="UPLOAD_FAILED",
        ...     details={"size_bytes": 1024}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "TRANSFER_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize TransferError.

        Args:
            message: Human-readable error description.
            code: Machine-readable error code.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    @property
    def classification(self) -> str:
        """How callers should treat the failure; only storage errors can be transient."""
        return "fatal"

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(TransferError):
    """
    Raised when configuration is missing or invalid.

    Example:
        >>> raise ConfigurationError("AUTONOMI_PRIVATE_KEY is not set", field="private_key")
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field

        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
        self.field = field
