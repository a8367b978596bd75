"""
autonomi-transfer utilities.

This module provides retry, logging and path-safety helpers.
"""

from autonomi_transfer.utils.logging import (
    StructuredFormatter,
    configure_logging,
    get_logger,
)
from autonomi_transfer.utils.retry import (
    RetryConfig,
    RetryController,
    RetryOutcome,
    calculate_delay,
)
from autonomi_transfer.utils.security import validate_path

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "StructuredFormatter",
    # Retry
    "RetryConfig",
    "RetryController",
    "RetryOutcome",
    "calculate_delay",
    # Security
    "validate_path",
]
