"""
Retry Utilities for autonomi-transfer.

Provides a bounded retry controller with fixed or exponential backoff for
transient network failures. Paid uploads can take many attempts on a busy
network, so the default ceiling is high and the controller is meant to be
left running unattended.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import (
    Awaitable,
    Callable,
    Generic,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from autonomi_transfer.errors.storage import (
    RetriesExhaustedError,
    TransientStorageError,
)
from autonomi_transfer.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 50
DEFAULT_DELAY_MS = 5000


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    The defaults reproduce a fixed five second pause between at most 50
    attempts. Set ``exponential_base`` above 1.0 for exponential backoff.

    Example:
        ```python
        config = RetryConfig(
            max_attempts=10,
            base_delay_ms=1000,
            exponential_base=2.0,
            jitter=True,
        )
        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    """Maximum number of attempts, including the first one."""

    base_delay_ms: int = DEFAULT_DELAY_MS
    """Base delay in milliseconds between attempts."""

    max_delay_ms: int = 60000
    """Maximum delay in milliseconds (cap for exponential growth)."""

    jitter: bool = False
    """Whether to add random jitter to delays."""

    exponential_base: float = 1.0
    """Base for exponential backoff calculation (1.0 = fixed delay)."""

    retryable_errors: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (TransientStorageError,)
    )
    """Tuple of exception types that should trigger a retry."""


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay with exponential backoff and optional jitter.

    Args:
        attempt: Zero-based attempt number (0 = first retry)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    # Exponential backoff: base_delay * (exponential_base ^ attempt)
    delay_ms = config.base_delay_ms * (config.exponential_base ** attempt)

    # Cap at max delay
    delay_ms = min(delay_ms, config.max_delay_ms)

    if config.jitter:
        # Full jitter: random value between 0 and calculated delay
        delay_ms = random.uniform(0, delay_ms)

    return delay_ms / 1000


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Value produced by a successful attempt and how many attempts it took."""

    value: T
    attempts: int


AttemptHook = Callable[[int, int], None]
"""Called with (attempt, max_attempts) before every attempt."""


class RetryController:
    """
    Runs a single fallible async operation under a bounded retry policy.

    Errors listed in ``config.retryable_errors`` are retried until the attempt
    ceiling is reached, after which RetriesExhaustedError is raised carrying
    the last underlying failure. Any other error propagates immediately.

    Example:
        ```python
        controller = RetryController(RetryConfig(max_attempts=50))
        outcome = await controller.execute(
            lambda: store.store(data),
            operation="upload",
        )
        print(outcome.value, outcome.attempts)
        ```
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_attempt: Optional[AttemptHook] = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            config: Retry configuration (uses defaults if None)
            sleep: Awaitable used to wait between attempts
            on_attempt: Optional hook observing every attempt

        Raises:
            ValueError: If max_attempts is less than 1
        """
        self._config = config or RetryConfig()
        if self._config.max_attempts < 1:
            raise ValueError(
                f"max_attempts must be at least 1, got {self._config.max_attempts}"
            )
        self._sleep = sleep
        self._on_attempt = on_attempt

    @property
    def config(self) -> RetryConfig:
        """Get the retry configuration."""
        return self._config

    @property
    def max_attempts(self) -> int:
        """Get the attempt ceiling."""
        return self._config.max_attempts

    async def execute(
        self,
        fn: Callable[[], Awaitable[T]],
        *,
        operation: str = "operation",
    ) -> RetryOutcome[T]:
        """
        Execute ``fn`` until it succeeds, fails fatally, or attempts run out.

        Args:
            fn: Async function performing exactly one attempt (no arguments)
            operation: Name used in logs and in RetriesExhaustedError

        Returns:
            RetryOutcome with the value and the number of attempts made

        Raises:
            RetriesExhaustedError: If every attempt failed with a retryable error
            Exception: Any non-retryable error raised by ``fn``, unchanged
        """
        max_attempts = self._config.max_attempts
        last_error: Optional[Exception] = None

        for attempt in range(1, max_attempts + 1):
            if self._on_attempt is not None:
                self._on_attempt(attempt, max_attempts)
            _logger.debug(
                "Starting attempt",
                extra={"operation": operation, "attempt": attempt, "max_attempts": max_attempts},
            )

            try:
                value = await fn()
            except self._config.retryable_errors as e:
                last_error = e

                # Don't delay after last attempt
                if attempt < max_attempts:
                    delay = calculate_delay(attempt - 1, self._config)
                    _logger.warning(
                        "Attempt failed, retrying",
                        extra={
                            "operation": operation,
                            "attempt": attempt,
                            "max_attempts": max_attempts,
                            "error": str(e),
                            "retry_in_s": round(delay, 3),
                        },
                    )
                    await self._sleep(delay)
                continue

            if attempt > 1:
                _logger.info(
                    "Attempt succeeded after retries",
                    extra={"operation": operation, "attempt": attempt},
                )
            return RetryOutcome(value=value, attempts=attempt)

        _logger.error(
            "Retries exhausted",
            extra={"operation": operation, "attempts": max_attempts, "error": str(last_error)},
        )
        raise RetriesExhaustedError(operation, max_attempts, last_error)
