"""
Structured logging for autonomi-transfer.

Modules obtain a logger with ``get_logger(__name__)`` and pass context
through ``extra={...}``. The library only installs a NullHandler; the CLI
calls ``configure_logging`` to send records to stderr, rendering extra
fields as ``key=value`` pairs.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional, Union

ROOT_LOGGER_NAME = "autonomi_transfer"

# Attributes present on every LogRecord; anything else came from `extra`.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


class StructuredFormatter(logging.Formatter):
    """
    Formatter that appends ``extra`` context to the message.

    Example output:
        ``2026-01-01 12:00:00 WARNING autonomi_transfer.utils.retry: Attempt failed, retrying attempt=3 operation=upload``
    """

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None) -> None:
        super().__init__(
            fmt or "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt or "%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return base
        rendered = " ".join(f"{key}={context[key]}" for key in sorted(context))
        return f"{base} {rendered}"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Send package logs to a stream (stderr by default).

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Logging level name or number
        stream: Destination stream

    Returns:
        The package root logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_autonomi_transfer", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    handler._autonomi_transfer = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    return logger
