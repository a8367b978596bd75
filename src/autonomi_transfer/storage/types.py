"""
Storage Types

Type definitions for content moved to and from the network:
- Content and archive addresses (distinct kinds sharing one hex format)
- File metadata recorded in archive entries
- Results of single network round trips
- Network client configuration
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from autonomi_transfer.errors.storage import InvalidAddressError


# ============================================================================
# Addresses
# ============================================================================

ADDRESS_HEX_LENGTH = 64
"""Addresses are 32-byte names, exchanged as 64 hex characters."""


class _HexAddress(BaseModel):
    """Common representation of a network address."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(
        ...,
        pattern=r"^[0-9a-f]{64}$",
        description="Lowercase hex encoding of the 32-byte address",
    )

    @field_validator("value", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            if value.startswith("0x"):
                value = value[2:]
        return value

    @classmethod
    def from_hex(cls, hex_str: str) -> Any:
        """
        Parse an address from its hex form.

        Args:
            hex_str: 64 hex characters, optionally 0x-prefixed

        Returns:
            Address of the calling class

        Raises:
            InvalidAddressError: If the string is not a 32-byte hex value
        """
        try:
            return cls(value=hex_str)
        except ValidationError:
            shown = hex_str if isinstance(hex_str, str) else repr(hex_str)
            length = len(hex_str) if isinstance(hex_str, str) else 0
            raise InvalidAddressError(
                shown,
                reason=f"expected {ADDRESS_HEX_LENGTH} hex characters (32 bytes), got {length}",
            ) from None

    def to_bytes(self) -> bytes:
        """Get the raw 32 address bytes."""
        return bytes.fromhex(self.value)

    def __str__(self) -> str:
        return self.value


class ContentAddress(_HexAddress):
    """
    Address of immutable content stored on the network.

    Produced by a successful store or parsed from user input; never
    derived locally. Never equal to an ArchiveAddress with the same hex.

    Example:
        ```python
        addr = ContentAddress.from_hex("a3f1...")
        print(addr)  # hex string
        ```
    """


class ArchiveAddress(_HexAddress):
    """
    Address of an archive stored on the network.

    Structurally identical to ContentAddress but a separate type, so an
    archive address cannot be passed where raw content is expected.
    """


# ============================================================================
# File Metadata
# ============================================================================

class FileMetadata(BaseModel):
    """Timestamps and size recorded alongside an archive entry."""

    model_config = ConfigDict(frozen=True)

    created: int = Field(
        ...,
        ge=0,
        description="Creation timestamp (Unix seconds)",
    )
    modified: int = Field(
        ...,
        ge=0,
        description="Modification timestamp (Unix seconds)",
    )
    size: int = Field(
        ...,
        ge=0,
        description="Size of the referenced content in bytes (0 if unknown)",
    )

    @classmethod
    def now(cls, size: int = 0) -> FileMetadata:
        """Metadata stamped with the current time."""
        timestamp = int(time.time())
        return cls(created=timestamp, modified=timestamp, size=size)


# ============================================================================
# Network Configuration
# ============================================================================

DEFAULT_PEERS = ("/ip4/127.0.0.1/tcp/12000",)
"""Bootstrap peer of a local test network."""


class NetworkConfig(BaseModel):
    """
    Configuration for the Autonomi network client.

    Example:
        ```python
        config = NetworkConfig(
            peers=("/ip4/10.0.0.5/tcp/12000",),
            timeout=120000,
        )
        ```
    """

    model_config = ConfigDict(frozen=True)

    peers: Tuple[str, ...] = Field(
        default=DEFAULT_PEERS,
        min_length=1,
        description="Multiaddresses of the peers used to join the network",
    )
    timeout: int = Field(
        default=120000,
        ge=1000,
        description="Per-call timeout in milliseconds",
    )

    @field_validator("peers")
    @classmethod
    def _check_peers(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for peer in value:
            if not peer.startswith("/"):
                raise ValueError(f"peer {peer!r} is not a multiaddress")
        return value


# ============================================================================
# Upload/Download Results
# ============================================================================

class PutResult(BaseModel):
    """Result of storing public data on the network."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(
        ...,
        description="Hex address of the stored data, as returned by the network",
    )
    cost: str = Field(
        default="0",
        description="Cost paid in atto-tokens (string for big-integer safety)",
    )
    size: int = Field(
        default=0,
        ge=0,
        description="Size of uploaded content in bytes (0 for archives)",
    )
    uploaded_at: datetime = Field(
        ...,
        description="Upload timestamp",
    )


class DownloadResult(BaseModel):
    """Result of downloading content."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(
        ...,
        description="Downloaded content as bytes",
    )
    size: int = Field(
        ...,
        ge=0,
        description="Size of downloaded content in bytes",
    )
    downloaded_at: datetime = Field(
        ...,
        description="Download timestamp",
    )
