"""
Tests for storage types: addresses, metadata and network configuration.
"""

import pytest
from pydantic import ValidationError

from autonomi_transfer.errors.storage import InvalidAddressError
from autonomi_transfer.storage.types import (
    ADDRESS_HEX_LENGTH,
    DEFAULT_PEERS,
    ArchiveAddress,
    ContentAddress,
    FileMetadata,
    NetworkConfig,
)

VALID_HEX = "a3" * 32


# =============================================================================
# Address Tests
# =============================================================================


class TestContentAddress:
    """Tests for address parsing and identity."""

    def test_from_hex(self) -> None:
        address = ContentAddress.from_hex(VALID_HEX)

        assert address.value == VALID_HEX
        assert str(address) == VALID_HEX
        assert len(address.value) == ADDRESS_HEX_LENGTH

    def test_normalizes_case_prefix_and_whitespace(self) -> None:
        """Upper case, a 0x prefix and surrounding whitespace are accepted."""
        address = ContentAddress.from_hex(f"  0x{VALID_HEX.upper()}\n")

        assert address.value == VALID_HEX

    def test_to_bytes(self) -> None:
        address = ContentAddress.from_hex(VALID_HEX)

        assert address.to_bytes() == bytes.fromhex(VALID_HEX)
        assert len(address.to_bytes()) == 32

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "abc",
            "a" * 63,
            "a" * 65,
            "g" * 64,
            "0x" + "a" * 62,
        ],
    )
    def test_invalid_hex_rejected(self, value: str) -> None:
        with pytest.raises(InvalidAddressError) as exc_info:
            ContentAddress.from_hex(value)

        error = exc_info.value
        assert error.code == "INVALID_ADDRESS"
        assert error.classification == "fatal"
        assert "64 hex characters" in error.reason

    def test_immutable(self) -> None:
        address = ContentAddress.from_hex(VALID_HEX)

        with pytest.raises(ValidationError):
            address.value = "b" * 64

    def test_equal_by_value(self) -> None:
        assert ContentAddress.from_hex(VALID_HEX) == ContentAddress.from_hex(VALID_HEX.upper())
        assert hash(ContentAddress.from_hex(VALID_HEX)) == hash(ContentAddress.from_hex(VALID_HEX))


class TestArchiveAddress:
    """Archive addresses are a distinct kind."""

    def test_never_equal_to_content_address(self) -> None:
        """The same hex names different kinds of thing."""
        content = ContentAddress.from_hex(VALID_HEX)
        archive = ArchiveAddress.from_hex(VALID_HEX)

        assert content != archive
        assert archive != content


# =============================================================================
# Metadata Tests
# =============================================================================


class TestFileMetadata:
    def test_now(self) -> None:
        metadata = FileMetadata.now(size=42)

        assert metadata.size == 42
        assert metadata.created == metadata.modified
        assert metadata.created > 0

    def test_default_size_zero(self) -> None:
        assert FileMetadata.now().size == 0

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FileMetadata(created=0, modified=0, size=-1)


# =============================================================================
# NetworkConfig Tests
# =============================================================================


class TestNetworkConfig:
    def test_defaults(self) -> None:
        config = NetworkConfig()

        assert config.peers == DEFAULT_PEERS
        assert config.timeout == 120000

    def test_multiple_peers(self) -> None:
        config = NetworkConfig(peers=("/ip4/10.0.0.1/tcp/1", "/ip4/10.0.0.2/tcp/2"))

        assert len(config.peers) == 2

    def test_non_multiaddr_peer_rejected(self) -> None:
        with pytest.raises(ValidationError, match="not a multiaddress"):
            NetworkConfig(peers=("node:8080",))

    def test_no_peers_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NetworkConfig(peers=())

    def test_short_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NetworkConfig(timeout=10)
