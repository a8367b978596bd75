"""
Content Store - the primitives every workflow is built on.

``store(bytes) -> ContentAddress`` and ``fetch(address) -> bytes``, plus
their archive counterparts, each a single attempt against the network
client. Callers wrap them in a RetryController; nothing is cached.
"""

from __future__ import annotations

from typing import Protocol

from autonomi_transfer.storage.archive import Archive
from autonomi_transfer.storage.types import (
    ArchiveAddress,
    ContentAddress,
    DownloadResult,
    PutResult,
)
from autonomi_transfer.utils.logging import get_logger

_logger = get_logger(__name__)


class NetworkClient(Protocol):
    """What the content store needs from a network client."""

    async def put_public(self, content: bytes) -> PutResult:
        ...

    async def get_public(self, address: str) -> DownloadResult:
        ...

    async def put_archive(self, archive: Archive) -> PutResult:
        ...

    async def get_archive(self, address: str) -> Archive:
        ...


class ContentStore:
    """
    Single-attempt store/fetch adapter over a network client.

    Also keeps a tally of what this session paid for writes.

    Example:
        ```python
        store = ContentStore(AutonomiNetworkClient.connect(config, wallet=wallet))
        address = await store.store(b"hello")
        assert await store.fetch(address) == b"hello"
        ```
    """

    def __init__(self, client: NetworkClient) -> None:
        self._client = client
        self._total_cost = 0
        self._store_count = 0

    @property
    def total_cost(self) -> int:
        """Atto-tokens paid for writes through this store."""
        return self._total_cost

    @property
    def store_count(self) -> int:
        """Number of successful writes through this store."""
        return self._store_count

    def _record(self, result: PutResult) -> None:
        try:
            cost = int(result.cost)
        except ValueError:
            _logger.warning("Unparseable cost in put result", extra={"cost": result.cost})
            cost = 0
        self._total_cost += cost
        self._store_count += 1

    async def store(self, data: bytes) -> ContentAddress:
        """
        Store bytes on the network.

        Args:
            data: Content to store

        Returns:
            ContentAddress naming the stored bytes

        Raises:
            StorageError: Classified failure of the attempt
        """
        result = await self._client.put_public(data)
        address = ContentAddress.from_hex(result.address)
        self._record(result)

        _logger.info(
            "Stored content",
            extra={"address": address.value, "size": result.size, "cost": result.cost},
        )
        return address

    async def fetch(self, address: ContentAddress) -> bytes:
        """
        Fetch bytes from the network.

        Args:
            address: Content to fetch

        Returns:
            The stored bytes

        Raises:
            TypeError: If ``address`` is not a ContentAddress
            StorageError: Classified failure of the attempt
        """
        if not isinstance(address, ContentAddress):
            raise TypeError(f"fetch expects a ContentAddress, got {type(address).__name__}")

        result = await self._client.get_public(address.value)
        _logger.debug(
            "Fetched content",
            extra={"address": address.value, "size": result.size},
        )
        return result.data

    async def store_archive(self, archive: Archive) -> ArchiveAddress:
        """
        Store an archive on the network.

        Raises:
            StorageError: Classified failure of the attempt
        """
        result = await self._client.put_archive(archive)
        address = ArchiveAddress.from_hex(result.address)
        self._record(result)

        _logger.info(
            "Stored archive",
            extra={"address": address.value, "entries": len(archive.entries), "cost": result.cost},
        )
        return address

    async def fetch_archive(self, address: ArchiveAddress) -> Archive:
        """
        Fetch an archive from the network.

        Raises:
            TypeError: If ``address`` is not an ArchiveAddress
            ArchiveFormatError: If the stored archive is malformed
            StorageError: Classified failure of the attempt
        """
        if not isinstance(address, ArchiveAddress):
            raise TypeError(f"fetch_archive expects an ArchiveAddress, got {type(address).__name__}")

        archive = await self._client.get_archive(address.value)
        _logger.debug(
            "Fetched archive",
            extra={"address": address.value, "entries": len(archive.entries)},
        )
        return archive
