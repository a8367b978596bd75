"""
Shared fixtures: an in-memory network with failure injection.
"""

import hashlib
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from autonomi_transfer.errors.storage import ArchiveFormatError, ContentNotFoundError
from autonomi_transfer.storage.archive import Archive
from autonomi_transfer.storage.content_store import ContentStore
from autonomi_transfer.storage.types import (
    ArchiveAddress,
    ContentAddress,
    DownloadResult,
    PutResult,
)
from autonomi_transfer.utils.retry import RetryConfig, RetryController


# =============================================================================
# Test Constants
# =============================================================================

VALID_HEX = "a" * 64
OTHER_HEX = "b" * 64
PUT_COST = 7

RawEntry = Tuple[str, str, Any]


def address_of(data: bytes) -> str:
    """Address the in-memory network assigns to ``data``."""
    return hashlib.sha256(data).hexdigest()


def archive_address_of(entries: Sequence[RawEntry]) -> str:
    """Address the in-memory network assigns to an archive's entries."""
    listing = "\n".join(f"{path}\t{hex_address}" for path, hex_address, _ in entries)
    return hashlib.sha256(b"archive\n" + listing.encode("utf-8")).hexdigest()


# =============================================================================
# In-memory network
# =============================================================================


class MemoryNetworkClient:
    """
    Network client storing content and archives in dicts.

    Failures are injected by queueing exceptions: each call pops one and
    raises it before doing any work. ``before_put`` and
    ``before_archive_put`` can inspect (and reject) each payload.
    """

    def __init__(self, cost: int = PUT_COST) -> None:
        self.cost = cost
        self.blobs: Dict[str, bytes] = {}
        self.archives: Dict[str, List[RawEntry]] = {}
        self.put_failures: List[Exception] = []
        self.archive_put_failures: List[Exception] = []
        self.get_failures: Dict[str, List[Exception]] = defaultdict(list)
        self.corrupted: Dict[str, bytes] = {}
        self.put_calls = 0
        self.archive_put_calls = 0
        self.before_put: Optional[Callable[[bytes], None]] = None
        self.before_archive_put: Optional[Callable[[Archive], None]] = None
        self.get_calls: Dict[str, int] = defaultdict(int)

    def seed(self, data: bytes) -> ContentAddress:
        """Place content on the network without paying for it."""
        hex_address = address_of(data)
        self.blobs[hex_address] = data
        return ContentAddress.from_hex(hex_address)

    def seed_archive(self, archive: Archive) -> ArchiveAddress:
        """Place an archive on the network without paying for it."""
        return self.seed_raw_archive(archive.to_network())

    def seed_raw_archive(self, entries: Sequence[RawEntry]) -> ArchiveAddress:
        """Place archive entries on the network as-is, valid or not."""
        hex_address = archive_address_of(entries)
        self.archives[hex_address] = list(entries)
        return ArchiveAddress.from_hex(hex_address)

    async def put_public(self, content: bytes) -> PutResult:
        self.put_calls += 1
        if self.put_failures:
            raise self.put_failures.pop(0)
        if self.before_put is not None:
            self.before_put(content)

        hex_address = address_of(content)
        self.blobs[hex_address] = content
        return PutResult(
            address=hex_address,
            cost=str(self.cost),
            size=len(content),
            uploaded_at=datetime.now(timezone.utc),
        )

    async def get_public(self, address: str) -> DownloadResult:
        self.get_calls[address] += 1
        if self.get_failures[address]:
            raise self.get_failures[address].pop(0)

        if address in self.corrupted:
            data = self.corrupted[address]
        elif address in self.blobs:
            data = self.blobs[address]
        else:
            raise ContentNotFoundError(address)
        return DownloadResult(data=data, size=len(data), downloaded_at=datetime.now(timezone.utc))

    async def put_archive(self, archive: Archive) -> PutResult:
        self.archive_put_calls += 1
        if self.archive_put_failures:
            raise self.archive_put_failures.pop(0)
        if self.before_archive_put is not None:
            self.before_archive_put(archive)

        entries = archive.to_network()
        hex_address = archive_address_of(entries)
        self.archives[hex_address] = entries
        return PutResult(address=hex_address, cost=str(self.cost), uploaded_at=datetime.now(timezone.utc))

    async def get_archive(self, address: str) -> Archive:
        self.get_calls[address] += 1
        if self.get_failures[address]:
            raise self.get_failures[address].pop(0)

        if address in self.archives:
            return Archive.from_network(
                self.archives[address], address=ArchiveAddress.from_hex(address)
            )
        if address in self.blobs:
            raise ArchiveFormatError("not an archive", address=address)
        raise ContentNotFoundError(address)


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def network() -> MemoryNetworkClient:
    return MemoryNetworkClient()


@pytest.fixture
def store(network: MemoryNetworkClient) -> ContentStore:
    return ContentStore(network)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def retry(sleeper: RecordingSleep) -> RetryController:
    """Default policy (50 attempts, 5 s apart) without real waiting."""
    return RetryController(RetryConfig(), sleep=sleeper)
