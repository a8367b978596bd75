"""
Tests for the download orchestrator.

Tests cover:
- Single-content download to a file
- Archive download recreating relative paths
- Empty and corrupt archives
- Per-entry failure isolation (fetch, resolve and write steps), unexpected errors included
- Bounded concurrency with archive order preserved
"""

import asyncio
from pathlib import Path
from typing import Dict, List

import pytest

from autonomi_transfer.errors.storage import (
    ArchiveFormatError,
    ContentNotFoundError,
    NetworkTimeoutError,
    RetriesExhaustedError,
)
from autonomi_transfer.storage.archive_builder import ArchiveBuilder
from autonomi_transfer.storage.content_store import ContentStore
from autonomi_transfer.storage.types import ArchiveAddress, ContentAddress
from autonomi_transfer.utils.retry import RetryConfig, RetryController
from autonomi_transfer.workflows.download import DownloadOrchestrator

FILES: Dict[str, bytes] = {
    "readme.txt": b"read me",
    "docs/guide.md": b"# Guide",
    "docs/img/logo.png": b"\x89PNG\r\n",
}


@pytest.fixture
def orchestrator(store, retry) -> DownloadOrchestrator:
    return DownloadOrchestrator(store, retry)


@pytest.fixture
def small_retry(sleeper) -> RetryController:
    return RetryController(RetryConfig(max_attempts=3), sleep=sleeper)


def seed_archive(network, files: Dict[str, bytes]) -> ArchiveAddress:
    """Seed content and an archive naming it; return the archive address."""
    builder = ArchiveBuilder()
    for path, data in files.items():
        builder.add_file(path, network.seed(data))
    return network.seed_archive(builder.build())


# =============================================================================
# Single content
# =============================================================================


class TestDownloadContent:
    @pytest.mark.asyncio
    async def test_writes_file(self, orchestrator, network, tmp_path) -> None:
        address = network.seed(b"payload")
        target = tmp_path / "deep" / "dir" / "out.bin"

        report = await orchestrator.download_content(address, target)

        assert target.read_bytes() == b"payload"
        assert report.size == 7
        assert report.attempts == 1
        assert report.output_path == target

    @pytest.mark.asyncio
    async def test_retries_transient(self, orchestrator, network, tmp_path) -> None:
        address = network.seed(b"payload")
        network.get_failures[address.value].extend([NetworkTimeoutError("get")] * 3)

        report = await orchestrator.download_content(address, tmp_path / "out.bin")

        assert report.attempts == 4

    @pytest.mark.asyncio
    async def test_nothing_written_on_failure(self, orchestrator, tmp_path) -> None:
        target = tmp_path / "sub" / "out.bin"

        with pytest.raises(ContentNotFoundError):
            await orchestrator.download_content(ContentAddress.from_hex("f" * 64), target)

        assert not target.exists()
        assert not target.parent.exists()

    @pytest.mark.asyncio
    async def test_rejects_archive_address(self, orchestrator, tmp_path) -> None:
        with pytest.raises(TypeError):
            await orchestrator.download_content(ArchiveAddress.from_hex("f" * 64), tmp_path / "x")


# =============================================================================
# Archives
# =============================================================================


class TestDownloadArchive:
    @pytest.mark.asyncio
    async def test_recreates_tree(self, orchestrator, network, tmp_path) -> None:
        address = seed_archive(network, FILES)
        root = tmp_path / "restore"

        summary = await orchestrator.download_archive(address, root)

        assert summary.ok
        assert summary.total == 3
        assert [o.path for o in summary.outcomes] == list(FILES)
        for path, data in FILES.items():
            assert (root / path).read_bytes() == data

    @pytest.mark.asyncio
    async def test_empty_archive(self, orchestrator, network, tmp_path) -> None:
        address = seed_archive(network, {})
        root = tmp_path / "restore"

        summary = await orchestrator.download_archive(address, root)

        assert summary.total == 0
        assert summary.ok
        assert not root.exists()

    @pytest.mark.asyncio
    async def test_plain_data_is_not_an_archive(self, orchestrator, network, tmp_path) -> None:
        address = ArchiveAddress.from_hex(network.seed(b"not an archive").value)

        with pytest.raises(ArchiveFormatError):
            await orchestrator.download_archive(address, tmp_path / "restore")

        assert not (tmp_path / "restore").exists()

    @pytest.mark.asyncio
    async def test_corrupt_archive(self, orchestrator, network, tmp_path) -> None:
        """A stored archive with an escaping path is refused before anything is written."""
        address = network.seed_raw_archive(
            [
                ("ok.txt", network.seed(b"ok").value, {"created": 0, "modified": 0, "size": 2}),
                ("../evil.txt", network.seed(b"evil").value, {"created": 0, "modified": 0, "size": 4}),
            ]
        )

        with pytest.raises(ArchiveFormatError):
            await orchestrator.download_archive(address, tmp_path / "restore")

        assert not (tmp_path / "restore").exists()
        assert not (tmp_path / "evil.txt").exists()

    @pytest.mark.asyncio
    async def test_archive_fetch_exhaustion(self, small_retry, store, network, tmp_path) -> None:
        address = seed_archive(network, FILES)
        network.get_failures[address.value].extend([NetworkTimeoutError("get")] * 3)

        with pytest.raises(RetriesExhaustedError):
            await DownloadOrchestrator(store, small_retry).download_archive(address, tmp_path)

    @pytest.mark.asyncio
    async def test_rejects_content_address(self, orchestrator, tmp_path) -> None:
        with pytest.raises(TypeError):
            await orchestrator.download_archive(ContentAddress.from_hex("f" * 64), tmp_path)

    @pytest.mark.asyncio
    async def test_missing_entry_isolated(self, orchestrator, network, tmp_path) -> None:
        """One missing entry fails alone; the rest still download."""
        builder = ArchiveBuilder()
        builder.add_file("present.txt", network.seed(b"here"))
        builder.add_file("missing.txt", ContentAddress.from_hex("0" * 64))
        builder.add_file("also/present.txt", network.seed(b"also here"))
        address = network.seed_archive(builder.build())

        summary = await orchestrator.download_archive(address, tmp_path)

        assert not summary.ok
        assert [o.path for o in summary.succeeded] == ["present.txt", "also/present.txt"]
        [failed] = summary.failed
        assert failed.path == "missing.txt"
        assert failed.failed_step == "fetch"
        assert failed.classification == "fatal"
        assert not (tmp_path / "missing.txt").exists()
        assert (tmp_path / "also" / "present.txt").read_bytes() == b"also here"

    @pytest.mark.asyncio
    async def test_entry_exhaustion_isolated(self, small_retry, store, network, tmp_path) -> None:
        files = {"a.txt": b"a", "b.txt": b"b"}
        address = seed_archive(network, files)
        flaky = network.seed(b"a")
        network.get_failures[flaky.value].extend([NetworkTimeoutError("get")] * 3)

        summary = await DownloadOrchestrator(store, small_retry).download_archive(address, tmp_path)

        [failed] = summary.failed
        assert failed.path == "a.txt"
        assert failed.classification == "retries exhausted"
        assert failed.attempts == 3
        assert (tmp_path / "b.txt").read_bytes() == b"b"

    @pytest.mark.asyncio
    async def test_unexpected_fetch_error_isolated(self, orchestrator, network, tmp_path) -> None:
        """An unclassified error on one entry fails that entry; the others are still written."""
        address = seed_archive(network, {"a.txt": b"a", "b.txt": b"b"})
        broken = network.seed(b"a")
        network.get_failures[broken.value].append(RuntimeError("socket closed"))

        summary = await orchestrator.download_archive(address, tmp_path)

        [failed] = summary.failed
        assert failed.path == "a.txt"
        assert failed.failed_step == "fetch"
        assert failed.classification == "fatal"
        assert "RuntimeError" in failed.error
        assert not (tmp_path / "a.txt").exists()
        assert (tmp_path / "b.txt").read_bytes() == b"b"

    @pytest.mark.asyncio
    async def test_escaping_entry_isolated(self, orchestrator, network, tmp_path) -> None:
        """An entry that resolves outside the root through a symlink is refused."""
        root = tmp_path / "root"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)
        address = seed_archive(network, {"link/evil.txt": b"evil", "ok.txt": b"ok"})

        summary = await orchestrator.download_archive(address, root)

        [failed] = summary.failed
        assert failed.path == "link/evil.txt"
        assert failed.failed_step == "resolve"
        assert not (outside / "evil.txt").exists()
        assert (root / "ok.txt").read_bytes() == b"ok"

    @pytest.mark.asyncio
    async def test_write_failure_isolated(self, orchestrator, network, tmp_path) -> None:
        (tmp_path / "blocker").write_bytes(b"")
        address = seed_archive(network, {"blocker/file.txt": b"x", "fine.txt": b"y"})

        summary = await orchestrator.download_archive(address, tmp_path)

        [failed] = summary.failed
        assert failed.path == "blocker/file.txt"
        assert failed.failed_step == "write"
        assert (tmp_path / "fine.txt").read_bytes() == b"y"


# =============================================================================
# Concurrency
# =============================================================================


class SlowNetwork:
    """Wraps a network client and records how many gets overlap."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.in_flight = 0
        self.max_in_flight = 0

    async def put_public(self, content: bytes):
        return await self.inner.put_public(content)

    async def get_public(self, address: str):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            return await self.inner.get_public(address)
        finally:
            self.in_flight -= 1

    async def put_archive(self, archive):
        return await self.inner.put_archive(archive)

    async def get_archive(self, address: str):
        return await self.inner.get_archive(address)


class TestConcurrency:
    def test_invalid_concurrency(self, store, retry) -> None:
        with pytest.raises(ValueError):
            DownloadOrchestrator(store, retry, concurrency=0)

    @pytest.mark.asyncio
    async def test_sequential_by_default(self, network, retry, tmp_path) -> None:
        slow = SlowNetwork(network)
        address = seed_archive(network, FILES)

        await DownloadOrchestrator(ContentStore(slow), retry).download_archive(address, tmp_path)

        assert slow.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_bounded_and_ordered(self, network, retry, tmp_path) -> None:
        slow = SlowNetwork(network)
        files = {f"file_{i}.txt": f"content {i}".encode() for i in range(6)}
        address = seed_archive(network, files)

        summary = await DownloadOrchestrator(
            ContentStore(slow), retry, concurrency=2
        ).download_archive(address, tmp_path)

        assert summary.ok
        assert slow.max_in_flight == 2
        assert [o.path for o in summary.outcomes] == list(files)
        written: List[Path] = sorted(tmp_path.glob("file_*.txt"))
        assert len(written) == 6
