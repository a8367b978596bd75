"""
Storage Module - content-addressed public data on the network.

- ContentStore: single-attempt ``store``/``fetch`` primitives
- AutonomiNetworkClient: the Autonomi client library, paid for by a Wallet
- Archive / ArchiveBuilder: path -> address manifests

Example:
    ```python
    import os
    from autonomi_transfer.storage import (
        ArchiveBuilder,
        AutonomiNetworkClient,
        ContentStore,
        NetworkConfig,
        Wallet,
    )

    store = ContentStore(AutonomiNetworkClient.connect(
        NetworkConfig(peers=("/ip4/127.0.0.1/tcp/12000",)),
        wallet=Wallet.from_private_key(os.environ["AUTONOMI_PRIVATE_KEY"]),
    ))

    address = await store.store(b"hello")
    archive = ArchiveBuilder().add_file("hello.txt", address).build()
    archive_address = await store.store_archive(archive)
    ```
"""

from __future__ import annotations

# ============================================================================
# Clients
# ============================================================================

from autonomi_transfer.storage.content_store import ContentStore, NetworkClient
from autonomi_transfer.storage.network_client import (
    AutonomiNetworkClient,
    classify_network_error,
)
from autonomi_transfer.storage.wallet import Wallet

# ============================================================================
# Archives
# ============================================================================

from autonomi_transfer.storage.archive import (
    DEFAULT_ARCHIVE_PATH,
    Archive,
    ArchiveEntry,
    archive_path_problem,
    validate_archive_path,
)
from autonomi_transfer.storage.archive_builder import ArchiveBuilder, single_entry_archive

# ============================================================================
# Types
# ============================================================================

from autonomi_transfer.storage.types import (
    ADDRESS_HEX_LENGTH,
    DEFAULT_PEERS,
    ArchiveAddress,
    ContentAddress,
    DownloadResult,
    FileMetadata,
    NetworkConfig,
    PutResult,
)

__all__ = [
    # Clients
    "ContentStore",
    "NetworkClient",
    "AutonomiNetworkClient",
    "classify_network_error",
    "Wallet",
    # Archives
    "Archive",
    "ArchiveEntry",
    "ArchiveBuilder",
    "single_entry_archive",
    "archive_path_problem",
    "validate_archive_path",
    "DEFAULT_ARCHIVE_PATH",
    # Types
    "ADDRESS_HEX_LENGTH",
    "DEFAULT_PEERS",
    "ContentAddress",
    "ArchiveAddress",
    "FileMetadata",
    "NetworkConfig",
    "PutResult",
    "DownloadResult",
]
