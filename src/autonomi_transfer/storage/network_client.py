"""
Network Client - public data and archives through the Autonomi client library.

Wraps ``autonomi_client.Client``. The library's calls block, so each one
runs in a worker thread under the configured timeout. Every call is a
single round trip and every failure the library raises is classified as
transient or fatal before it leaves this module; retrying is the
caller's job (see RetryController).
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple

import autonomi_client

from autonomi_transfer.errors.storage import (
    ArchiveFormatError,
    ContentDecodeError,
    ContentNotFoundError,
    InsufficientFundsError,
    InvalidContentError,
    NetworkTimeoutError,
    ServiceUnavailableError,
    StorageError,
    WalletError,
)
from autonomi_transfer.storage.archive import Archive, NetworkEntry
from autonomi_transfer.storage.types import (
    ArchiveAddress,
    DownloadResult,
    NetworkConfig,
    PutResult,
)
from autonomi_transfer.storage.wallet import Wallet
from autonomi_transfer.utils.logging import get_logger

_logger = get_logger(__name__)

_TIMEOUT_MARKERS = ("timed out", "timeout")
_FUNDS_MARKERS = ("insufficient", "not enough balance", "out of funds")
_NOT_FOUND_MARKERS = ("not found", "notfound")
_DECODE_MARKERS = ("deserial", "decode")
_INVALID_MARKERS = ("invalid", "too large", "too big")


def classify_network_error(
    error: BaseException,
    operation: str,
    address: Optional[str] = None,
    *,
    archive: bool = False,
) -> StorageError:
    """
    Map an exception raised by the client library to a StorageError.

    The library reports failures as plain exceptions, so the message decides
    the kind. Anything not recognised as fatal is treated as transient and
    left to the retry policy.

    Args:
        error: Exception raised by the library
        operation: Name of the call, e.g. "put" or "archive get"
        address: Hex address involved, if any
        archive: Whether the call reads an archive

    Returns:
        Classified StorageError (``error`` itself if already classified)
    """
    if isinstance(error, StorageError):
        return error

    message = str(error) or type(error).__name__
    lowered = message.lower()
    details = {"error_type": type(error).__name__}

    if isinstance(error, TimeoutError) or any(m in lowered for m in _TIMEOUT_MARKERS):
        details["error"] = message
        return NetworkTimeoutError(operation, address=address, details=details)
    if any(m in lowered for m in _FUNDS_MARKERS):
        return InsufficientFundsError(f"Payment rejected: {message}", details=details)
    if address is not None and any(m in lowered for m in _NOT_FOUND_MARKERS):
        return ContentNotFoundError(address, details=details)
    if any(m in lowered for m in _DECODE_MARKERS):
        if archive:
            return ArchiveFormatError(message, address=address, details=details)
        return ContentDecodeError(f"{operation} failed: {message}", address=address, details=details)
    if any(m in lowered for m in _INVALID_MARKERS):
        return InvalidContentError(f"{operation} rejected: {message}", address=address, details=details)
    return ServiceUnavailableError(f"{operation} failed: {message}", address=address, details=details)


def _hex(address: Any) -> str:
    to_hex = getattr(address, "to_hex", None)
    return to_hex() if callable(to_hex) else str(address)


def _split_put_result(result: Any) -> Tuple[str, str]:
    """(cost, hex address) of a put; bindings without cost reporting return only the address."""
    if isinstance(result, tuple):
        cost, address = result
        return str(cost), _hex(address)
    return "0", _hex(result)


def _library_entries(public_archive: Any) -> List[NetworkEntry]:
    files = list(public_archive.files())
    addresses = list(public_archive.addresses())
    if len(files) != len(addresses):
        raise ValueError(f"{len(files)} paths but {len(addresses)} addresses")

    entries = []
    for (path, metadata), address in zip(files, addresses):
        entries.append(
            (
                str(path),
                _hex(address),
                {
                    "created": getattr(metadata, "created", 0),
                    "modified": getattr(metadata, "modified", 0),
                    "size": getattr(metadata, "size", 0),
                },
            )
        )
    return entries


class AutonomiNetworkClient:
    """
    Public-data client for the Autonomi network.

    Features:
    - Upload public data, paid by a Wallet
    - Download public data by hex address
    - Store and read ``PublicArchive`` manifests
    - Transient/fatal classification of every failure

    Example:
        ```python
        from autonomi_transfer.storage import AutonomiNetworkClient, NetworkConfig, Wallet

        client = AutonomiNetworkClient.connect(
            NetworkConfig(peers=("/ip4/127.0.0.1/tcp/12000",)),
            wallet=Wallet.from_private_key(os.environ["AUTONOMI_PRIVATE_KEY"]),
        )

        result = await client.put_public(b"hello")
        print(f"Stored at {result.address} for {result.cost} atto")

        downloaded = await client.get_public(result.address)
        ```
    """

    def __init__(
        self,
        client: Any,
        config: Optional[NetworkConfig] = None,
        wallet: Optional[Wallet] = None,
    ) -> None:
        """
        Initialize around a connected library client.

        Args:
            client: Connected ``autonomi_client.Client``
            config: Network configuration (uses defaults if None)
            wallet: Wallet paying for uploads (downloads need none)

        Raises:
            WalletError: If the wallet cannot be loaded into the library
        """
        self._client = client
        self._config = config or NetworkConfig()
        self._wallet = wallet
        self._payment = wallet.payment_option() if wallet is not None else None

    @classmethod
    def connect(
        cls,
        config: NetworkConfig,
        wallet: Optional[Wallet] = None,
    ) -> AutonomiNetworkClient:
        """
        Join the network through the configured peers.

        Raises:
            ServiceUnavailableError: If no connection could be made
            WalletError: If the wallet cannot be loaded into the library
        """
        try:
            client = autonomi_client.Client.connect(list(config.peers))
        except Exception as e:
            raise ServiceUnavailableError(
                f"Failed to connect to the network: {e}",
                details={"peers": list(config.peers)},
            ) from e
        _logger.info("Connected to network", extra={"peers": len(config.peers)})
        return cls(client, config, wallet=wallet)

    @property
    def wallet(self) -> Optional[Wallet]:
        """Get the paying wallet, if any."""
        return self._wallet

    async def _call(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(fn, *args),
                timeout=self._config.timeout / 1000,
            )
        except asyncio.TimeoutError:
            raise NetworkTimeoutError(operation, timeout_ms=self._config.timeout) from None

    def _require_payment(self) -> Any:
        if self._payment is None:
            raise WalletError("Uploads require a wallet; set AUTONOMI_PRIVATE_KEY")
        return self._payment

    async def put_public(self, content: bytes) -> PutResult:
        """
        Store public data on the network.

        Args:
            content: Raw bytes to upload

        Returns:
            PutResult with the address and the cost paid

        Raises:
            WalletError: If no wallet is configured
            StorageError: Classified failure of the attempt
        """
        payment = self._require_payment()
        try:
            result = await self._call("put", self._client.data_put_public, content, payment)
        except StorageError:
            raise
        except Exception as e:
            raise classify_network_error(e, "put") from e

        try:
            cost, address = _split_put_result(result)
        except (TypeError, ValueError) as e:
            raise ContentDecodeError(f"Malformed upload result: {e}") from e

        return PutResult(
            address=address,
            cost=cost,
            size=len(content),
            uploaded_at=datetime.now(timezone.utc),
        )

    async def get_public(self, address: str) -> DownloadResult:
        """
        Fetch public data from the network.

        Args:
            address: Hex address of the data

        Returns:
            DownloadResult with data

        Raises:
            StorageError: Classified failure of the attempt
        """
        try:
            fetched = await self._call("get", self._client.data_get_public, address)
        except StorageError:
            raise
        except Exception as e:
            raise classify_network_error(e, "get", address) from e

        try:
            data = bytes(fetched)
        except TypeError as e:
            raise ContentDecodeError(f"Malformed download result: {e}", address=address) from e

        return DownloadResult(
            data=data,
            size=len(data),
            downloaded_at=datetime.now(timezone.utc),
        )

    async def put_archive(self, archive: Archive) -> PutResult:
        """
        Store an archive as a ``PublicArchive``.

        Args:
            archive: Archive to store

        Returns:
            PutResult with the archive address and the cost paid

        Raises:
            WalletError: If no wallet is configured
            StorageError: Classified failure of the attempt
        """
        payment = self._require_payment()
        try:
            public_archive = autonomi_client.PublicArchive()
            for path, hex_address, metadata in archive.to_network():
                public_archive.add_file(path, hex_address, autonomi_client.Metadata(metadata.size))
            result = await self._call(
                "archive put", self._client.archive_put_public, public_archive, payment
            )
        except StorageError:
            raise
        except Exception as e:
            raise classify_network_error(e, "archive put") from e

        try:
            cost, address = _split_put_result(result)
        except (TypeError, ValueError) as e:
            raise ContentDecodeError(f"Malformed archive upload result: {e}") from e

        return PutResult(address=address, cost=cost, uploaded_at=datetime.now(timezone.utc))

    async def get_archive(self, address: str) -> Archive:
        """
        Fetch and validate a ``PublicArchive``.

        Args:
            address: Hex address of the archive

        Returns:
            The archive

        Raises:
            ArchiveFormatError: If the stored archive is malformed
            StorageError: Classified failure of the attempt
        """
        try:
            public_archive = await self._call(
                "archive get", self._client.archive_get_public, address
            )
        except StorageError:
            raise
        except Exception as e:
            raise classify_network_error(e, "archive get", address, archive=True) from e

        try:
            entries = _library_entries(public_archive)
        except (AttributeError, TypeError, ValueError) as e:
            raise ArchiveFormatError(f"unreadable archive: {e}", address=address) from e

        return Archive.from_network(entries, address=ArchiveAddress.from_hex(address))
