"""
Wallet - payment for network writes.

Writes to the network are paid from an EVM wallet. The key is checked and
the address derived locally with eth_account, so a bad key fails early
with a sanitized error; the client library only sees a key that parsed.
"""

from __future__ import annotations

from typing import Any

import autonomi_client
from eth_account import Account

from autonomi_transfer.errors.storage import WalletError


class Wallet:
    """
    EVM wallet used to pay for uploads.

    Example:
        ```python
        wallet = Wallet.from_private_key(os.environ["AUTONOMI_PRIVATE_KEY"])
        print(wallet.address)
        payment = wallet.payment_option()
        ```
    """

    def __init__(self, account: Any) -> None:
        self._account = account

    @classmethod
    def from_private_key(cls, private_key: str) -> Wallet:
        """
        Build a wallet from a hex private key.

        Args:
            private_key: 64 hex characters, with or without 0x prefix

        Returns:
            Wallet

        Raises:
            WalletError: If the key is empty or not a valid secp256k1 key
        """
        key = (private_key or "").strip()
        if not key:
            raise WalletError("Private key is empty")
        if not key.startswith("0x"):
            key = "0x" + key

        try:
            account = Account.from_key(key)
        except Exception as e:
            # Sanitize key errors to prevent key leakage in tracebacks
            raise WalletError(
                "Failed to create wallet from private key",
                details={"reason": type(e).__name__},
            ) from None
        return cls(account)

    @property
    def address(self) -> str:
        """Get the wallet address."""
        return self._account.address

    def payment_option(self) -> Any:
        """
        Build the client library's payment option for this wallet.

        Returns:
            ``autonomi_client.PaymentOption`` paying from this wallet

        Raises:
            WalletError: If the library rejects the key
        """
        # The library takes the key without its 0x prefix
        key_hex = self._account.key.hex()
        if key_hex.startswith("0x"):
            key_hex = key_hex[2:]

        try:
            library_wallet = autonomi_client.Wallet(key_hex)
        except Exception as e:
            raise WalletError(
                "Network client rejected the wallet",
                details={"reason": type(e).__name__, "address": self.address},
            ) from None
        return autonomi_client.PaymentOption.wallet(library_wallet)

    def __repr__(self) -> str:
        return f"Wallet(address={self.address!r})"
