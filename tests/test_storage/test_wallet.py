"""
Tests for Wallet.
"""

from unittest.mock import patch

import pytest
from eth_account import Account

from autonomi_transfer.errors.storage import WalletError
from autonomi_transfer.storage.wallet import Wallet

PRIVATE_KEY = "0x" + "11" * 32


class TestWallet:
    def test_from_private_key(self) -> None:
        wallet = Wallet.from_private_key(PRIVATE_KEY)

        assert wallet.address == Account.from_key(PRIVATE_KEY).address

    def test_prefix_optional(self) -> None:
        assert (
            Wallet.from_private_key(PRIVATE_KEY[2:]).address
            == Wallet.from_private_key(PRIVATE_KEY).address
        )

    def test_empty_key(self) -> None:
        with pytest.raises(WalletError, match="empty"):
            Wallet.from_private_key("   ")

    def test_invalid_key_not_echoed(self) -> None:
        bad_key = "zz" * 32

        with pytest.raises(WalletError) as exc_info:
            Wallet.from_private_key(bad_key)

        assert bad_key not in str(exc_info.value)
        assert bad_key not in repr(exc_info.value.details)

    def test_payment_option_uses_bare_key(self) -> None:
        """The client library is handed the key without its 0x prefix."""
        wallet = Wallet.from_private_key(PRIVATE_KEY)

        with patch("autonomi_client.Wallet", create=True) as library_wallet, patch(
            "autonomi_client.PaymentOption", create=True
        ) as payment_option:
            payment = wallet.payment_option()

        library_wallet.assert_called_once_with("11" * 32)
        payment_option.wallet.assert_called_once_with(library_wallet.return_value)
        assert payment is payment_option.wallet.return_value

    def test_payment_option_rejected_by_library(self) -> None:
        wallet = Wallet.from_private_key(PRIVATE_KEY)

        with patch(
            "autonomi_client.Wallet", create=True, side_effect=RuntimeError("bad key " + "11" * 32)
        ):
            with pytest.raises(WalletError, match="rejected the wallet") as exc_info:
                wallet.payment_option()

        assert "11" * 32 not in str(exc_info.value)
        assert exc_info.value.details["reason"] == "RuntimeError"
        assert exc_info.value.__cause__ is None

    def test_repr_hides_key(self) -> None:
        wallet = Wallet.from_private_key(PRIVATE_KEY)

        assert PRIVATE_KEY[2:] not in repr(wallet)
        assert wallet.address in repr(wallet)
