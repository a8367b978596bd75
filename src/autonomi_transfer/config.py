"""
Runtime configuration.

Settings come from ``AUTONOMI_*`` environment variables, optionally seeded
from a ``.env`` file. Values already present in the environment win over
the file.

Example:
    ```python
    config = load_config(".env")
    retry = RetryController(config.retry_config())
    client = AutonomiNetworkClient.connect(config.network_config(), wallet=config.wallet())
    ```
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from autonomi_transfer.errors.base import ConfigurationError
from autonomi_transfer.storage.types import DEFAULT_PEERS, NetworkConfig
from autonomi_transfer.storage.wallet import Wallet
from autonomi_transfer.utils.logging import get_logger
from autonomi_transfer.utils.retry import RetryConfig

_logger = get_logger(__name__)

ENV_PREFIX = "AUTONOMI_"

ENV_FIELDS: Dict[str, str] = {
    "AUTONOMI_PRIVATE_KEY": "private_key",
    "AUTONOMI_PEERS": "peers",
    "AUTONOMI_TIMEOUT_MS": "timeout_ms",
    "AUTONOMI_RETRY_MAX_ATTEMPTS": "retry_max_attempts",
    "AUTONOMI_RETRY_DELAY_MS": "retry_delay_ms",
    "AUTONOMI_RETRY_BACKOFF": "retry_backoff",
    "AUTONOMI_DOWNLOAD_CONCURRENCY": "download_concurrency",
}
"""Environment variable -> TransferConfig field."""


class TransferConfig(BaseModel):
    """
    Settings shared by every command.

    The private key is only needed for writes; downloads work without one.
    """

    model_config = ConfigDict(frozen=True)

    private_key: Optional[SecretStr] = Field(
        default=None,
        description="Hex private key of the paying wallet",
    )
    peers: Tuple[str, ...] = Field(
        default=DEFAULT_PEERS,
        min_length=1,
        description="Multiaddresses used to join the network (comma separated in the environment)",
    )
    timeout_ms: int = Field(default=120000, ge=1000, description="Per-call network timeout")
    retry_max_attempts: int = Field(default=50, ge=1)
    retry_delay_ms: int = Field(default=5000, ge=0)
    retry_backoff: float = Field(default=1.0, ge=1.0)
    download_concurrency: int = Field(default=1, ge=1)

    @field_validator("peers")
    @classmethod
    def _check_peers(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for peer in value:
            if not peer.startswith("/"):
                raise ValueError(f"peer {peer!r} is not a multiaddress")
        return value

    def retry_config(self) -> RetryConfig:
        """Retry policy for network operations."""
        return RetryConfig(
            max_attempts=self.retry_max_attempts,
            base_delay_ms=self.retry_delay_ms,
            max_delay_ms=max(60000, self.retry_delay_ms),
            exponential_base=self.retry_backoff,
        )

    def network_config(self) -> NetworkConfig:
        return NetworkConfig(peers=self.peers, timeout=self.timeout_ms)

    def wallet(self) -> Wallet:
        """
        Build the paying wallet.

        Raises:
            ConfigurationError: If no private key is configured
            WalletError: If the key is malformed
        """
        if self.private_key is None:
            raise ConfigurationError(
                "AUTONOMI_PRIVATE_KEY is not set; uploads and archives need a wallet",
                field="private_key",
            )
        return Wallet.from_private_key(self.private_key.get_secret_value())


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> TransferConfig:
    """
    Build a TransferConfig from environment variables.

    Empty values are treated as unset. AUTONOMI_PEERS is a comma separated
    list of multiaddresses.

    Args:
        environ: Mapping to read (defaults to ``os.environ``)

    Returns:
        TransferConfig

    Raises:
        ConfigurationError: If a value is present but invalid
    """
    environ = os.environ if environ is None else environ
    values = {
        field_name: environ[var].strip()
        for var, field_name in ENV_FIELDS.items()
        if environ.get(var, "").strip()
    }
    if "peers" in values:
        values["peers"] = tuple(peer.strip() for peer in values["peers"].split(",") if peer.strip())

    try:
        return TransferConfig(**values)
    except ValidationError as e:
        error = e.errors()[0]
        field_name = str(error["loc"][0]) if error["loc"] else None
        variable = next(
            (var for var, name in ENV_FIELDS.items() if name == field_name),
            field_name,
        )
        raise ConfigurationError(
            f"Invalid value for {variable}: {error['msg']}",
            field=field_name,
        ) from e


def load_config(env_file: Optional[Union[str, Path]] = None) -> TransferConfig:
    """
    Load configuration, reading a ``.env`` file first.

    Args:
        env_file: Explicit file to load; when None, a ``.env`` in the working
            directory is used if present

    Raises:
        ConfigurationError: If ``env_file`` is missing or a value is invalid
    """
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise ConfigurationError(
                f"Environment file not found: {env_path}",
                field="env_file",
            )
        load_dotenv(env_path, override=False)
        _logger.debug("Loaded environment file", extra={"path": str(env_path)})
    else:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    return config_from_env()
