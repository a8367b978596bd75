"""Shared helpers for CLI commands: configuration, wiring and output."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from autonomi_transfer.config import TransferConfig, load_config
from autonomi_transfer.errors.base import TransferError
from autonomi_transfer.errors.storage import RetriesExhaustedError
from autonomi_transfer.storage.content_store import ContentStore
from autonomi_transfer.storage.network_client import AutonomiNetworkClient
from autonomi_transfer.utils.retry import RetryController

console = Console(soft_wrap=True)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PARTIAL = 3
"""Data was uploaded but its archive failed, or some archive entries failed to download."""


@dataclass
class CliState:
    """Options given before the subcommand."""

    env_file: Optional[Path] = None
    verbose: bool = False


def get_state(ctx: typer.Context) -> CliState:
    if isinstance(ctx.obj, CliState):
        return ctx.obj
    return CliState()


def get_config(ctx: typer.Context) -> TransferConfig:
    """Load configuration, exiting with status 1 if it is invalid."""
    try:
        return load_config(get_state(ctx).env_file)
    except TransferError as e:
        print_error(e)
        raise typer.Exit(code=EXIT_FAILURE)


def build_store(config: TransferConfig, *, with_wallet: bool) -> ContentStore:
    """
    Connect to the network and wire a content store for one command.

    Raises:
        ServiceUnavailableError: If no peer could be reached
        ConfigurationError: If a wallet is required but no key is configured
        WalletError: If the configured key is malformed
    """
    wallet = config.wallet() if with_wallet else None
    return ContentStore(AutonomiNetworkClient.connect(config.network_config(), wallet=wallet))


def build_retry(config: TransferConfig) -> RetryController:
    def announce(attempt: int, max_attempts: int) -> None:
        if attempt > 1:
            console.print(f"[dim]Attempt {attempt}/{max_attempts}...[/dim]")

    return RetryController(config.retry_config(), on_attempt=announce)


def print_error(error: TransferError, step: Optional[str] = None) -> None:
    """Print a classified failure, including the attempt count when retries ran out."""
    prefix = f"{step} failed" if step else "Error"
    console.print(f"[bold red]{prefix}:[/bold red] {escape(str(error))}")
    detail = f"classification: {error.classification}"
    if isinstance(error, RetriesExhaustedError):
        detail += f", attempts: {error.attempts}"
    console.print(f"[dim]{detail}[/dim]")


def format_cost(cost: int) -> str:
    return f"{cost} atto"
