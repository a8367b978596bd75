"""``autonomi-transfer archive`` - name existing data inside a new archive."""

from __future__ import annotations

import asyncio

import typer
from rich.markup import escape

from autonomi_transfer.cli import common
from autonomi_transfer.cli.common import console
from autonomi_transfer.errors.base import TransferError
from autonomi_transfer.storage.archive import DEFAULT_ARCHIVE_PATH
from autonomi_transfer.storage.types import ContentAddress
from autonomi_transfer.workflows.archive import create_archive_for_data


def archive_cmd(
    ctx: typer.Context,
    data_address: str = typer.Argument(..., help="Data Address (64 hex characters)."),
    archive_path: str = typer.Option(
        DEFAULT_ARCHIVE_PATH,
        "--archive-path",
        "-p",
        help="Relative path of the entry inside the archive.",
    ),
) -> None:
    """Create a one-entry archive for data already on the network."""
    config = common.get_config(ctx)
    try:
        address = ContentAddress.from_hex(data_address)
        store = common.build_store(config, with_wallet=True)
    except TransferError as e:
        common.print_error(e)
        raise typer.Exit(code=common.EXIT_FAILURE)

    try:
        report = asyncio.run(
            create_archive_for_data(
                address,
                archive_path,
                store=store,
                retry=common.build_retry(config),
            )
        )
    except TransferError as e:
        common.print_error(e, step="archive")
        raise typer.Exit(code=common.EXIT_FAILURE)

    console.print(f"[bold green]Archive Address:[/bold green] {report.archive_address.value}")
    console.print(
        f"[dim]entry {escape(report.entry_path)} -> {report.data_address.value}, "
        f"attempts: {report.attempts}, cost: {common.format_cost(store.total_cost)}[/dim]"
    )
