"""``autonomi-transfer download`` - fetch content or a whole archive."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from autonomi_transfer.cli import common
from autonomi_transfer.cli.common import console
from autonomi_transfer.errors.base import TransferError
from autonomi_transfer.storage.types import ArchiveAddress, ContentAddress
from autonomi_transfer.workflows.download import ArchiveDownloadSummary, DownloadOrchestrator


def download_cmd(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Data or Archive Address (64 hex characters)."),
    output_path: Path = typer.Option(
        ...,
        "--output-path",
        "-o",
        help="File to write, or the root directory when --archive is given.",
    ),
    archive: bool = typer.Option(
        False,
        "--archive",
        help="Treat the address as an archive and download every entry.",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        "-j",
        min=1,
        help="Archive entries fetched at once [default: AUTONOMI_DOWNLOAD_CONCURRENCY or 1].",
    ),
) -> None:
    """Download public data, or every file of an archive."""
    config = common.get_config(ctx)
    try:
        content_address = ContentAddress.from_hex(address)
        archive_address = ArchiveAddress.from_hex(address)
        store = common.build_store(config, with_wallet=False)
    except TransferError as e:
        common.print_error(e)
        raise typer.Exit(code=common.EXIT_FAILURE)

    orchestrator = DownloadOrchestrator(
        store,
        common.build_retry(config),
        concurrency=concurrency or config.download_concurrency,
    )

    if not archive:
        try:
            report = asyncio.run(orchestrator.download_content(content_address, output_path))
        except TransferError as e:
            common.print_error(e, step="download")
            raise typer.Exit(code=common.EXIT_FAILURE)
        console.print(
            f"[bold green]Saved[/bold green] {report.size} bytes to "
            f"{escape(str(report.output_path))} [dim](attempts: {report.attempts})[/dim]"
        )
        return

    try:
        summary = asyncio.run(orchestrator.download_archive(archive_address, output_path))
    except TransferError as e:
        common.print_error(e, step="archive download")
        raise typer.Exit(code=common.EXIT_FAILURE)

    _print_summary(summary)
    if not summary.ok:
        raise typer.Exit(code=common.EXIT_PARTIAL)


def _print_summary(summary: ArchiveDownloadSummary) -> None:
    if summary.total == 0:
        console.print("[yellow]Archive is empty; nothing to download.[/yellow]")
        return

    table = Table(title=f"Archive {summary.address.value[:16]}...")
    table.add_column("Path", style="cyan")
    table.add_column("Result")
    table.add_column("Detail")
    for outcome in summary.outcomes:
        if outcome.succeeded:
            table.add_row(
                escape(outcome.path),
                "[green]saved[/green]",
                f"{outcome.size} bytes",
            )
        else:
            table.add_row(
                escape(outcome.path),
                f"[red]{outcome.failed_step} failed[/red]",
                escape(f"{outcome.classification}: {outcome.error}"),
            )
    console.print(table)
    console.print(
        f"{len(summary.succeeded)} succeeded, {len(summary.failed)} failed "
        f"under {escape(str(summary.output_root))}"
    )
