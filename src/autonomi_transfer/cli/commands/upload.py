"""``autonomi-transfer upload`` - store a file, then optionally verify and archive it."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from autonomi_transfer.cli import common
from autonomi_transfer.cli.common import console
from autonomi_transfer.errors.base import TransferError
from autonomi_transfer.workflows.upload import (
    UploadIntent,
    UploadOrchestrator,
    UploadReport,
    VerificationStatus,
)


def upload_cmd(
    ctx: typer.Context,
    file_path: Path = typer.Option(
        ...,
        "--file-path",
        "-f",
        help="File to upload.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the verified copy (mismatches go here, or to the working directory).",
    ),
    verify: Optional[bool] = typer.Option(
        None,
        "--verify/--no-verify",
        help="Download the data again and compare it. Prompted for when omitted.",
    ),
    archive: Optional[bool] = typer.Option(
        None,
        "--archive/--no-archive",
        help="Create an archive naming the upload by its file name. Prompted for when omitted.",
    ),
) -> None:
    """Upload a file as public data and print its Data Address.

    Every choice is made before the upload starts; nothing is asked once
    payment is under way.
    """
    config = common.get_config(ctx)
    try:
        store = common.build_store(config, with_wallet=True)
    except TransferError as e:
        common.print_error(e)
        raise typer.Exit(code=common.EXIT_FAILURE)

    if verify is None:
        verify = typer.confirm("Verify the upload by downloading it again?", default=False)
    if archive is None:
        archive = typer.confirm("Create an archive for the uploaded file?", default=False)
    intent = UploadIntent(verify=verify, archive=archive)

    orchestrator = UploadOrchestrator(store, common.build_retry(config))
    console.print(f"Uploading [cyan]{escape(str(file_path))}[/cyan]...")
    report = asyncio.run(orchestrator.run(file_path, intent, output_dir=output_dir))

    _print_report(report)
    if report.succeeded:
        return
    if report.uploaded and report.failed_step == "archive":
        raise typer.Exit(code=common.EXIT_PARTIAL)
    raise typer.Exit(code=common.EXIT_FAILURE)


def _print_report(report: UploadReport) -> None:
    if report.data_address is not None:
        console.print(f"[bold green]Data Address:[/bold green] {report.data_address.value}")
    else:
        console.print("[bold red]Data Address:[/bold red] not obtained")
    console.print(f"Upload attempts: {report.upload_attempts}")

    verification = report.verification
    if verification is not None:
        if verification.status == VerificationStatus.MATCHED:
            console.print("Verification: [green]matched[/green]")
        elif verification.status == VerificationStatus.MISMATCHED:
            console.print(
                f"Verification: [yellow]MISMATCH[/yellow] "
                f"(fetched {verification.fetched_size} bytes, uploaded {report.size})"
            )
        else:
            console.print(
                f"Verification: [yellow]download failed[/yellow] {escape(verification.error or '')}"
            )
        if verification.saved_to is not None:
            console.print(f"Saved copy: {escape(str(verification.saved_to))}")
        if verification.save_error:
            console.print(f"[yellow]Warning:[/yellow] {escape(verification.save_error)}")

    if report.archive_address is not None:
        console.print(f"[bold green]Archive Address:[/bold green] {report.archive_address.value}")
        console.print(f"Archive entry: {escape(report.archive_entry_path or '')}")
    console.print(f"Session cost: {common.format_cost(report.cost)}")

    if report.failed_step is not None:
        console.print(
            f"[bold red]{report.failed_step} failed:[/bold red] {escape(report.failure or '')}"
        )
        detail = f"classification: {report.failure_classification}"
        if report.failure_classification == "retries exhausted":
            attempts = (
                report.upload_attempts if report.failed_step == "upload" else report.archive_attempts
            )
            detail += f", attempts: {attempts}"
        console.print(f"[dim]{detail}[/dim]")
        if report.uploaded:
            console.print("[dim]The data itself was uploaded; its address is above.[/dim]")
