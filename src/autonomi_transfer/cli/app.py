"""Main Typer application - registers the transfer commands.

Entry point: ``autonomi-transfer`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from autonomi_transfer.cli.commands.archive import archive_cmd
from autonomi_transfer.cli.commands.download import download_cmd
from autonomi_transfer.cli.commands.upload import upload_cmd
from autonomi_transfer.cli.common import CliState, console
from autonomi_transfer.utils.logging import configure_logging
from autonomi_transfer.version import __version__

app = typer.Typer(
    name="autonomi-transfer",
    help="Upload, archive and download public data on the Autonomi network.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="upload", help="Upload a file and print its Data Address.")(upload_cmd)
app.command(name="archive", help="Create an archive for an existing Data Address.")(archive_cmd)
app.command(name="download", help="Download data or an archive.")(download_cmd)


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"autonomi-transfer version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr.",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Read AUTONOMI_* settings from this file instead of ./.env.",
    ),
) -> None:
    """autonomi-transfer: move files to and from the Autonomi network.

    Writes are paid from the wallet in [bold]AUTONOMI_PRIVATE_KEY[/bold].
    Transient network failures are retried (50 attempts, 5 s apart by default).
    """
    configure_logging(logging.DEBUG if verbose else logging.INFO)
    ctx.obj = CliState(env_file=env_file, verbose=verbose)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
