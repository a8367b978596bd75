"""Command line interface for autonomi-transfer."""

from autonomi_transfer.cli.app import app, main

__all__ = ["app", "main"]
