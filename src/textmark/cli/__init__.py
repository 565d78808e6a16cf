"""textmark command line interface."""

from textmark.cli.main import app, main

__all__ = ["app", "main"]
