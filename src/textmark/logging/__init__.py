"""Structured logging for textmark.

Usage:
    from textmark.logging import configure_logging

    configure_logging(level="DEBUG")
"""

from textmark.logging.config import configure_logging, is_configured
from textmark.logging.formatters import TextmarkRenderer, colors_enabled

__all__ = [
    "TextmarkRenderer",
    "colors_enabled",
    "configure_logging",
    "is_configured",
]
