"""structlog setup for textmark.

Log lines go to stderr so command output on stdout (resolved strings,
rewritten sources) stays pipeable.
"""

from __future__ import annotations

import logging
import sys

import structlog

from textmark.logging.formatters import TextmarkRenderer, colors_enabled

_configured = False


def configure_logging(
    *,
    tool_name: str = "textmark",
    level: str = "INFO",
    colors: bool | None = None,
    json_output: bool = False,
    show_tool: bool = True,
) -> None:
    """Configure structlog for console or JSON output.

    Args:
        tool_name: Prefix shown on every console line
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        colors: Enable colors (auto-detect TTY/FORCE_COLOR if None)
        json_output: One JSON object per line, for build log aggregation
        show_tool: Show the tool prefix (off when a build runner adds its own)
    """
    global _configured

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=numeric_level, stream=sys.stderr)

    if json_output:
        renderer: structlog.typing.Processor = structlog.processors.JSONRenderer()
        extra: list[structlog.typing.Processor] = [
            structlog.processors.dict_tracebacks,
        ]
    else:
        renderer = TextmarkRenderer(
            tool_name=tool_name,
            colors=colors_enabled() if colors is None else colors,
            show_tool=show_tool,
        )
        extra = []

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            *extra,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True


def is_configured() -> bool:
    return _configured
