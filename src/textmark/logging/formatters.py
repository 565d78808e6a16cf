"""Console renderer for textmark log events.

Output format: tool | HH:MM:SS | level | message key=value...
"""

from __future__ import annotations

import os
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

# 24-bit ANSI escapes
ANSI_TEAL = "\033[38;2;94;234;212m"
ANSI_AMBER = "\033[38;2;251;191;36m"
ANSI_ROSE = "\033[38;2;251;113;133m"
ANSI_VIOLET = "\033[38;2;167;139;250m"
ANSI_LIME = "\033[38;2;163;230;53m"
ANSI_SLATE = "\033[38;2;100;116;139m"
ANSI_RESET = "\033[0m"

LEVEL_COLORS: dict[str, str] = {
    "debug": ANSI_SLATE,
    "info": ANSI_TEAL,
    "warning": ANSI_AMBER,
    "warn": ANSI_AMBER,
    "error": ANSI_ROSE,
    "exception": ANSI_ROSE,
    "critical": ANSI_VIOLET,
}

_INDENT = " " * 9


def colors_enabled(stream: Any = None) -> bool:
    """TTY on ``stream`` (stderr by default) or FORCE_COLOR set to a truthy value."""
    stream = stream or sys.stderr
    force_color = os.environ.get("FORCE_COLOR", "")
    if force_color:
        return force_color not in ("0", "false")
    return hasattr(stream, "isatty") and stream.isatty()


class TextmarkRenderer:
    """structlog processor that renders one event as one line.

    Example:
        textmark | 10:42:01 | warn  | Skipping unparseable source file=/app/page.tsx
        textmark | 10:42:03 | info  | Consolidated extracted strings strings=42 dropped=1
    """

    def __init__(
        self,
        tool_name: str = "textmark",
        colors: bool | None = None,
        max_exception_frames: int = 5,
        show_tool: bool = True,
    ) -> None:
        self.tool_name = tool_name
        self.max_exception_frames = max_exception_frames
        self.show_tool = show_tool
        self.colors = colors_enabled() if colors is None else colors

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        timestamp = event_dict.pop("timestamp", None) or datetime.now().strftime("%H:%M:%S")
        level = event_dict.pop("level", method_name).lower()
        if level == "warning":
            level = "warn"
        event = str(event_dict.pop("event", ""))
        exc_info = event_dict.pop("exc_info", None)
        fields = self._format_fields(event_dict)

        if self.colors:
            prefix = f"{ANSI_VIOLET}{self.tool_name}{ANSI_RESET}"
            stamp = f"{ANSI_SLATE}{timestamp}{ANSI_RESET}"
            lvl = f"{LEVEL_COLORS.get(level, ANSI_TEAL)}{level:<5}{ANSI_RESET}"
        else:
            prefix, stamp, lvl = self.tool_name, timestamp, f"{level:<5}"

        parts = [prefix, stamp, lvl, event] if self.show_tool else [stamp, lvl, event]
        line = " | ".join(parts)
        if fields:
            line += f" {fields}"
        if exc_info:
            rendered = self._format_exception(exc_info)
            if rendered:
                line += f"\n{rendered}"
        return line

    def _format_fields(self, event_dict: EventDict) -> str:
        pairs = []
        for key, value in event_dict.items():
            if key.startswith("_") or value is None:
                continue
            if self.colors and isinstance(value, bool):
                pairs.append(f"{key}={ANSI_LIME if value else ANSI_ROSE}{value}{ANSI_RESET}")
            elif self.colors and isinstance(value, (int, float)):
                pairs.append(f"{key}={ANSI_AMBER}{value}{ANSI_RESET}")
            else:
                pairs.append(f"{key}={value}")
        joined = " ".join(pairs)
        if self.colors and joined:
            return f"{ANSI_SLATE}{joined}{ANSI_RESET}"
        return joined

    def _format_exception(self, exc_info: tuple[Any, ...] | bool | BaseException) -> str:
        """Exception type and message plus the most recent traceback frames."""
        if isinstance(exc_info, BaseException):
            exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
        elif exc_info is True:
            exc_info = sys.exc_info()
        if not exc_info or exc_info[0] is None:
            return ""

        exc_type, exc_value, exc_tb = exc_info
        frames = traceback.format_tb(exc_tb)
        if len(frames) > self.max_exception_frames:
            frames = ["  ... (truncated)\n", *frames[-self.max_exception_frames :]]
        body = "\n".join(_INDENT + line for line in "".join(frames).rstrip().split("\n"))

        name = exc_type.__name__
        if exc_type.__module__ not in (None, "builtins"):
            name = f"{exc_type.__module__}.{name}"

        if self.colors:
            return f"{_INDENT}{ANSI_ROSE}{name}: {exc_value}{ANSI_RESET}\n{ANSI_SLATE}{body}{ANSI_RESET}"
        return f"{_INDENT}{name}: {exc_value}\n{body}"
