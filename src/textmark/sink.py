"""Append-only extraction log shared by concurrent scanner invocations.

Each record is one JSON line. A scanner invocation writes all of its lines
with a single ``O_APPEND`` write, so lines from parallel scanners interleave
but are never split. A crash mid-write leaves at most a truncated last line,
which readers skip.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from textmark.errors import CatalogIOError, SinkRecordError
from textmark.models import ExtractedString


@dataclass
class SinkContents:
    """Records parsed from the sink plus the lines that had to be skipped."""

    records: list[ExtractedString] = field(default_factory=list)
    errors: list[SinkRecordError] = field(default_factory=list)


def encode_record(record: ExtractedString) -> str:
    """Serialize one record as a single sink line (newline included)."""
    return record.model_dump_json(by_alias=True, exclude_none=True) + "\n"


def decode_record(line: bytes, line_number: int) -> ExtractedString:
    """Parse one sink line.

    Raises:
        SinkRecordError: if the line is not UTF-8 or not a valid record.
    """
    try:
        return ExtractedString.model_validate_json(line.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise SinkRecordError(line_number, f"invalid UTF-8: {e.reason}") from e
    except ValidationError as e:
        raise SinkRecordError(line_number, f"{e.error_count()} validation error(s)") from e


class ExtractionSink:
    """File-backed, line-delimited extraction log."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def append(self, records: Iterable[ExtractedString]) -> int:
        """Append ``records`` in one write call. Returns the number written."""
        lines = [encode_record(record) for record in records]
        if not lines:
            return 0

        self.path.parent.mkdir(parents=True, exist_ok=True)
        view = memoryview("".join(lines).encode("utf-8"))
        fd = os.open(self.path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
        try:
            while view:
                written = os.write(fd, view)
                view = view[written:]
        finally:
            os.close(fd)
        return len(lines)

    def read(self) -> SinkContents:
        """Parse every line; corrupt lines are collected, not raised.

        Raises:
            CatalogIOError: if the sink file is missing or unreadable.
        """
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise CatalogIOError(str(self.path), e.strerror or str(e)) from e

        contents = SinkContents()
        for line_number, line in enumerate(raw.split(b"\n"), start=1):
            if not line.strip():
                continue
            try:
                contents.records.append(decode_record(line, line_number))
            except SinkRecordError as e:
                contents.errors.append(e)
        return contents

    def clear(self) -> None:
        """Remove the sink so the next build starts empty."""
        self.path.unlink(missing_ok=True)
