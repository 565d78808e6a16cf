"""Exceptions raised inside the textmark extraction pipeline.

None of these escape the public entry points: the scanner, the consolidator
and the resolver catch them and degrade to a no-op, a skipped line or a
placeholder. They exist so internal layers can signal *what* went wrong.
"""


class TextmarkError(Exception):
    """Base exception for all textmark errors."""

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceParseError(TextmarkError):
    """Raised when a source file cannot be parsed into a syntax tree."""

    def __init__(self, file: str, reason: str = "syntax error") -> None:
        super().__init__(
            f"Cannot parse {file}: {reason}",
            details={"file": file, "reason": reason},
        )


class CatalogIOError(TextmarkError):
    """Raised when the sink or catalog file cannot be read or written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Catalog I/O failed for {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SinkRecordError(TextmarkError):
    """Raised when a sink line is not a valid extraction record."""

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(
            f"Invalid sink record on line {line_number}: {reason}",
            details={"line_number": line_number, "reason": reason},
        )


class LookupMissError(TextmarkError):
    """Raised when a key is not present in the catalog."""

    def __init__(self, key: str) -> None:
        super().__init__(f"String not found for key: {key}", details={"key": key})


class UnknownLocaleError(TextmarkError):
    """Raised when a locale outside the supported set is selected."""

    def __init__(self, locale: str, allowed: list[str] | None = None) -> None:
        allowed_str = f" Allowed: {allowed}" if allowed else ""
        super().__init__(
            f"Unknown locale: {locale}.{allowed_str}",
            details={"locale": locale, "allowed_locales": allowed or []},
        )
