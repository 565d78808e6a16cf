"""Runtime lookups: key + locale -> display text.

Fallback order for a known key: requested locale, then the default locale,
then the source text. Unknown keys render as ``[<first 8 key chars>]`` and
never raise, which matters on the first build when no catalog exists yet.

The current locale is a context variable, so every thread and every asyncio
task sees its own value. ``locale_scope`` sets it for a block (one request or
one render) and restores the previous value afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path

import structlog

from textmark.catalog import PLACEHOLDER_KEY_LENGTH, CatalogStore
from textmark.config import settings
from textmark.errors import CatalogIOError, LookupMissError, UnknownLocaleError
from textmark.models import DEFAULT_LOCALE, Catalog, ExtractedString, Locale

log = structlog.get_logger()

_current_locale: ContextVar[Locale] = ContextVar("textmark_locale", default=DEFAULT_LOCALE)


def _parse_locale(locale: str) -> Locale:
    try:
        return Locale(locale)
    except ValueError as e:
        raise UnknownLocaleError(locale, [item.value for item in Locale]) from e


def _coerce_locale(locale: str) -> Locale:
    """Supported locale for ``locale``; unknown values (stale cookies, typos) become the default."""
    try:
        return _parse_locale(locale)
    except UnknownLocaleError as e:
        log.warning("Unknown locale, keeping default", **e.details)
        return DEFAULT_LOCALE


def set_locale(locale: str) -> None:
    """Set the current locale for this thread / task.

    An unsupported locale selects the default locale instead of raising.
    """
    _current_locale.set(_coerce_locale(locale))


def get_locale() -> Locale:
    return _current_locale.get()


@contextmanager
def locale_scope(locale: str) -> Iterator[Locale]:
    """Use ``locale`` as the current locale inside the block."""
    token = _current_locale.set(_coerce_locale(locale))
    try:
        yield _current_locale.get()
    finally:
        _current_locale.reset(token)


def placeholder(key: str) -> str:
    return f"[{key[:PLACEHOLDER_KEY_LENGTH]}]"


class Resolver:
    """Answers lookups against one catalog.

    Built either from an in-memory catalog or from a ``CatalogStore``; in the
    latter case the catalog is read on first use and re-read until the file
    exists.
    """

    def __init__(self, catalog: Catalog | None = None, *, store: CatalogStore | None = None) -> None:
        self._catalog = catalog
        self._store = store

    @property
    def catalog(self) -> Catalog:
        if self._catalog is not None:
            return self._catalog
        if self._store is None or not self._store.exists():
            return {}
        try:
            self._catalog = self._store.load()
        except CatalogIOError as e:
            log.warning("Cannot load catalog, lookups will use placeholders", **e.details)
            self._catalog = {}
        return self._catalog

    def reload(self) -> None:
        """Drop the cached catalog; the next lookup reads the store again."""
        if self._store is not None:
            self._catalog = None

    def lookup(self, key: str) -> ExtractedString:
        """Return the catalog entry for ``key``.

        Raises:
            LookupMissError: if the key is not in the catalog.
        """
        entry = self.catalog.get(key)
        if entry is None:
            raise LookupMissError(key)
        return entry

    def resolve(self, key: str, locale: str | None = None) -> str:
        try:
            entry = self.lookup(key)
        except LookupMissError:
            log.debug("String not found", key=key)
            return placeholder(key)

        requested = locale or get_locale()
        translation = entry.translation(requested)
        if translation:
            return translation
        return entry.translation(DEFAULT_LOCALE) or entry.source_text


_default_resolver: Resolver | None = None


def get_resolver() -> Resolver:
    """Process-wide resolver reading the catalog under the configured project root."""
    global _default_resolver
    if _default_resolver is None:
        project_root = settings.project_root or Path.cwd()
        _default_resolver = Resolver(store=CatalogStore.for_project(project_root, settings))
    return _default_resolver


def use_resolver(resolver: Resolver | None) -> None:
    """Replace the process-wide resolver (``None`` rebuilds it from settings)."""
    global _default_resolver
    _default_resolver = resolver


def resolve(key: str, locale: str | None = None) -> str:
    """Resolve ``key`` with the process-wide resolver."""
    return get_resolver().resolve(key, locale)


# Name used by rewritten sources
t = resolve
