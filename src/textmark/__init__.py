"""textmark: build-time extraction and runtime lookup of user-facing text.

A scanner rewrites literal text in JSX/TSX sources into keyed lookup calls
and logs each string to a shared sink; a consolidator folds the sink into the
published catalog after the build; a resolver answers lookups at render time.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("textmark")
except PackageNotFoundError:
    __version__ = "0.0.0"

from textmark.consolidate import CatalogConsolidator, consolidate_project
from textmark.identity import identify
from textmark.models import ExtractedString, Locale, StringContext
from textmark.pseudo import pseudolocalize
from textmark.resolver import Resolver, get_locale, locale_scope, resolve, set_locale, t
from textmark.scanner import TextScanner, transform_source

__all__ = [
    "CatalogConsolidator",
    "ExtractedString",
    "Locale",
    "Resolver",
    "StringContext",
    "TextScanner",
    "__version__",
    "consolidate_project",
    "get_locale",
    "identify",
    "locale_scope",
    "pseudolocalize",
    "resolve",
    "set_locale",
    "t",
    "transform_source",
]
