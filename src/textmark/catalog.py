"""Published catalog: JSON data file plus a generated standalone lookup module.

The JSON file is the only thing read back (by the consolidator and the
resolver). The JavaScript module is derived from the same data for consumers
that need lookups without the Python resolver, and is never parsed.

Both are rendered deterministically: same catalog in, same bytes out.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from textmark.config import Settings
from textmark.errors import CatalogIOError
from textmark.models import DEFAULT_LOCALE, Catalog, ExtractedString, Locale

PLACEHOLDER_KEY_LENGTH = 8

_LOOKUP_MODULE_HEADER = """\
/**
 * Extracted strings database
 * Generated automatically by textmark
 * DO NOT EDIT MANUALLY
 */

const strings = """

_LOOKUP_MODULE_FOOTER = f"""\
;

const DEFAULT_LOCALE = '{DEFAULT_LOCALE.value}';

/**
 * Get text by hash with locale support
 * @param {{string}} hash - The hash of the string
 * @param {{string}} locale - The locale to use ({', '.join(locale.value for locale in Locale)})
 * @returns {{string}} The translated text
 */
function t(hash, locale = DEFAULT_LOCALE) {{
  const entry = strings[hash];
  if (!entry) {{
    return `[${{hash.substring(0, {PLACEHOLDER_KEY_LENGTH})}}]`;
  }}

  const translation = entry.translations[locale];
  if (!translation) {{
    return entry.translations[DEFAULT_LOCALE] || entry.text;
  }}

  return translation;
}}

module.exports = strings;
module.exports.t = t;
"""


def _atomic_write(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then rename over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = None
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        os.write(fd, content.encode("utf-8"))
        os.close(fd)
        fd = None
        os.replace(tmp_path, path)
        tmp_path = None
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)


class CatalogStore:
    """Reads and writes the published catalog."""

    def __init__(
        self,
        catalog_path: Path,
        lookup_module_path: Path | None = None,
        *,
        sort_keys: bool = True,
    ) -> None:
        self.catalog_path = Path(catalog_path)
        self.lookup_module_path = Path(lookup_module_path) if lookup_module_path else None
        self.sort_keys = sort_keys

    @classmethod
    def for_project(cls, project_root: Path, config: Settings) -> CatalogStore:
        return cls(
            config.catalog_file(project_root),
            config.lookup_module_file(project_root),
            sort_keys=config.sort_catalog_keys,
        )

    def exists(self) -> bool:
        return self.catalog_path.is_file()

    def load(self) -> Catalog:
        """Load the catalog; a missing file is an empty catalog.

        Raises:
            CatalogIOError: if the file exists but cannot be read or parsed.
        """
        if not self.exists():
            return {}
        try:
            data = json.loads(self.catalog_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CatalogIOError(str(self.catalog_path), e.strerror or str(e)) from e
        except ValueError as e:
            raise CatalogIOError(str(self.catalog_path), f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CatalogIOError(str(self.catalog_path), "top-level value is not an object")

        try:
            return {key: ExtractedString.model_validate(entry) for key, entry in data.items()}
        except ValidationError as e:
            raise CatalogIOError(
                str(self.catalog_path), f"{e.error_count()} invalid entries"
            ) from e

    def save(self, catalog: Catalog) -> None:
        """Write the JSON catalog, then the lookup module.

        Raises:
            CatalogIOError: if either file cannot be written.
        """
        data = self.render(catalog)
        try:
            _atomic_write(self.catalog_path, data)
            if self.lookup_module_path is not None:
                _atomic_write(self.lookup_module_path, self.render_lookup_module(catalog))
        except OSError as e:
            raise CatalogIOError(str(self.catalog_path), e.strerror or str(e)) from e

    def _ordered(self, catalog: Catalog) -> dict[str, dict[str, object]]:
        keys = sorted(catalog) if self.sort_keys else list(catalog)
        return {key: catalog[key].to_record() for key in keys}

    def render(self, catalog: Catalog) -> str:
        return json.dumps(self._ordered(catalog), indent=2, ensure_ascii=False) + "\n"

    def render_lookup_module(self, catalog: Catalog) -> str:
        data = json.dumps(self._ordered(catalog), indent=2, ensure_ascii=False)
        return f"{_LOOKUP_MODULE_HEADER}{data}{_LOOKUP_MODULE_FOOTER}"


def catalog_stats(catalog: Catalog) -> dict[str, dict[str, float]]:
    """Per-locale totals: translated, pending and coverage percentage."""
    total = len(catalog)
    stats: dict[str, dict[str, float]] = {}
    for locale in Locale:
        translated = sum(1 for entry in catalog.values() if entry.translation(locale.value))
        stats[locale.value] = {
            "total": total,
            "translated": translated,
            "pending": total - translated,
            "coverage": round(translated / total * 100, 1) if total else 0.0,
        }
    return stats
