"""Post-build consolidation of the extraction sink into the published catalog.

Rules:
- the latest sink record for a key is authoritative for text, context and the
  default-locale value; the pseudo value is regenerated from the text;
- a non-empty human translation in the prior catalog is carried forward
  unchanged for every key that is still extracted;
- keys missing from the sink are dropped (or kept and marked stale when
  pruning is disabled).

Must run after the scanning wave finished and never concurrently with itself.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from textmark.catalog import CatalogStore
from textmark.config import Settings
from textmark.errors import CatalogIOError
from textmark.models import DEFAULT_LOCALE, HUMAN_LOCALES, PSEUDO_LOCALE, Catalog, ExtractedString
from textmark.pseudo import pseudolocalize
from textmark.sink import ExtractionSink

log = structlog.get_logger()

_GENERATED_LOCALES = frozenset({DEFAULT_LOCALE.value, PSEUDO_LOCALE.value})


@dataclass
class ConsolidationReport:
    """What a consolidation run did."""

    ran: bool = True
    strings: int = 0
    preserved: int = 0
    dropped: int = 0
    stale: int = 0
    skipped_lines: int = 0


def merge_records(
    records: Iterable[ExtractedString],
    prior: Catalog,
    *,
    prune_stale: bool = True,
) -> tuple[Catalog, ConsolidationReport]:
    """Merge fresh sink records with the prior catalog. Pure, no I/O."""
    latest: dict[str, ExtractedString] = {}
    sink_translations: dict[str, dict[str, str]] = {}
    for record in records:
        latest[record.key] = record
        bucket = sink_translations.setdefault(record.key, {})
        for locale, value in record.translations.items():
            if locale not in _GENERATED_LOCALES and value:
                bucket[locale] = value

    report = ConsolidationReport()
    catalog: Catalog = {}
    for key, record in latest.items():
        translations = {
            DEFAULT_LOCALE.value: record.source_text,
            PSEUDO_LOCALE.value: pseudolocalize(record.source_text),
        }
        for locale in HUMAN_LOCALES:
            translations[locale.value] = ""
        translations.update(sink_translations[key])

        previous = prior.get(key)
        kept = {
            locale: value
            for locale, value in (previous.translations.items() if previous else ())
            if locale not in _GENERATED_LOCALES and value
        }
        if kept:
            translations.update(kept)
            report.preserved += 1

        catalog[key] = ExtractedString(
            source_text=record.source_text,
            key=key,
            translations=translations,
            context=record.context,
        )

    for key, previous in prior.items():
        if key in catalog:
            continue
        if prune_stale:
            report.dropped += 1
        else:
            translations = dict(previous.translations)
            translations[PSEUDO_LOCALE.value] = pseudolocalize(previous.source_text)
            catalog[key] = previous.model_copy(update={"stale": True, "translations": translations})
            report.stale += 1

    report.strings = len(catalog)
    return catalog, report


class CatalogConsolidator:
    """Reads the sink, merges it into the catalog, publishes, clears the sink."""

    def __init__(self, sink: ExtractionSink, store: CatalogStore, *, prune_stale: bool = True) -> None:
        self.sink = sink
        self.store = store
        self.prune_stale = prune_stale

    @classmethod
    def for_project(cls, project_root: Path, config: Settings) -> CatalogConsolidator:
        return cls(
            ExtractionSink(config.sink_path(project_root)),
            CatalogStore.for_project(project_root, config),
            prune_stale=config.prune_stale,
        )

    def consolidate(self) -> ConsolidationReport:
        """Run one consolidation. Never raises; failures leave the catalog as it was."""
        try:
            return self._consolidate()
        except Exception:
            log.exception("Catalog consolidation failed", sink=str(self.sink.path))
            return ConsolidationReport(ran=False)

    def _consolidate(self) -> ConsolidationReport:
        if not self.sink.exists():
            log.warning("No extraction sink found, catalog left unchanged", sink=str(self.sink.path))
            return ConsolidationReport(ran=False)

        try:
            contents = self.sink.read()
        except CatalogIOError as e:
            log.warning("Cannot read extraction sink, catalog left unchanged", **e.details)
            return ConsolidationReport(ran=False)

        for error in contents.errors:
            log.warning("Skipping corrupt sink line", **error.details)

        catalog, report = merge_records(
            contents.records, self._load_prior(), prune_stale=self.prune_stale
        )
        report.skipped_lines = len(contents.errors)

        try:
            self.store.save(catalog)
        except CatalogIOError as e:
            log.warning("Cannot write catalog, sink kept for the next run", **e.details)
            report.ran = False
            return report

        self.sink.clear()
        log.info(
            "Consolidated extracted strings",
            strings=report.strings,
            preserved=report.preserved,
            dropped=report.dropped,
            stale=report.stale,
            skipped_lines=report.skipped_lines,
            catalog=str(self.store.catalog_path),
        )
        return report

    def _load_prior(self) -> Catalog:
        try:
            return self.store.load()
        except CatalogIOError as e:
            # Set aside; its translations can still be recovered by hand
            backup = self.store.catalog_path.with_name(self.store.catalog_path.name + ".corrupt")
            try:
                os.replace(self.store.catalog_path, backup)
            except OSError:
                backup = None
            log.warning(
                "Cannot read prior catalog, starting empty",
                backup=str(backup) if backup else None,
                **e.details,
            )
            return {}


def consolidate_project(project_root: Path, config: Settings) -> ConsolidationReport:
    """Build-completion hook: consolidate the sink under ``project_root``."""
    return CatalogConsolidator.for_project(project_root, config).consolidate()
