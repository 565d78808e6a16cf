"""Text extraction pass over JSX/TSX sources.

For one file: find literal text inside markup, give each string a key,
append an extraction record to the sink and replace the text with a lookup
call (``{t('a1b2c3d4e5f60718')}``). Replacements are spliced into the
original bytes, so everything outside the replaced text keeps its formatting.

The pass is best-effort: any failure returns the source unchanged.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from textmark.config import Settings, settings
from textmark.errors import SourceParseError
from textmark.identity import identify_in
from textmark.models import DEFAULT_LOCALE, HUMAN_LOCALES, PSEUDO_LOCALE, ExtractedString, StringContext
from textmark.paths import find_monorepo_root, find_project_root, relative_source_path, skip_reason
from textmark.pseudo import pseudolocalize
from textmark.sink import ExtractionSink
from textmark.syntax import (
    BoundFunction,
    DefaultExport,
    DestructuringCall,
    FunctionDecl,
    ImportDecl,
    MarkupElement,
    MarkupEmbed,
    MarkupText,
    SourceNode,
    parse_module,
)

log = structlog.get_logger()

DEFAULT_COMPONENT = "default"
ROOT_PATH = "root"
PATH_SEPARATOR = " > "
LOCALE_BINDING = "locale"


@dataclass
class ScanResult:
    """Outcome of scanning one file."""

    code: str
    records: list[ExtractedString] = field(default_factory=list)
    skipped: str | None = None

    @property
    def changed(self) -> bool:
        return bool(self.records)


# =============================================================================
# Module-level analysis
# =============================================================================


def find_component_name(nodes: list[SourceNode]) -> str:
    """First function returning markup; a named default export overrides it."""
    component: str | None = None
    exported: str | None = None
    for node in nodes:
        if isinstance(node, (FunctionDecl, BoundFunction)):
            if component is None and node.returns_markup:
                component = node.name
        elif isinstance(node, DefaultExport):
            exported = node.name
        elif isinstance(node, (DestructuringCall, ImportDecl, MarkupElement)):
            continue
        else:
            raise TypeError(f"Unhandled syntax node: {node!r}")
    return exported or component or DEFAULT_COMPONENT


def find_locale_binding(nodes: list[SourceNode], hook: str) -> str | None:
    """Local name bound to ``locale`` in ``const { locale } = <hook>()``, if any."""
    for node in nodes:
        if isinstance(node, DestructuringCall) and node.callee == hook:
            local = node.bindings.get(LOCALE_BINDING)
            if local:
                return local
    return None


def imports_binding(nodes: list[SourceNode], name: str) -> bool:
    return any(isinstance(node, ImportDecl) and name in node.local_names for node in nodes)


def is_meaningful(text: str) -> bool:
    trimmed = text.strip()
    return bool(trimmed) and trimmed != "\n"


# =============================================================================
# Structural paths
# =============================================================================


def iter_markup_texts(nodes: list[SourceNode]) -> Iterator[tuple[MarkupText, str]]:
    """Yield every markup text run with its structural path, depth-first."""
    for node in nodes:
        if isinstance(node, MarkupElement):
            yield from _walk(node, (node.tag,) if node.tag else ())


def _walk(element: MarkupElement, trail: tuple[str, ...]) -> Iterator[tuple[MarkupText, str]]:
    same_tag: Counter[str] = Counter()
    if not element.is_fragment:
        same_tag.update(
            child.tag for child in element.children if isinstance(child, MarkupElement) and child.tag
        )
    seen: Counter[str] = Counter()

    for child in element.children:
        if isinstance(child, MarkupText):
            yield child, PATH_SEPARATOR.join(trail) or ROOT_PATH
        elif isinstance(child, MarkupElement):
            segment: tuple[str, ...] = ()
            if child.tag and same_tag[child.tag] > 1:
                seen[child.tag] += 1
                segment = (f"{child.tag}:nth-child({seen[child.tag]})",)
            elif child.tag:
                segment = (child.tag,)
            yield from _walk(child, trail + segment)
        elif isinstance(child, MarkupEmbed):
            for nested in child.elements:
                yield from _walk(nested, trail + ((nested.tag,) if nested.tag else ()))
        else:
            raise TypeError(f"Unhandled markup node: {child!r}")


# =============================================================================
# Rewriting
# =============================================================================


def extract_record(text: str, context: StringContext) -> ExtractedString:
    """Build the sink record for ``text`` at ``context``."""
    translations = {DEFAULT_LOCALE.value: text}
    translations.update({locale.value: "" for locale in HUMAN_LOCALES})
    translations[PSEUDO_LOCALE.value] = pseudolocalize(text)
    return ExtractedString(
        source_text=text,
        key=identify_in(text, context),
        translations=translations,
        context=context,
    )


def _trimmed_span(text: MarkupText) -> tuple[int, int]:
    raw = text.raw
    leading = raw[: len(raw) - len(raw.lstrip())]
    trailing = raw[len(raw.rstrip()) :]
    return (
        text.span.start + len(leading.encode("utf-8")),
        text.span.end - len(trailing.encode("utf-8")),
    )


def apply_edits(data: bytes, edits: list[tuple[int, int, str]]) -> str:
    """Apply non-overlapping ``(start, end, replacement)`` byte edits."""
    buffer = bytearray(data)
    for start, end, replacement in sorted(edits, key=lambda e: (e[0], e[1]), reverse=True):
        buffer[start:end] = replacement.encode("utf-8")
    return buffer.decode("utf-8")


class TextScanner:
    """Extracts markup text from one source file per call."""

    def __init__(self, config: Settings | None = None, *, sink: ExtractionSink | None = None) -> None:
        self.settings = config or settings
        self._sink = sink

    def transform(self, resource_path: str | Path, source: str) -> str:
        """Loader contract: source in, transformed source out."""
        return self.scan(resource_path, source).code

    def scan(self, resource_path: str | Path, source: str) -> ScanResult:
        path = Path(resource_path).absolute()
        reason = skip_reason(path, self.settings)
        if reason:
            return ScanResult(code=source, skipped=reason)

        try:
            project_root = self._project_root(path)
            relative = relative_source_path(path, find_monorepo_root(project_root))
            if relative is None:
                log.debug("Skipping file outside source tree", file=str(path))
                return ScanResult(code=source, skipped="outside source tree")

            result = self.rewrite(relative, source)
            if result.records:
                sink = self._sink or ExtractionSink(self.settings.sink_path(project_root))
                sink.append(result.records)
            return result
        except SourceParseError as e:
            log.warning("Skipping unparseable source", file=str(path), reason=e.details["reason"])
            return ScanResult(code=source, skipped="parse failure")
        except Exception:
            log.exception("Text extraction failed", file=str(path))
            return ScanResult(code=source, skipped="error")

    def rewrite(self, file: str, source: str) -> ScanResult:
        """Rewrite ``source`` as if it lived at monorepo-relative ``file``. No I/O.

        Raises:
            SourceParseError: if ``source`` does not parse.
        """
        module = parse_module(file, source)
        component = find_component_name(module.nodes)
        locale_name = find_locale_binding(module.nodes, self.settings.locale_hook)

        records: list[ExtractedString] = []
        edits: list[tuple[int, int, str]] = []
        for text, structural_path in iter_markup_texts(module.nodes):
            value = text.value.strip()
            if not is_meaningful(value):
                continue
            record = extract_record(
                value, StringContext(file=file, component=component, path=structural_path)
            )
            records.append(record)
            start, end = _trimmed_span(text)
            edits.append((start, end, self._lookup_call(record.key, locale_name)))

        if not edits:
            return ScanResult(code=source)

        if not imports_binding(module.nodes, self.settings.lookup_function):
            edits.append((module.prologue_end, module.prologue_end, self._import(module.prologue_end)))

        log.debug("Extracted strings", file=file, component=component, count=len(records))
        return ScanResult(code=apply_edits(module.data, edits), records=records)

    def _project_root(self, path: Path) -> Path:
        if self.settings.project_root is not None:
            return self.settings.project_root.absolute()
        return find_project_root(path)

    def _lookup_call(self, key: str, locale_name: str | None) -> str:
        args = f"'{key}', {locale_name}" if locale_name else f"'{key}'"
        return f"{{{self.settings.lookup_function}({args})}}"

    def _import(self, offset: int) -> str:
        fn = self.settings.lookup_function
        statement = f"import {{ {fn} }} from '{self.settings.runtime_module}';"
        return f"\n{statement}" if offset else f"{statement}\n"


def transform_source(resource_path: str | Path, source: str, *, config: Settings | None = None) -> str:
    """Run the extraction pass over one file with default wiring."""
    return TextScanner(config).transform(resource_path, source)
