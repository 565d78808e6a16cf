"""Parse JSX/TSX sources and lower them into the constructs the scanner uses.

tree-sitter yields a concrete syntax tree with hundreds of node types. The
scanner needs six constructs, so the tree is lowered once into a closed set
of dataclasses:

- ``FunctionDecl``: ``function Name() {...}``
- ``BoundFunction``: ``const Name = () => ...`` / ``const Name = function () {...}``
- ``DefaultExport``: ``export default Name`` / ``export default function Name``
- ``DestructuringCall``: ``const { a, b: c } = callee()``
- ``ImportDecl``: ``import x, { y as z } from 'source'``
- ``MarkupElement``: a JSX element or fragment, with its text runs, child
  elements and embedded expressions (``MarkupText``, ``MarkupElement``,
  ``MarkupEmbed``)

Byte offsets are kept on text runs so the scanner can splice replacements
into the original source without regenerating it.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from functools import cache
from pathlib import PurePath

from tree_sitter import Language, Node, Parser

from textmark.errors import SourceParseError

_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element"})
_TEXT_TYPES = frozenset({"jsx_text", "html_character_reference"})
_FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})
_FUNCTION_EXPRESSIONS = frozenset({"arrow_function", "function_expression", "function"})
_TAG_NAME_TYPES = frozenset({"identifier", "jsx_identifier"})


# =============================================================================
# Lowered constructs
# =============================================================================


@dataclass(frozen=True)
class Span:
    """Half-open byte range in the UTF-8 encoded source."""

    start: int
    end: int


@dataclass
class MarkupText:
    """A run of literal text between tags, HTML entities still encoded."""

    raw: str
    span: Span

    @property
    def value(self) -> str:
        return html.unescape(self.raw)


@dataclass
class MarkupElement:
    """A JSX element or fragment.

    ``tag`` is set only for plain identifier tags (``<main>``, ``<Card>``);
    member and namespaced tags (``<Foo.Bar>``, ``<svg:rect>``) and fragments
    leave it ``None``.
    """

    tag: str | None
    is_fragment: bool = False
    children: list[MarkupChild] = field(default_factory=list)


@dataclass
class MarkupEmbed:
    """Markup found inside an expression container or an attribute value.

    Its elements have an element ancestor but no element *parent*.
    """

    elements: list[MarkupElement] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    returns_markup: bool


@dataclass(frozen=True)
class BoundFunction:
    name: str
    returns_markup: bool


@dataclass(frozen=True)
class DefaultExport:
    name: str


@dataclass(frozen=True)
class DestructuringCall:
    """``const { prop: local } = callee()``; ``bindings`` maps prop -> local name."""

    callee: str
    bindings: dict[str, str]


@dataclass(frozen=True)
class ImportDecl:
    source: str
    local_names: tuple[str, ...]


MarkupChild = MarkupText | MarkupElement | MarkupEmbed
SourceNode = FunctionDecl | BoundFunction | DefaultExport | DestructuringCall | ImportDecl | MarkupElement


@dataclass
class SourceModule:
    """A parsed file: its bytes, lowered constructs in document order and the import point."""

    file: str
    data: bytes
    nodes: list[SourceNode]
    prologue_end: int = 0


# =============================================================================
# Parsing
# =============================================================================


@cache
def _language(suffix: str) -> Language:
    import tree_sitter_javascript as ts_javascript
    import tree_sitter_typescript as ts_typescript

    if suffix == ".tsx":
        return Language(ts_typescript.language_tsx())
    return Language(ts_javascript.language())


def parse_module(file: str, source: str) -> SourceModule:
    """Parse ``source`` and lower it.

    Raises:
        SourceParseError: if the tree contains syntax errors.
    """
    data = source.encode("utf-8")
    # Parsers are not shared between threads; languages are immutable and cached.
    parser = Parser(_language(PurePath(file).suffix.lower()))
    tree = parser.parse(data)
    root = tree.root_node
    if root.has_error:
        raise SourceParseError(file, _describe_error(root))

    lowering = _Lowering(data)
    return SourceModule(
        file=file,
        data=data,
        nodes=lowering.lower(root),
        prologue_end=_prologue_end(root),
    )


def _describe_error(root: Node) -> str:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point
            return f"syntax error at line {row + 1}, column {column + 1}"
        stack.extend(reversed(node.children))
    return "syntax error"


def _prologue_end(root: Node) -> int:
    """Byte offset just past a hashbang line and leading directives ('use client')."""
    end = 0
    for child in root.named_children:
        if child.type == "hash_bang_line":
            end = child.end_byte
        elif child.type == "comment":
            continue
        elif child.type == "expression_statement" and _is_directive(child):
            end = child.end_byte
        else:
            break
    return end


def _is_directive(statement: Node) -> bool:
    named = [c for c in statement.named_children if c.type != "comment"]
    return len(named) == 1 and named[0].type == "string"


def _first_named(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _unwrap(node: Node | None) -> Node | None:
    while node is not None and node.type == "parenthesized_expression":
        node = _first_named(node)
    return node


def _is_markup(node: Node | None) -> bool:
    return node is not None and node.type in _ELEMENT_TYPES


# =============================================================================
# Lowering
# =============================================================================


class _Lowering:
    def __init__(self, data: bytes) -> None:
        self.data = data

    def text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8")

    def lower(self, root: Node) -> list[SourceNode]:
        nodes: list[SourceNode] = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in _ELEMENT_TYPES:
                nodes.append(self.element(node))
                continue
            nodes.extend(self.construct(node))
            if node.type == "import_statement":
                continue
            stack.extend(reversed(node.children))
        return nodes

    def construct(self, node: Node) -> list[SourceNode]:
        if node.type in _FUNCTION_DECLARATIONS:
            name = node.child_by_field_name("name")
            if name is None:
                return []
            return [FunctionDecl(self.text(name), self.returns_markup(node))]
        if node.type == "variable_declarator":
            return self.declarator(node)
        if node.type == "export_statement":
            return self.default_export(node)
        if node.type == "import_statement":
            return self.import_decl(node)
        return []

    def returns_markup(self, function: Node) -> bool:
        body = function.child_by_field_name("body")
        if body is None:
            return False
        if body.type != "statement_block":
            return _is_markup(_unwrap(body))
        for statement in body.named_children:
            if statement.type == "return_statement" and _is_markup(_unwrap(_first_named(statement))):
                return True
        return False

    def declarator(self, node: Node) -> list[SourceNode]:
        name = node.child_by_field_name("name")
        value = _unwrap(node.child_by_field_name("value"))
        if name is None or value is None:
            return []

        if name.type == "identifier" and value.type in _FUNCTION_EXPRESSIONS:
            return [BoundFunction(self.text(name), self.returns_markup(value))]

        if name.type == "object_pattern" and value.type == "call_expression":
            callee = value.child_by_field_name("function")
            if callee is not None and callee.type == "identifier":
                return [DestructuringCall(self.text(callee), self.pattern_bindings(name))]
        return []

    def pattern_bindings(self, pattern: Node) -> dict[str, str]:
        bindings: dict[str, str] = {}
        for prop in pattern.named_children:
            if prop.type == "shorthand_property_identifier_pattern":
                bindings[self.text(prop)] = self.text(prop)
            elif prop.type == "object_assignment_pattern":
                left = prop.child_by_field_name("left")
                if left is not None:
                    bindings[self.text(left)] = self.text(left)
            elif prop.type == "pair_pattern":
                key = prop.child_by_field_name("key")
                local = prop.child_by_field_name("value")
                if local is not None and local.type == "assignment_pattern":
                    local = local.child_by_field_name("left")
                if key is not None and local is not None and local.type == "identifier":
                    bindings[self.text(key).strip("'\"")] = self.text(local)
        return bindings

    def default_export(self, node: Node) -> list[SourceNode]:
        if not any(child.type == "default" for child in node.children):
            return []
        declaration = node.child_by_field_name("declaration")
        if declaration is not None and declaration.type in _FUNCTION_DECLARATIONS:
            name = declaration.child_by_field_name("name")
            return [DefaultExport(self.text(name))] if name is not None else []

        value = _unwrap(node.child_by_field_name("value"))
        if value is None:
            return []
        if value.type == "identifier":
            return [DefaultExport(self.text(value))]
        if value.type in _FUNCTION_EXPRESSIONS:
            name = value.child_by_field_name("name")
            if name is not None:
                return [DefaultExport(self.text(name))]
        return []

    def import_decl(self, node: Node) -> list[SourceNode]:
        source = node.child_by_field_name("source")
        names: list[str] = []
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    names.append(self.text(part))
                elif part.type == "namespace_import":
                    names.extend(self.text(c) for c in part.named_children if c.type == "identifier")
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type != "import_specifier":
                            continue
                        local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                        if local is not None:
                            names.append(self.text(local))
        source_text = self.text(source)[1:-1] if source is not None else ""
        return [ImportDecl(source_text, tuple(names))]

    def element(self, node: Node) -> MarkupElement:
        if node.type == "jsx_self_closing_element":
            tag, is_fragment = self.tag(node)
            element = MarkupElement(tag, is_fragment)
            self.attribute_markup(node, element)
            return element

        opening = next(c for c in node.named_children if c.type == "jsx_opening_element")
        tag, is_fragment = self.tag(opening)
        element = MarkupElement(tag, is_fragment)
        self.attribute_markup(opening, element)

        run: list[Node] = []
        for child in node.named_children:
            if child.type in _TEXT_TYPES:
                run.append(child)
                continue
            if run:
                element.children.append(self.text_run(run))
                run = []
            if child.type in _ELEMENT_TYPES:
                element.children.append(self.element(child))
            elif child.type == "jsx_expression":
                embed = self.embed(child)
                if embed.elements:
                    element.children.append(embed)
        if run:
            element.children.append(self.text_run(run))
        return element

    def tag(self, opening: Node) -> tuple[str | None, bool]:
        name = opening.child_by_field_name("name")
        if name is None:
            return None, True
        if name.type in _TAG_NAME_TYPES:
            return self.text(name), False
        return None, False

    def attribute_markup(self, opening: Node, element: MarkupElement) -> None:
        for attribute in opening.named_children:
            if attribute.type in ("jsx_attribute", "jsx_expression"):
                embed = self.embed(attribute)
                if embed.elements:
                    element.children.append(embed)

    def embed(self, node: Node) -> MarkupEmbed:
        embed = MarkupEmbed()
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            if current.type in _ELEMENT_TYPES:
                embed.elements.append(self.element(current))
                continue
            stack.extend(reversed(current.children))
        return embed

    def text_run(self, run: list[Node]) -> MarkupText:
        span = Span(run[0].start_byte, run[-1].end_byte)
        return MarkupText(self.data[span.start : span.end].decode("utf-8"), span)
