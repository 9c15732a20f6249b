"""TypeScript syntax provider backed by tree-sitter.

Parses ``.ts``/``.tsx`` sources with the tree-sitter TypeScript grammars and
converts the top-level interface declarations into the tagged view from
``tspi.syntax.nodes``. The conversion stays syntactic: it never resolves a
name, and grammar constructs without a supported shape are handed on as
``OTHER`` nodes carrying the grammar kind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from tspi.errors import DepthExceeded, ParseUnavailable, SourceSpan
from tspi.syntax.nodes import (
    DeclarationNode,
    LiteralNode,
    LiteralTag,
    MemberNode,
    MemberTag,
    NameNode,
    NameTag,
    ParameterNode,
    TypeNode,
    TypeTag,
)

logger = logging.getLogger(__name__)

TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

# Statements that may wrap a top-level interface (export / declare).
_WRAPPER_KINDS = {"export_statement", "ambient_declaration"}

_LITERAL_TAGS = {
    "true": LiteralTag.TRUE,
    "false": LiteralTag.FALSE,
    "null": LiteralTag.NULL,
    "undefined": LiteralTag.UNDEFINED,
}

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_LINE_TERMINATORS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


class TypeScriptSyntaxProvider:
    """Lists the interface declarations of TypeScript source files.

    Parameters
    ----------
    tsx : bool | None
        Force the TSX grammar on or off. When *None* the grammar is chosen
        from the file suffix.
    """

    def __init__(self, tsx: bool | None = None) -> None:
        self.tsx = tsx
        self._parsers: dict[bool, Parser] = {}

    def parse_file(self, path: str | Path) -> list[DeclarationNode]:
        path = Path(path)
        try:
            source = path.read_bytes()
        except OSError as e:
            raise ParseUnavailable(
                f"Could not read {path}: {e.strerror or e}", path=path
            ) from e

        tsx = self.tsx if self.tsx is not None else path.suffix.lower() == ".tsx"
        return self.parse_source(source, path=str(path), tsx=tsx)

    def parse_source(
        self, source: str | bytes, path: str = "<source>", tsx: bool = False
    ) -> list[DeclarationNode]:
        """Parse source text and return its top-level interfaces in order."""
        root = self._parse(source, path, tsx)
        try:
            declarations = [_declaration(node) for node in _top_level_interfaces(root)]
        except RecursionError:
            raise DepthExceeded("Type nesting too deep to parse", kind=root.type) from None

        logger.debug("Found %d interface declaration(s) in %s", len(declarations), path)
        return declarations

    def parse_type_expression(self, text: str) -> TypeNode:
        """Parse a standalone type expression such as ``string[] | null``."""
        root = self._parse(f"type __expression = {text};", "<type expression>", False)
        for node in _named(root):
            if node.type == "type_alias_declaration":
                value = node.child_by_field_name("value")
                if value is not None:
                    return _type(value)
        raise ParseUnavailable(f"Not a type expression: {text!r}")

    # -- parsing -------------------------------------------------------------

    def _parser(self, tsx: bool) -> Parser:
        if tsx not in self._parsers:
            self._parsers[tsx] = Parser(TSX_LANGUAGE if tsx else TS_LANGUAGE)
        return self._parsers[tsx]

    def _parse(self, source: str | bytes, path: str, tsx: bool) -> Node:
        if isinstance(source, str):
            data = source.encode("utf-8")
        else:
            data = source
            try:
                data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseUnavailable(
                    f"Could not parse {path}: not valid UTF-8 (byte {e.start})", path=path
                ) from e
        tree = self._parser(tsx).parse(data)
        root = tree.root_node
        if root.has_error:
            error = _first_error(root) or root
            raise ParseUnavailable(
                f"Could not parse {path}: syntax error at {_span(error)}", path=path
            )
        return root


# --- Declarations and members ---


def _top_level_interfaces(node: Node) -> Iterator[Node]:
    for child in _named(node):
        if child.type == "interface_declaration":
            yield child
        elif child.type in _WRAPPER_KINDS:
            yield from _top_level_interfaces(child)


def _declaration(node: Node) -> DeclarationNode:
    type_params: list[str] = []
    params_node = node.child_by_field_name("type_parameters")
    if params_node is not None:
        for param in _named(params_node):
            if param.type == "type_parameter":
                name = _field(param, "name", "type_identifier")
                type_params.append(_text(name))

    body = _field(node, "body", "interface_body", "object_type")
    members = tuple(_member(m) for m in _named(body))

    return DeclarationNode(
        name=_text(node.child_by_field_name("name")),
        type_params=tuple(type_params),
        members=members,
        span=_span(node),
    )


def _member(node: Node) -> MemberNode:
    if node.type != "property_signature":
        return MemberNode(tag=MemberTag.OTHER, syntax_kind=node.type, span=_span(node))

    type_node = _annotated_type(node)
    return MemberNode(
        tag=MemberTag.PROPERTY,
        syntax_kind=node.type,
        name=_property_name(node.child_by_field_name("name")),
        type=_type(type_node) if type_node is not None else None,
        optional=any(c.type == "?" for c in node.children),
        span=_span(node),
    )


def _property_name(node: Node | None) -> NameNode | None:
    if node is None:
        return None
    if node.type in ("property_identifier", "identifier", "type_identifier"):
        return NameNode(NameTag.IDENTIFIER, _text(node), node.type, _span(node))
    if node.type == "string":
        return NameNode(NameTag.STRING_LITERAL, _string_value(node), node.type, _span(node))
    return NameNode(NameTag.OTHER, _text(node), node.type, _span(node))


def _annotated_type(node: Node) -> Node | None:
    """The type inside a node's ``: T`` annotation, if it has one."""
    annotation = node.child_by_field_name("type")
    if annotation is None:
        annotation = next((c for c in node.children if c.type == "type_annotation"), None)
    if annotation is None:
        return None
    if annotation.type == "type_annotation":
        inner = _named(annotation)
        return inner[0] if inner else None
    return annotation


# --- Types ---


def _type(node: Node) -> TypeNode:
    kind = node.type
    span = _span(node)

    if kind == "function_type":
        params_node = _field(node, "parameters", "formal_parameters")
        parameters = tuple(_parameter(p) for p in _named(params_node))
        return_node = node.child_by_field_name("return_type")
        if return_node is None:
            rest = [c for c in _named(node) if c.type not in ("type_parameters", "formal_parameters")]
            return_node = rest[-1] if rest else None
        return TypeNode(
            TypeTag.FUNCTION,
            kind,
            span,
            parameters=parameters,
            return_type=_type(return_node) if return_node is not None else None,
        )

    if kind == "object_type":
        return TypeNode(TypeTag.OBJECT, kind, span, members=tuple(_member(m) for m in _named(node)))

    if kind == "type_identifier":
        # The grammar may read a bare `undefined` as a type name.
        if _text(node) == "undefined":
            return TypeNode(TypeTag.KEYWORD, kind, span, text="undefined")
        return TypeNode(TypeTag.REFERENCE, kind, span, name=_property_name(node))

    if kind == "nested_type_identifier":
        return TypeNode(TypeTag.REFERENCE, kind, span, name=_property_name(node))

    if kind == "generic_type":
        args_node = node.child_by_field_name("type_arguments")
        arguments = tuple(_type(a) for a in _named(args_node)) if args_node is not None else None
        return TypeNode(
            TypeTag.REFERENCE,
            kind,
            span,
            name=_property_name(_field(node, "name", "type_identifier", "nested_type_identifier")),
            arguments=arguments,
        )

    if kind == "array_type":
        children = _named(node)
        return TypeNode(TypeTag.ARRAY, kind, span, element=_type(children[0]) if children else None)

    if kind == "identifier":
        return TypeNode(TypeTag.IDENTIFIER, kind, span, text=_text(node))

    if kind == "literal_type":
        children = _named(node)
        literal = _literal(children[0]) if children else None
        return TypeNode(TypeTag.LITERAL, kind, span, literal=literal)

    if kind == "union_type":
        return TypeNode(TypeTag.UNION, kind, span, arguments=tuple(_type(m) for m in _union_members(node)))

    if kind == "predefined_type":
        return TypeNode(TypeTag.KEYWORD, kind, span, text=_text(node))

    return TypeNode(TypeTag.OTHER, kind, span, text=_text(node))


def _parameter(node: Node) -> ParameterNode:
    pattern = node.child_by_field_name("pattern")
    type_node = _annotated_type(node)
    return ParameterNode(
        name=_text(pattern) if pattern is not None else "",
        type=_type(type_node) if type_node is not None else None,
    )


def _union_members(node: Node) -> list[Node]:
    # `A | B | C` arrives as union(union(A, B), C); a leading `|` as union(A).
    members: list[Node] = []
    for child in _named(node):
        if child.type == "union_type":
            members.extend(_union_members(child))
        else:
            members.append(child)
    return members


def _literal(node: Node) -> LiteralNode:
    kind = node.type
    span = _span(node)
    if kind == "string":
        return LiteralNode(LiteralTag.STRING, _string_value(node), kind, span)
    if kind == "number":
        text = _text(node)
        if text.endswith("n"):
            return LiteralNode(LiteralTag.OTHER, text, "bigint", span)
        return LiteralNode(LiteralTag.NUMBER, text, kind, span)
    if kind in _LITERAL_TAGS:
        return LiteralNode(_LITERAL_TAGS[kind], _text(node), kind, span)
    return LiteralNode(LiteralTag.OTHER, _text(node), kind, span)


# --- Helpers ---


def _named(node: Node | None) -> list[Node]:
    if node is None:
        return []
    return [c for c in node.named_children if c.type != "comment"]


def _field(node: Node, name: str, *kinds: str) -> Node | None:
    """A field child, falling back to the first named child of one of *kinds*."""
    child = node.child_by_field_name(name)
    if child is None:
        child = next((c for c in node.named_children if c.type in kinds), None)
    return child


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _span(node: Node) -> SourceSpan:
    row, column = node.start_point
    return SourceSpan(line=row + 1, column=column + 1)


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _string_value(node: Node) -> str:
    """The cooked value of a string literal node."""
    parts = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(_text(child))
        elif child.type == "escape_sequence":
            parts.append(_unescape(_text(child)))
    # Astral characters written as \uD83D\uDE00 arrive as two lone surrogates.
    return "".join(parts).encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def _unescape(sequence: str) -> str:
    body = sequence[1:]
    if body in _LINE_TERMINATORS:
        return ""
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body.startswith("u") and len(body) == 5:
        return chr(int(body[1:], 16))
    if body.startswith("x") and len(body) == 3:
        return chr(int(body[1:], 16))
    return _SIMPLE_ESCAPES.get(body, body)
