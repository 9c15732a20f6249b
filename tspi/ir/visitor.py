"""Visitors that build IR from the tagged syntax view.

``visit_type`` maps one type expression to a ``TypeRef``; ``visit_declaration``
maps one interface declaration to a ``TypeDef``. Both are pure: they read
the node tree and build new IR, nothing else.
"""

from __future__ import annotations

import math

from tspi.config import DEFAULT_MAX_DEPTH
from tspi.errors import DepthExceeded, UnsupportedSyntax
from tspi.ir.models import (
    ArrayType,
    FieldDef,
    FunctionType,
    GenericType,
    LiteralType,
    LiteralValue,
    ObjectField,
    ObjectType,
    PrimitiveType,
    TypeDef,
    TypeRef,
    UnionType,
)
from tspi.syntax.nodes import (
    DeclarationNode,
    LiteralNode,
    LiteralTag,
    MemberNode,
    MemberTag,
    NameNode,
    NameTag,
    TypeNode,
    TypeTag,
)

PRIMITIVE_KEYWORDS = frozenset(
    {"string", "number", "boolean", "any", "unknown", "void", "never", "object", "symbol"}
)


def any_type() -> PrimitiveType:
    return PrimitiveType("any")


def visit_type(node: TypeNode, max_depth: int = DEFAULT_MAX_DEPTH) -> TypeRef:
    """Map a type expression to its IR.

    Raises ``UnsupportedSyntax`` for shapes outside the supported grammar and
    ``DepthExceeded`` when nesting goes deeper than *max_depth*.
    """
    try:
        return _visit(node, 1, max_depth)
    except RecursionError:
        raise DepthExceeded(
            "Type nesting too deep to visit", kind=node.syntax_kind, span=node.span
        ) from None


def visit_declaration(node: DeclarationNode, max_depth: int = DEFAULT_MAX_DEPTH) -> TypeDef:
    """Map an interface declaration to a ``TypeDef``.

    Field order follows the declaration; a repeated field name yields a
    repeated entry.
    """
    fields = []
    for member in node.members:
        name, type_node = _property(member)
        field_type = visit_type(type_node, max_depth) if type_node else any_type()
        fields.append(FieldDef(name=name, type=field_type, nullable=member.optional))

    return TypeDef(name=node.name, type_params=tuple(node.type_params), fields=tuple(fields))


def property_name(name: NameNode) -> str:
    """Return the text of a plain identifier or string-literal name."""
    if name.tag in (NameTag.IDENTIFIER, NameTag.STRING_LITERAL):
        return name.text
    raise UnsupportedSyntax(
        f"Unknown property name kind: {name.syntax_kind}", kind=name.syntax_kind, span=name.span
    )


def _property(member: MemberNode) -> tuple[str, TypeNode | None]:
    if member.tag != MemberTag.PROPERTY or member.name is None:
        raise UnsupportedSyntax(
            "Expected property signature", kind=member.syntax_kind, span=member.span
        )
    return property_name(member.name), member.type


def _visit(node: TypeNode, depth: int, max_depth: int) -> TypeRef:
    if depth > max_depth:
        raise DepthExceeded(
            f"Type nesting exceeds maximum depth of {max_depth}",
            kind=node.syntax_kind,
            span=node.span,
        )

    def child(n: TypeNode | None) -> TypeRef:
        return _visit(n, depth + 1, max_depth) if n is not None else any_type()

    match node.tag:
        case TypeTag.FUNCTION:
            return FunctionType(
                param_types=tuple(child(p.type) for p in node.parameters),
                return_type=child(node.return_type),
            )

        case TypeTag.OBJECT:
            fields = []
            for member in node.members:
                name, type_node = _property(member)
                fields.append(ObjectField(name=name, type=child(type_node)))
            return ObjectType(fields=tuple(fields))

        case TypeTag.REFERENCE:
            if node.name is None:
                raise UnsupportedSyntax(
                    "Type reference without a name", kind=node.syntax_kind, span=node.span
                )
            name = property_name(node.name)
            # A reference written without type arguments is just a name.
            if not node.arguments:
                return PrimitiveType(name)
            return GenericType(name=name, type_params=tuple(child(a) for a in node.arguments))

        case TypeTag.ARRAY:
            if node.element is None:
                raise UnsupportedSyntax(
                    "Array type without an element type", kind=node.syntax_kind, span=node.span
                )
            return ArrayType(element=child(node.element))

        case TypeTag.IDENTIFIER:
            return PrimitiveType(node.text)

        case TypeTag.LITERAL:
            if node.literal is None:
                raise UnsupportedSyntax(
                    "Literal type without a value", kind=node.syntax_kind, span=node.span
                )
            return LiteralType(_literal_value(node.literal))

        case TypeTag.UNION:
            if not node.arguments:
                raise UnsupportedSyntax(
                    "Union type without members", kind=node.syntax_kind, span=node.span
                )
            return UnionType(types=tuple(child(m) for m in node.arguments))

        case TypeTag.KEYWORD:
            return _keyword_type(node)

        case _:
            raise UnsupportedSyntax(
                f"Unknown type node kind: {node.syntax_kind}", kind=node.syntax_kind, span=node.span
            )


def _keyword_type(node: TypeNode) -> TypeRef:
    keyword = node.text
    if keyword in PRIMITIVE_KEYWORDS:
        return PrimitiveType(keyword)
    if keyword == "null":
        return LiteralType(LiteralValue.null())
    if keyword == "undefined":
        return LiteralType(LiteralValue.undefined())
    raise UnsupportedSyntax(f"Unknown keyword type: {keyword}", kind=node.syntax_kind, span=node.span)


def _literal_value(literal: LiteralNode) -> LiteralValue:
    match literal.tag:
        case LiteralTag.STRING:
            return LiteralValue.string(literal.text)
        case LiteralTag.NUMBER:
            number = parse_number(literal.text)
            if isinstance(number, float) and not math.isfinite(number):
                raise UnsupportedSyntax(
                    f"Numeric literal out of range: {literal.text}",
                    kind=literal.syntax_kind,
                    span=literal.span,
                )
            return LiteralValue.number(number)
        case LiteralTag.TRUE:
            return LiteralValue.boolean(True)
        case LiteralTag.FALSE:
            return LiteralValue.boolean(False)
        case LiteralTag.NULL:
            return LiteralValue.null()
        case LiteralTag.UNDEFINED:
            return LiteralValue.undefined()
        case _:
            raise UnsupportedSyntax(
                f"Unknown literal kind: {literal.syntax_kind}",
                kind=literal.syntax_kind,
                span=literal.span,
            )


def parse_number(text: str) -> int | float:
    """Parse numeric-literal source text; integral values come back as ``int``."""
    cleaned = text.replace("_", "").lower()
    if cleaned[:2] in ("0x", "0o", "0b"):
        return int(cleaned, 0)
    # Legacy octal such as 017; 089 is still decimal.
    if len(cleaned) > 1 and cleaned[0] == "0" and cleaned.isdigit():
        if not set(cleaned) & {"8", "9"}:
            return int(cleaned, 8)
        return int(cleaned, 10)
    value = float(cleaned)
    if value.is_integer():
        return int(value)
    return value
