"""The structured syntax view the visitors consume.

A syntax provider turns source text into these nodes. Each node carries a
tag naming its shape and, for diagnostics, the grammar's own name for the
construct (``syntax_kind``). Shapes the visitors do not support arrive with
an ``OTHER`` tag; deciding that they are unsupported is the visitors' job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from tspi.errors import SourceSpan


class TypeTag(Enum):
    FUNCTION = "function"
    OBJECT = "object"
    REFERENCE = "reference"
    ARRAY = "array"
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    UNION = "union"
    KEYWORD = "keyword"
    OTHER = "other"


class NameTag(Enum):
    IDENTIFIER = "identifier"
    STRING_LITERAL = "string_literal"
    OTHER = "other"


class MemberTag(Enum):
    PROPERTY = "property"
    OTHER = "other"


class LiteralTag(Enum):
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    UNDEFINED = "undefined"
    OTHER = "other"


@dataclass(frozen=True)
class NameNode:
    """A name: a plain identifier, a string literal, or something else."""

    tag: NameTag
    text: str
    syntax_kind: str = ""
    span: SourceSpan | None = None


@dataclass(frozen=True)
class LiteralNode:
    """A literal used as a type. ``text`` is the cooked value for strings."""

    tag: LiteralTag
    text: str = ""
    syntax_kind: str = ""
    span: SourceSpan | None = None


@dataclass(frozen=True)
class TypeNode:
    """A type expression.

    Which attributes are meaningful depends on ``tag``:

    - FUNCTION: ``parameters``, ``return_type`` (``None`` when unannotated)
    - OBJECT: ``members``
    - REFERENCE: ``name``, ``arguments`` (``None`` when written without ``<...>``)
    - ARRAY: ``element``
    - IDENTIFIER, KEYWORD: ``text``
    - LITERAL: ``literal``
    - UNION: ``arguments`` (the members, in source order)
    """

    tag: TypeTag
    syntax_kind: str = ""
    span: SourceSpan | None = None
    text: str = ""
    name: NameNode | None = None
    arguments: tuple[TypeNode, ...] | None = None
    element: TypeNode | None = None
    members: tuple[MemberNode, ...] = ()
    parameters: tuple[ParameterNode, ...] = ()
    return_type: TypeNode | None = None
    literal: LiteralNode | None = None


@dataclass(frozen=True)
class ParameterNode:
    name: str
    type: TypeNode | None = None


@dataclass(frozen=True)
class MemberNode:
    """A member of an interface body or an inline object type."""

    tag: MemberTag
    syntax_kind: str = ""
    name: NameNode | None = None
    type: TypeNode | None = None
    optional: bool = False
    span: SourceSpan | None = None


@dataclass(frozen=True)
class DeclarationNode:
    """A top-level named-record (interface) declaration."""

    name: str
    type_params: tuple[str, ...] = ()
    members: tuple[MemberNode, ...] = ()
    span: SourceSpan | None = None


class SyntaxProvider(Protocol):
    """Anything that can list the interface declarations of a source file."""

    def parse_file(self, path: str | Path) -> list[DeclarationNode]: ...
