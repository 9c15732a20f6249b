"""IR data models — the canonical, language-agnostic form of extracted types.

A ``TypeRef`` is one of seven frozen variants (primitive, array, generic,
object, literal, union, function). A ``TypeDef`` is one named interface:
its own type-parameter names and its ordered fields. Names inside a
``TypeRef`` are never resolved, so every tree is finite.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class TypeKind(Enum):
    PRIMITIVE = "primitive"
    ARRAY = "array"
    GENERIC = "generic"
    OBJECT = "object"
    LITERAL = "literal"
    UNION = "union"
    FUNCTION = "function"


class LiteralKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class LiteralValue:
    """The single value a literal type is pinned to.

    ``value`` is ``None`` for both the null and the undefined literal; the
    two are told apart by ``kind``.
    """

    kind: LiteralKind
    value: str | int | float | bool | None = None

    @classmethod
    def string(cls, value: str) -> LiteralValue:
        return cls(LiteralKind.STRING, value)

    @classmethod
    def number(cls, value: int | float) -> LiteralValue:
        return cls(LiteralKind.NUMBER, value)

    @classmethod
    def boolean(cls, value: bool) -> LiteralValue:
        return cls(LiteralKind.BOOLEAN, value)

    @classmethod
    def null(cls) -> LiteralValue:
        return cls(LiteralKind.NULL)

    @classmethod
    def undefined(cls) -> LiteralValue:
        return cls(LiteralKind.UNDEFINED)

    @property
    def is_undefined(self) -> bool:
        return self.kind == LiteralKind.UNDEFINED


# --- TypeRef variants ---


@dataclass(frozen=True)
class PrimitiveType:
    """A built-in scalar, or a bare name the extractor does not resolve."""

    kind: ClassVar[TypeKind] = TypeKind.PRIMITIVE

    name: str


@dataclass(frozen=True)
class ArrayType:
    kind: ClassVar[TypeKind] = TypeKind.ARRAY

    element: TypeRef


@dataclass(frozen=True)
class GenericType:
    """A named type instantiated with at least one type argument."""

    kind: ClassVar[TypeKind] = TypeKind.GENERIC

    name: str
    type_params: tuple[TypeRef, ...]

    def __post_init__(self) -> None:
        if not self.type_params:
            raise ValueError(
                f"GenericType '{self.name}' needs at least one type argument; "
                "use PrimitiveType for a bare name"
            )


@dataclass(frozen=True)
class ObjectField:
    name: str
    type: TypeRef


@dataclass(frozen=True)
class ObjectType:
    """An inline, unnamed record type."""

    kind: ClassVar[TypeKind] = TypeKind.OBJECT

    fields: tuple[ObjectField, ...] = ()


@dataclass(frozen=True)
class LiteralType:
    kind: ClassVar[TypeKind] = TypeKind.LITERAL

    value: LiteralValue


@dataclass(frozen=True)
class UnionType:
    kind: ClassVar[TypeKind] = TypeKind.UNION

    types: tuple[TypeRef, ...]

    def __post_init__(self) -> None:
        if not self.types:
            raise ValueError("UnionType needs at least one member")


@dataclass(frozen=True)
class FunctionType:
    """A callable signature; parameter names are not kept."""

    kind: ClassVar[TypeKind] = TypeKind.FUNCTION

    param_types: tuple[TypeRef, ...]
    return_type: TypeRef


TypeRef = Union[
    PrimitiveType,
    ArrayType,
    GenericType,
    ObjectType,
    LiteralType,
    UnionType,
    FunctionType,
]


# --- Declarations ---


@dataclass(frozen=True)
class FieldDef:
    """A field of a named declaration.

    ``nullable`` records whether the field was written as optional
    (``name?: T``). It says nothing about whether ``type`` admits null or
    undefined; a union containing them is kept as-is.
    """

    name: str
    type: TypeRef
    nullable: bool = False


@dataclass(frozen=True)
class TypeDef:
    """One named interface declaration."""

    name: str
    type_params: tuple[str, ...] = ()
    fields: tuple[FieldDef, ...] = ()

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def optional_fields(self) -> list[FieldDef]:
        return [f for f in self.fields if f.nullable]

    def get_field(self, name: str) -> FieldDef | None:
        """Return the first field called *name* (repeated names are kept)."""
        for f in self.fields:
            if f.name == name:
                return f
        return None
