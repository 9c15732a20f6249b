"""JSON encoding of the IR.

Every ``TypeRef`` becomes an object whose ``kind`` key names the variant,
followed by the variant's attributes. Key order is fixed:

    primitive  {kind, name}
    array      {kind, type}
    generic    {kind, name, typeParams}
    object     {kind, fields: [{name, type}]}
    literal    {kind, value}
    union      {kind, types}
    function   {kind, paramTypes, returnType}

A ``TypeDef`` is ``{name, typeParams, fields: [{name, type, nullable}]}``.

JSON has no undefined, so the undefined literal is written with the
``value`` key left out: ``{"kind": "literal"}``. The null literal keeps the
key: ``{"kind": "literal", "value": null}``.
"""

from __future__ import annotations

import json
import re
from typing import Any

from tspi.config import DEFAULT_INDENT
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
    TypeKind,
    TypeRef,
    UnionType,
)

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def type_ref_to_dict(ref: TypeRef) -> dict[str, Any]:
    data: dict[str, Any] = {"kind": ref.kind.value}
    if isinstance(ref, PrimitiveType):
        data["name"] = ref.name
    elif isinstance(ref, ArrayType):
        data["type"] = type_ref_to_dict(ref.element)
    elif isinstance(ref, GenericType):
        data["name"] = ref.name
        data["typeParams"] = [type_ref_to_dict(p) for p in ref.type_params]
    elif isinstance(ref, ObjectType):
        data["fields"] = [
            {"name": f.name, "type": type_ref_to_dict(f.type)} for f in ref.fields
        ]
    elif isinstance(ref, LiteralType):
        if not ref.value.is_undefined:
            data["value"] = ref.value.value
    elif isinstance(ref, UnionType):
        data["types"] = [type_ref_to_dict(t) for t in ref.types]
    elif isinstance(ref, FunctionType):
        data["paramTypes"] = [type_ref_to_dict(p) for p in ref.param_types]
        data["returnType"] = type_ref_to_dict(ref.return_type)
    else:
        raise TypeError(f"Not a TypeRef: {ref!r}")
    return data


def type_def_to_dict(type_def: TypeDef) -> dict[str, Any]:
    return {
        "name": type_def.name,
        "typeParams": list(type_def.type_params),
        "fields": [
            {"name": f.name, "type": type_ref_to_dict(f.type), "nullable": f.nullable}
            for f in type_def.fields
        ],
    }


def dumps(type_defs: list[TypeDef], indent: int | None = DEFAULT_INDENT) -> str:
    """Encode type definitions as a JSON array, in the order given.

    Non-finite numbers raise ``ValueError``. Lone surrogates, which only
    occur inside strings, are written as ``\\uXXXX`` escapes so the text
    stays encodable as UTF-8.
    """
    text = json.dumps(
        [type_def_to_dict(d) for d in type_defs],
        indent=indent,
        ensure_ascii=False,
        allow_nan=False,
    )
    return _LONE_SURROGATE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


# --- Loading ---


def type_ref_from_dict(data: dict[str, Any]) -> TypeRef:
    """Rebuild a ``TypeRef`` from its JSON form. Raises ``ValueError`` on bad input."""
    try:
        kind = TypeKind(data["kind"])
    except (KeyError, ValueError, TypeError):
        raise ValueError(f"Unknown TypeRef kind in {data!r}") from None

    if kind == TypeKind.PRIMITIVE:
        return PrimitiveType(data["name"])
    if kind == TypeKind.ARRAY:
        return ArrayType(type_ref_from_dict(data["type"]))
    if kind == TypeKind.GENERIC:
        return GenericType(
            name=data["name"],
            type_params=tuple(type_ref_from_dict(p) for p in data["typeParams"]),
        )
    if kind == TypeKind.OBJECT:
        return ObjectType(
            fields=tuple(
                ObjectField(name=f["name"], type=type_ref_from_dict(f["type"]))
                for f in data["fields"]
            )
        )
    if kind == TypeKind.LITERAL:
        return LiteralType(_literal_from_json(data))
    if kind == TypeKind.UNION:
        return UnionType(types=tuple(type_ref_from_dict(t) for t in data["types"]))
    return FunctionType(
        param_types=tuple(type_ref_from_dict(p) for p in data["paramTypes"]),
        return_type=type_ref_from_dict(data["returnType"]),
    )


def _literal_from_json(data: dict[str, Any]) -> LiteralValue:
    if "value" not in data:
        return LiteralValue.undefined()
    value = data["value"]
    if value is None:
        return LiteralValue.null()
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return LiteralValue.boolean(value)
    if isinstance(value, (int, float)):
        return LiteralValue.number(value)
    if isinstance(value, str):
        return LiteralValue.string(value)
    raise ValueError(f"Unsupported literal value: {value!r}")


def type_def_from_dict(data: dict[str, Any]) -> TypeDef:
    return TypeDef(
        name=data["name"],
        type_params=tuple(data.get("typeParams", [])),
        fields=tuple(
            FieldDef(
                name=f["name"],
                type=type_ref_from_dict(f["type"]),
                nullable=bool(f.get("nullable", False)),
            )
            for f in data.get("fields", [])
        ),
    )


def loads(text: str) -> list[TypeDef]:
    """Decode a JSON array written by ``dumps``."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of type definitions")
    return [type_def_from_dict(d) for d in data]

