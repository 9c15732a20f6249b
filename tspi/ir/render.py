"""Render IR types back to TypeScript-like text for display."""

from __future__ import annotations

import json

from tspi.ir.models import (
    ArrayType,
    FunctionType,
    GenericType,
    LiteralType,
    ObjectType,
    PrimitiveType,
    TypeDef,
    TypeRef,
    UnionType,
)


def render_type(ref: TypeRef) -> str:
    if isinstance(ref, PrimitiveType):
        return ref.name
    if isinstance(ref, ArrayType):
        inner = render_type(ref.element)
        if isinstance(ref.element, (UnionType, FunctionType)):
            inner = f"({inner})"
        return f"{inner}[]"
    if isinstance(ref, GenericType):
        return f"{ref.name}<{', '.join(render_type(p) for p in ref.type_params)}>"
    if isinstance(ref, ObjectType):
        if not ref.fields:
            return "{}"
        body = "; ".join(f"{_render_name(f.name)}: {render_type(f.type)}" for f in ref.fields)
        return f"{{ {body} }}"
    if isinstance(ref, LiteralType):
        if ref.value.is_undefined:
            return "undefined"
        return json.dumps(ref.value.value, ensure_ascii=False)
    if isinstance(ref, UnionType):
        return " | ".join(render_type(t) for t in ref.types)
    if isinstance(ref, FunctionType):
        params = ", ".join(f"arg{i}: {render_type(p)}" for i, p in enumerate(ref.param_types))
        return f"({params}) => {render_type(ref.return_type)}"
    raise TypeError(f"Not a TypeRef: {ref!r}")


def render_signature(type_def: TypeDef) -> str:
    """``Name<T, U>``, or just ``Name`` without type parameters."""
    if type_def.type_params:
        return f"{type_def.name}<{', '.join(type_def.type_params)}>"
    return type_def.name


def _render_name(name: str) -> str:
    if name.isidentifier():
        return name
    return json.dumps(name, ensure_ascii=False)
