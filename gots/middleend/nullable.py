"""Null simplification passes.

Go pointers map to `T | null`; these passes drop the null arm where the
output context makes it redundant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..ir import (
    ArrayType,
    DeclarationType,
    Expr,
    Interface,
    ReferenceType,
    UnionType,
    is_null,
)
from ..frontend.builtins import RECORD
from .walk import rewrite_declaration

if TYPE_CHECKING:
    from ..typescript import Typescript


def simplify_optional(ts: Typescript) -> None:
    """`name?: T | null` -> `name?: T`.

    Treats an omitted field and a null field as the same thing on the wire.
    Opt in only when the consumer does.
    """

    def _simplify(key: str, node: DeclarationType) -> None:
        if not isinstance(node, Interface):
            return
        for prop in node.fields:
            if prop.question_token and isinstance(prop.type, UnionType):
                prop.type = _without_null(prop.type)

    ts.for_each(_simplify)


def not_null_maps(ts: Typescript) -> None:
    """`Record<K, V> | null` -> `Record<K, V>`. A nil map marshals to null, but rarely matters."""

    def _collapse(expr: Expr) -> Expr | None:
        if not isinstance(expr, UnionType) or len(expr.types) != 2:
            return None
        a, b = expr.types
        if is_null(a) and _is_record(b):
            return b
        if is_null(b) and _is_record(a):
            return a
        return None

    ts.for_each(lambda key, node: rewrite_declaration(node, _collapse))


def null_union_slices(ts: Typescript) -> None:
    """`(T | null)[]` -> `T[]`, the shape of a Go `[]*T`."""

    def _collapse(expr: Expr) -> Expr | None:
        if not isinstance(expr, ArrayType):
            return None
        elem = expr.node
        if isinstance(elem, UnionType) and len(elem.types) == 2:
            if any(is_null(t) for t in elem.types):
                expr.node = _without_null(elem)
        return None

    ts.for_each(lambda key, node: rewrite_declaration(node, _collapse))


def _without_null(union: UnionType) -> Expr:
    types = [t for t in union.types if not is_null(t)]
    if len(types) == 0:
        return union
    if len(types) == 1:
        return types[0]
    union.types = types
    return union


def _is_record(expr: Expr) -> bool:
    return isinstance(expr, ReferenceType) and expr.name.ref() == RECORD
