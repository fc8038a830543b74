"""Generic parameter simplification.

A declaration's type parameters are collected bottom-up from every field that
mentions one, so `Foo[T any] struct { A T; B []T }` yields T twice. Simplify
collapses repeats by name in first-seen order.
"""

from __future__ import annotations

import copy

from ..errors import GenericCollisionError
from ..ir import Expr, LiteralKeyword, LiteralType, TypeParameter, UnionType


def simplify(params: list[TypeParameter]) -> list[TypeParameter]:
    """Deduplicate params by name.

    A repeated name must carry a structurally equal constraint; two different
    constraints under one name is a collision. Union constraints lose
    duplicate literal arms. The result holds copies, never the inputs, so the
    same parameter collected from two fields is not shared between owners.
    """
    result: list[TypeParameter] = []
    seen: dict[str, TypeParameter] = {}
    for tp in params:
        ref = tp.name.ref()
        kept = seen.get(ref)
        if kept is None:
            param = copy.deepcopy(tp)
            if isinstance(param.type, UnionType):
                simplify_union_literals(param.type)
            seen[ref] = param
            result.append(param)
            continue
        if not _same_constraint(kept.type, tp.type):
            raise GenericCollisionError(ref)
    return result


def simplify_union_literals(union: UnionType) -> UnionType:
    """Remove repeated literal arms in place: string | string | number -> string | number."""
    types: list[Expr] = []
    seen: set[tuple[str, str]] = set()
    for arg in union.types:
        key = _literal_key(arg)
        if key is None:
            types.append(arg)
            continue
        if key in seen:
            continue
        seen.add(key)
        types.append(arg)
    union.types = types
    return union


def _literal_key(expr: Expr) -> tuple[str, str] | None:
    if isinstance(expr, LiteralKeyword):
        return ("keyword", expr.keyword)
    if isinstance(expr, LiteralType):
        # bool is an int subclass; keep True and 1 apart.
        return (type(expr.value).__name__, repr(expr.value))
    return None


def _same_constraint(a: Expr | None, b: Expr | None) -> bool:
    if isinstance(a, UnionType) and isinstance(b, UnionType):
        # The kept copy already had its literal arms deduplicated.
        b = simplify_union_literals(copy.deepcopy(b))
    return a == b
