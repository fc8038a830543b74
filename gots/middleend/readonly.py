"""Immutability marking.

| Node                  | Effect                                        |
|-----------------------|-----------------------------------------------|
| Interface field       | `readonly` modifier; `T[]` -> `readonly T[]`  |
| Alias of `T[]`        | `readonly T[]`                                |
| Alias of `{ ... }`    | members as for an interface field             |
| VariableStatement     | declared `T[]` -> `readonly T[]`              |
| Enum                  | unchanged                                     |
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import UnknownDeclarationError
from ..ir import (
    KEYWORD_READONLY,
    MODIFIER_READONLY,
    Alias,
    ArrayType,
    DeclarationType,
    Enum,
    Expr,
    Interface,
    IntersectionType,
    PropertySignature,
    TypeLiteralNode,
    VariableStatement,
    operator_node,
)

if TYPE_CHECKING:
    from ..typescript import Typescript


def read_only(ts: Typescript) -> None:
    def _mark(key: str, node: DeclarationType) -> None:
        match node:
            case Interface():
                _mark_fields(node.fields)
            case Alias():
                node.type = _readonly_array(node.type)
                for literal in _type_literals(node.type):
                    _mark_fields(literal.members)
            case VariableStatement():
                for decl in node.declarations.declarations:
                    if decl.type is not None:
                        decl.type = _readonly_array(decl.type)
            case Enum():
                pass
            case _:
                raise UnknownDeclarationError("read_only", node)

    ts.for_each(_mark)


def _mark_fields(fields: list[PropertySignature]) -> None:
    for prop in fields:
        if MODIFIER_READONLY not in prop.modifiers:
            prop.modifiers.append(MODIFIER_READONLY)
        prop.type = _readonly_array(prop.type)


def _readonly_array(expr: Expr) -> Expr:
    if isinstance(expr, ArrayType):
        return operator_node(KEYWORD_READONLY, expr)
    return expr


def _type_literals(expr: Expr) -> list[TypeLiteralNode]:
    """The literal an alias is made of, also as the last arm of an intersection."""
    if isinstance(expr, TypeLiteralNode):
        return [expr]
    if isinstance(expr, IntersectionType):
        return [t for t in expr.types if isinstance(t, TypeLiteralNode)]
    return []
