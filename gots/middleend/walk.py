"""Expression tree walking shared by the mutation passes.

`rewrite` visits children before their parent and lets the callback
substitute a node by returning a replacement. Returning None keeps it.
"""

from __future__ import annotations

from typing import Callable

from ..ir import (
    Alias,
    ArrayLiteralType,
    ArrayType,
    DeclarationType,
    Enum,
    Expr,
    Interface,
    IntersectionType,
    LiteralKeyword,
    LiteralType,
    Null,
    OperatorNodeType,
    ReferenceType,
    TupleType,
    TypeLiteralNode,
    TypeParameter,
    UnionType,
    VariableDeclaration,
    VariableDeclarationList,
    VariableStatement,
)

Rewrite = Callable[[Expr], "Expr | None"]


def rewrite(expr: Expr, fn: Rewrite) -> Expr:
    """Post-order rewrite of expr. Returns the (possibly replaced) root."""
    match expr:
        case ReferenceType():
            expr.arguments = [rewrite(a, fn) for a in expr.arguments]
        case ArrayType():
            expr.node = rewrite(expr.node, fn)
        case TupleType():
            expr.node = rewrite(expr.node, fn)
        case ArrayLiteralType():
            expr.elements = [rewrite(e, fn) for e in expr.elements]
        case UnionType():
            expr.types = [rewrite(t, fn) for t in expr.types]
        case IntersectionType():
            expr.types = [rewrite(t, fn) for t in expr.types]
        case OperatorNodeType():
            expr.type = rewrite(expr.type, fn)
        case TypeLiteralNode():
            for member in expr.members:
                member.type = rewrite(member.type, fn)
        case VariableDeclarationList():
            for decl in expr.declarations:
                _rewrite_variable(decl, fn)
        case VariableDeclaration():
            _rewrite_variable(expr, fn)
        case LiteralKeyword() | LiteralType() | Null():
            pass
        case _:
            raise NotImplementedError("Unknown expression " + type(expr).__name__)
    out = fn(expr)
    if out is None:
        return expr
    return out


def _rewrite_variable(decl: VariableDeclaration, fn: Rewrite) -> None:
    if decl.type is not None:
        decl.type = rewrite(decl.type, fn)
    if decl.initializer is not None:
        decl.initializer = rewrite(decl.initializer, fn)


def _rewrite_parameters(params: list[TypeParameter], fn: Rewrite) -> None:
    for p in params:
        if p.type is not None:
            p.type = rewrite(p.type, fn)
        if p.default_type is not None:
            p.default_type = rewrite(p.default_type, fn)


def rewrite_declaration(node: DeclarationType, fn: Rewrite) -> None:
    """Rewrite every expression reachable from a declaration, in place."""
    match node:
        case Interface():
            _rewrite_parameters(node.parameters, fn)
            for clause in node.heritage:
                clause.args = [rewrite(a, fn) for a in clause.args]
            for fld in node.fields:
                fld.type = rewrite(fld.type, fn)
        case Alias():
            _rewrite_parameters(node.parameters, fn)
            node.type = rewrite(node.type, fn)
        case Enum():
            for member in node.members:
                if member.value is not None:
                    member.value = rewrite(member.value, fn)
        case VariableStatement():
            for decl in node.declarations.declarations:
                _rewrite_variable(decl, fn)
        case _:
            raise NotImplementedError("Unknown declaration " + type(node).__name__)

