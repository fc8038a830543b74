"""Dangling-reference repair. Run it last.

A reference to a declaration that never made it into the graph (excluded,
ignored by directive, or in a package that was not loaded) would not
compile. It becomes `any`, and the owning field or declaration says why.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Union

from ..errors import UnknownDeclarationError
from ..frontend.builtins import TYPESCRIPT_GLOBALS
from ..ir import (
    KEYWORD_ANY,
    Alias,
    Declaration,
    DeclarationType,
    Enum,
    Expr,
    Identifier,
    Interface,
    IntersectionType,
    PropertySignature,
    ReferenceType,
    TypeLiteralNode,
    TypeParameter,
    VariableStatement,
    declaration_name,
    keyword,
)
from .walk import rewrite, rewrite_declaration

if TYPE_CHECKING:
    from ..typescript import Typescript

logger = logging.getLogger(__name__)

Owner = Union[Declaration, PropertySignature]


def missing_references_to_any(ts: Typescript) -> None:
    valid: set[str] = set()
    for node in ts.nodes().values():
        if not isinstance(node, VariableStatement):
            valid.add(declaration_name(node))

    def _repair(key: str, node: DeclarationType) -> None:
        fixer = _Fixer(valid, _generic_names(node))
        match node:
            case Interface():
                fixer.parameters(node.parameters, node)
                for clause in node.heritage:
                    clause.args = [fixer.expr(a, node) for a in clause.args]
                fixer.members(node.fields)
            case Alias():
                fixer.parameters(node.parameters, node)
                node.type = fixer.alias_type(node.type, node)
            case Enum() | VariableStatement():
                missing: list[Identifier] = []
                rewrite_declaration(node, fixer.replacer(missing))
                _note(node, missing)
            case _:
                raise UnknownDeclarationError("missing_references_to_any", node)

    ts.for_each(_repair)


class _Fixer:
    """Replaces dangling references, noting each on the closest owner."""

    def __init__(self, valid: set[str], generics: set[str]) -> None:
        self.valid: set[str] = valid
        self.generics: set[str] = generics

    def replacer(self, missing: list[Identifier]) -> Callable[[Expr], Expr | None]:
        def _replace(expr: Expr) -> Expr | None:
            if not isinstance(expr, ReferenceType):
                return None
            name = expr.name.ref()
            if name in self.valid or name in self.generics or name in TYPESCRIPT_GLOBALS:
                return None
            missing.append(expr.name)
            return keyword(KEYWORD_ANY)

        return _replace

    def expr(self, expr: Expr, owner: Owner) -> Expr:
        missing: list[Identifier] = []
        out = rewrite(expr, self.replacer(missing))
        _note(owner, missing)
        return out

    def parameters(self, params: list[TypeParameter], owner: Owner) -> None:
        for p in params:
            if p.type is not None:
                p.type = self.expr(p.type, owner)
            if p.default_type is not None:
                p.default_type = self.expr(p.default_type, owner)

    def members(self, members: list[PropertySignature]) -> None:
        for m in members:
            m.type = self.expr(m.type, m)

    def alias_type(self, expr: Expr, owner: Alias) -> Expr:
        """Fields of an object literal alias own their notes, like interface fields."""
        if isinstance(expr, TypeLiteralNode):
            self.members(expr.members)
            return expr
        if isinstance(expr, IntersectionType):
            types: list[Expr] = []
            for t in expr.types:
                if isinstance(t, TypeLiteralNode):
                    self.members(t.members)
                    types.append(t)
                else:
                    types.append(self.expr(t, owner))
            expr.types = types
            return expr
        return self.expr(expr, owner)


def _note(owner: Owner, missing: list[Identifier]) -> None:
    for ident in missing:
        logger.warning("reference to missing type %s, using any", ident.go_name())
        owner.leading_comment("Reference to " + ident.ref() + " is not generated, falling back to any")


def _generic_names(node: DeclarationType) -> set[str]:
    params: list[TypeParameter] = []
    if isinstance(node, (Interface, Alias)):
        params = node.parameters
    return {p.name.ref() for p in params}
