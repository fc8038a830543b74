"""Structural conversion: interfaces become type aliases of object literals.

    interface Foo<T> extends Base { a: T }  ->  type Foo<T> = Base & { a: T }
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..ir import Alias, DeclarationType, Expr, Interface, IntersectionType, TypeLiteralNode

if TYPE_CHECKING:
    from ..typescript import Typescript


def interface_to_type(ts: Typescript) -> None:
    def _convert(key: str, node: DeclarationType) -> None:
        if not isinstance(node, Interface):
            return
        literal: Expr = TypeLiteralNode(members=node.fields)
        bases: list[Expr] = []
        for clause in node.heritage:
            bases.extend(clause.args)
        if len(bases) > 0:
            literal = IntersectionType(types=bases + [literal])
        ts.replace_node(
            key,
            Alias(
                name=node.name,
                type=literal,
                parameters=node.parameters,
                modifiers=node.modifiers,
                source=node.source,
                comments=node.comments,
            ),
        )

    ts.for_each(_convert)
