"""Enum passes: enums as unions, member prefix trimming, value lists.

enum_as_types must run before enum_lists when both are used: enum_lists only
sees aliases that are unions of literals.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from ..ir import (
    NODE_FLAGS_CONSTANT,
    Alias,
    ArrayLiteralType,
    DeclarationType,
    Enum,
    Expr,
    Identifier,
    LiteralType,
    UnionType,
    VariableDeclaration,
    VariableDeclarationList,
    VariableStatement,
    array,
    reference,
)

if TYPE_CHECKING:
    from ..typescript import Typescript

logger = logging.getLogger(__name__)


def enum_as_types(ts: Typescript) -> None:
    """enum Foo { A = "a", B = "b" } -> type Foo = "a" | "b"."""

    def _convert(key: str, node: DeclarationType) -> None:
        if not isinstance(node, Enum):
            return
        types: list[Expr] = []
        for member in node.members:
            if member.value is not None:
                types.append(member.value)
        ts.replace_node(
            key,
            Alias(
                name=node.name,
                type=UnionType(types=types),
                modifiers=node.modifiers,
                source=node.source,
                comments=node.comments,
            ),
        )

    ts.for_each(_convert)


def trim_enum_prefix(ts: Typescript) -> None:
    """EnumFoo in enum Enum becomes Foo. A member that is all prefix keeps its name."""

    def _trim(key: str, node: DeclarationType) -> None:
        if not isinstance(node, Enum):
            return
        prefix = node.name.name
        for member in node.members:
            if member.name.startswith(prefix) and len(member.name) > len(prefix):
                member.name = member.name[len(prefix) :]

    ts.for_each(_trim)


def enum_lists(ts: Typescript) -> None:
    """For each alias of same-kind literals, add `const <Name>s: Name[] = [...]`."""
    added: dict[str, VariableStatement] = {}
    nodes = ts.nodes()
    for key in sorted(nodes):
        union = literal_union(nodes[key])
        if union is None:
            continue
        name = pluralize(key)
        if name in nodes or name in added:
            logger.warning("enum list %s for %s already exists, skipping", name, key)
            continue
        decl = VariableDeclaration(
            name=Identifier(name),
            type=array(reference(key)),
            initializer=ArrayLiteralType(elements=copy.deepcopy(union.types)),
        )
        added[name] = VariableStatement(
            declarations=VariableDeclarationList(declarations=[decl], flags=NODE_FLAGS_CONSTANT)
        )
    for name, node in added.items():
        ts.set_node(name, node)


def literal_union(node: DeclarationType) -> UnionType | None:
    """The union if node is an alias of literals that all share one kind."""
    if not isinstance(node, Alias) or not isinstance(node.type, UnionType):
        return None
    union = node.type
    if len(union.types) == 0:
        return None
    kind: type | None = None
    for t in union.types:
        if not isinstance(t, LiteralType):
            return None
        if kind is None:
            kind = type(t.value)
        elif type(t.value) is not kind:
            return None
    return union


def pluralize(name: str) -> str:
    if name.endswith(("x", "s", "z", "ch", "sh")):
        return name + "es"
    return name + "s"
