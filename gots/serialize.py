"""Serialization of the declaration graph to TypeScript source."""

from __future__ import annotations

from typing import Callable

from .backend.typescript import to_typescript
from .errors import RenderError
from .ir import DeclarationType

HEADER = "// Code generated by 'gots'. DO NOT EDIT.\n\n"

# Receives {key: node}, returns the nodes in output order.
OrderFunc = Callable[[dict[str, DeclarationType]], list[DeclarationType]]


def sort_by_key(nodes: dict[str, DeclarationType]) -> list[DeclarationType]:
    """Lexicographic by store key, so output never depends on load order."""
    return [nodes[k] for k in sorted(nodes)]


def serialize_nodes(nodes: dict[str, DeclarationType], order: OrderFunc) -> str:
    """Header, then each rendered declaration followed by a blank line."""
    keys = {id(node): key for key, node in nodes.items()}
    parts = [HEADER]
    for node in order(nodes):
        key = keys.get(id(node), "<unregistered>")
        try:
            text = to_typescript(node)
        except RenderError as e:
            raise RenderError("convert node " + repr(key) + ": " + str(e)) from e
        parts.append(text + "\n\n")
    return "".join(parts)
