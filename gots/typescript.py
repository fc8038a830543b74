"""Typescript: one build's declaration graph, from mapping to serialized text."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from .errors import AlreadySerializedError
from .ir import DeclarationType
from .serialize import OrderFunc, serialize_nodes, sort_by_key
from .store import Entry, NodeStore

if TYPE_CHECKING:
    from .frontend.parser import GoParser

logger = logging.getLogger(__name__)

Mutation = Callable[["Typescript"], None]


class Typescript:
    """The build context.

    Owns the node store and the set of emitted builtins. Mutation passes
    rewrite it in place; serialization consumes it exactly once.
    """

    def __init__(self, parser: GoParser | None = None) -> None:
        self.parser: GoParser | None = parser
        self.store: NodeStore = NodeStore()
        self.builtins: set[str] = set()
        self.serialized: bool = False

    def set_node(self, key: str, node: DeclarationType) -> None:
        self.store.set_node(key, node)

    def update_node(self, key: str, update: Callable[[Entry], None]) -> None:
        self.store.update_node(key, update)

    def replace_node(self, key: str, node: DeclarationType) -> None:
        self.store.replace_node(key, node)

    def get_node(self, key: str) -> DeclarationType | None:
        return self.store.get_node(key)

    def for_each(self, fn: Callable[[str, DeclarationType], None]) -> None:
        """Visit every node. Order is unspecified; sort keys if it matters."""
        self.store.for_each(fn)

    def nodes(self) -> dict[str, DeclarationType]:
        return self.store.nodes()

    def has_builtin(self, name: str) -> bool:
        return name in self.builtins

    def mark_builtin(self, name: str) -> None:
        self.builtins.add(name)

    def apply_mutations(self, *mutations: Mutation) -> None:
        """Run passes strictly in the given order."""
        for mut in mutations:
            logger.debug("applying mutation %s", getattr(mut, "__name__", repr(mut)))
            mut(self)

    def serialize(self) -> str:
        """Render every declaration, sorted by key."""
        return self.serialize_in_order(sort_by_key)

    def serialize_in_order(self, order: OrderFunc) -> str:
        if self.serialized:
            raise AlreadySerializedError()
        # A failed attempt still consumes the context.
        self.serialized = True
        return serialize_nodes(self.store.nodes(), order)
