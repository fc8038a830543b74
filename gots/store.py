"""Node store: the keyed registry of top level declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from .errors import DuplicateNodeError
from .ir import DeclarationType

if TYPE_CHECKING:
    from .frontend.enums import EnumUpgrade


@dataclass
class Entry:
    """One slot in the store.

    node is None only for a placeholder created by `update_node` whose
    declaration has not been mapped yet. pending holds enum upgrades that
    `finalize_enums` applies once every declaration is mapped.
    """

    node: DeclarationType | None = None
    pending: list[EnumUpgrade] = field(default_factory=list)


class NodeStore:
    """Keys are emitted names (`Identifier.ref()`); they are unique per build.

    Iteration order is insertion order, which depends on package loading and
    must not be relied on. The serializer imposes the output order.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        # Set by finalize_enums; no enum upgrades are accepted afterwards.
        self.finalized: bool = False

    def set_node(self, key: str, node: DeclarationType) -> None:
        """Create a node. Fails if the key exists, even as a placeholder."""
        if key in self._entries:
            raise DuplicateNodeError(key)
        self._entries[key] = Entry(node=node)

    def update_node(self, key: str, update: Callable[[Entry], None]) -> None:
        """Apply update to the entry, creating an empty placeholder first if absent."""
        entry = self._entries.get(key)
        if entry is None:
            entry = Entry()
            self._entries[key] = entry
        update(entry)

    def replace_node(self, key: str, node: DeclarationType) -> None:
        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = Entry(node=node)
            return
        entry.node = node

    def get_node(self, key: str) -> DeclarationType | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.node

    def entry(self, key: str) -> Entry | None:
        return self._entries.get(key)

    def for_each(self, fn: Callable[[str, DeclarationType], None]) -> None:
        """Call fn for every mapped node. Safe against replace_node during iteration."""
        for key, entry in list(self._entries.items()):
            if entry.node is not None:
                fn(key, entry.node)

    def entries(self) -> list[tuple[str, Entry]]:
        return list(self._entries.items())

    def keys(self) -> list[str]:
        return [k for k, e in self._entries.items() if e.node is not None]

    def nodes(self) -> dict[str, DeclarationType]:
        result: dict[str, DeclarationType] = {}
        for key, entry in self._entries.items():
            if entry.node is not None:
                result[key] = entry.node
        return result

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and entry.node is not None

    def __len__(self) -> int:
        return len(self.keys())
