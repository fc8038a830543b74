"""Deferred enum assembly.

Go declares an enum as a named basic type plus typed constants:

    type Audience string
    const AudienceWorld Audience = "world"

Declaration order between the type and its constants is not guaranteed, so
the mapper emits the type as a plain Alias and queues one EnumUpgrade per
constant on the type's store entry. `finalize_enums` drains every queue in
arrival order once all declarations are mapped:

| Current node | Upgrade effect                         |
|--------------|----------------------------------------|
| Alias        | becomes an Enum with this one member   |
| Enum         | member appended                        |
| anything else| EnumUpgradeError                       |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..errors import EnumUpgradeError, GenerationError
from ..ir import Alias, DeclarationType, Enum, EnumMember
from ..store import Entry, NodeStore

ADD_MEMBER = "add_member"


@dataclass
class EnumUpgrade:
    """A queued upgrade. kind is fixed today; the record stays inspectable."""

    kind: Literal["add_member"]
    member: EnumMember


def queue_enum_member(store: NodeStore, key: str, member: EnumMember) -> None:
    """Queue member for the enum named key, creating a placeholder if needed."""
    if store.finalized:
        raise EnumUpgradeError(
            "enums are finalized, cannot add member " + repr(member.name) + " to " + repr(key)
        )

    def _add(entry: Entry) -> None:
        entry.pending.append(EnumUpgrade(kind=ADD_MEMBER, member=member))

    store.update_node(key, _add)


def apply_upgrade(node: DeclarationType | None, upgrade: EnumUpgrade) -> DeclarationType:
    """Apply one upgrade, returning the (possibly new) node."""
    if upgrade.kind != ADD_MEMBER:
        raise EnumUpgradeError("unknown enum upgrade " + repr(upgrade.kind))
    if isinstance(node, Alias):
        return Enum(
            name=node.name,
            members=[upgrade.member],
            modifiers=node.modifiers,
            source=node.source,
            comments=node.comments,
        )
    if isinstance(node, Enum):
        node.members.append(upgrade.member)
        return node
    if node is None:
        raise EnumUpgradeError(
            "expected enum, got no declaration for member " + repr(upgrade.member.name)
        )
    raise EnumUpgradeError("expected enum, got " + type(node).__name__)


def finalize_enums(store: NodeStore) -> None:
    """Drain every pending queue in FIFO order. Runs exactly once per build."""
    if store.finalized:
        raise EnumUpgradeError("enums are already finalized")
    store.finalized = True
    for key, entry in store.entries():
        if len(entry.pending) == 0:
            continue
        node = entry.node
        i = 0
        for upgrade in entry.pending:
            try:
                node = apply_upgrade(node, upgrade)
            except EnumUpgradeError as e:
                wrapped = EnumUpgradeError("apply mutation " + str(i) + ": " + str(e))
                raise GenerationError(key, wrapped, "node") from e
            i += 1
        entry.pending = []
        store.replace_node(key, node)
