"""Export marking: every top level declaration gets `export`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import UnknownDeclarationError
from ..ir import MODIFIER_EXPORT, Alias, DeclarationType, Enum, Interface, VariableStatement

if TYPE_CHECKING:
    from ..typescript import Typescript


def export_types(ts: Typescript) -> None:
    def _export(key: str, node: DeclarationType) -> None:
        match node:
            case Interface() | Alias() | Enum() | VariableStatement():
                if MODIFIER_EXPORT not in node.modifiers:
                    node.modifiers.append(MODIFIER_EXPORT)
            case _:
                raise UnknownDeclarationError("export_types", node)

    ts.for_each(_export)
