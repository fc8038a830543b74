"""Mutation passes: whole-graph rewrites applied between mapping and serialization.

Each pass takes the Typescript context and rewrites its nodes in place.
Callers pick passes and their order:

    ts.apply_mutations(middleend.enum_as_types, middleend.enum_lists, middleend.export_types)

The pipeline does not reorder anything. `check_order` reports the known
misorderings so a caller can log or reject them.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from .enums import enum_as_types, enum_lists, trim_enum_prefix
from .export import export_types
from .nullable import not_null_maps, null_union_slices, simplify_optional
from .readonly import read_only
from .references import missing_references_to_any
from .structural import interface_to_type

logger = logging.getLogger(__name__)

__all__ = [
    "check_order",
    "enum_as_types",
    "enum_lists",
    "export_types",
    "interface_to_type",
    "missing_references_to_any",
    "not_null_maps",
    "null_union_slices",
    "read_only",
    "simplify_optional",
    "trim_enum_prefix",
]

Pass = Callable[..., None]

# (first, then, reason): when both run, first must come before then.
ORDERING: list[tuple[Pass, Pass, str]] = [
    (enum_as_types, enum_lists, "enum lists are built from enum aliases"),
    (trim_enum_prefix, enum_as_types, "enum aliases have no member names to trim"),
    (simplify_optional, interface_to_type, "optional fields are only simplified on interfaces"),
]
ORDERING.extend(
    (p, missing_references_to_any, "dangling references are repaired last")
    for p in (
        export_types,
        read_only,
        enum_as_types,
        trim_enum_prefix,
        enum_lists,
        simplify_optional,
        not_null_maps,
        null_union_slices,
        interface_to_type,
    )
)


def check_order(passes: Sequence[Pass]) -> list[str]:
    """Warn about known misorderings in passes. Returns the warnings."""
    position = {id(p): i for i, p in enumerate(passes)}
    problems: list[str] = []
    for first, then, reason in ORDERING:
        i = position.get(id(first))
        j = position.get(id(then))
        if i is None or j is None or i < j:
            continue
        msg = first.__name__ + " should run before " + then.__name__ + ": " + reason
        logger.warning("%s", msg)
        problems.append(msg)
    return problems
