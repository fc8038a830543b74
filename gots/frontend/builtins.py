"""TypeScript declarations the converter emits on demand."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..ir import (
    KEYWORD_BOOLEAN,
    KEYWORD_NUMBER,
    KEYWORD_STRING,
    Alias,
    Identifier,
    keyword,
    union,
)

if TYPE_CHECKING:
    from ..typescript import Typescript

logger = logging.getLogger(__name__)

COMPARABLE = "Comparable"
RECORD = "Record"

# Global type names TypeScript already knows; references to them never dangle.
TYPESCRIPT_GLOBALS = frozenset(
    {
        "Array",
        "ReadonlyArray",
        "Readonly",
        "Record",
        "Partial",
        "Required",
        "Pick",
        "Omit",
        "Map",
        "Set",
        "Date",
        "Promise",
        "string",
        "number",
        "boolean",
    }
)


def comparable_alias() -> Alias:
    """type Comparable = string | number | boolean"""
    return Alias(
        name=Identifier(COMPARABLE),
        type=union(keyword(KEYWORD_STRING), keyword(KEYWORD_NUMBER), keyword(KEYWORD_BOOLEAN)),
    )


def include_comparable(ts: Typescript) -> None:
    """Register Comparable once per build context. Go's `comparable` maps to it."""
    if ts.has_builtin(COMPARABLE):
        return
    ts.mark_builtin(COMPARABLE)
    if ts.store.entry(COMPARABLE) is not None:
        logger.warning("a declaration named %s already exists, not emitting the builtin", COMPARABLE)
        return
    ts.set_node(COMPARABLE, comparable_alias())
