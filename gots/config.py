"""Ready-made overrides and mutation lists."""

from __future__ import annotations

from typing import Callable

from . import middleend
from .frontend.parser import TypeOverride
from .ir import KEYWORD_BOOLEAN, KEYWORD_NUMBER, KEYWORD_STRING, Null, keyword, union


def override_literal(word: str) -> TypeOverride:
    """Always map to a keyword type, e.g. `string`."""
    return lambda: keyword(word)


def override_nullable(override: TypeOverride) -> TypeOverride:
    """`T | null` of another override."""
    return lambda: union(override(), Null())


def standard_mappings() -> dict[str, TypeOverride]:
    """Standard library and common third party types with a known JSON form."""
    return {
        "time.Time": override_literal(KEYWORD_STRING),
        "database/sql.NullTime": override_nullable(override_literal(KEYWORD_STRING)),
        "database/sql.NullString": override_nullable(override_literal(KEYWORD_STRING)),
        "database/sql.NullBool": override_nullable(override_literal(KEYWORD_BOOLEAN)),
        "database/sql.NullInt64": override_nullable(override_literal(KEYWORD_NUMBER)),
        "database/sql.NullInt32": override_nullable(override_literal(KEYWORD_NUMBER)),
        "database/sql.NullInt16": override_nullable(override_literal(KEYWORD_NUMBER)),
        "database/sql.NullFloat64": override_nullable(override_literal(KEYWORD_NUMBER)),
        "github.com/google/uuid.UUID": override_literal(KEYWORD_STRING),
        "github.com/google/uuid.NullUUID": override_nullable(override_literal(KEYWORD_STRING)),
    }


MUTATIONS: dict[str, Callable[..., None]] = {
    "export": middleend.export_types,
    "readonly": middleend.read_only,
    "enum-as-types": middleend.enum_as_types,
    "trim-enum-prefix": middleend.trim_enum_prefix,
    "enum-lists": middleend.enum_lists,
    "simplify-optional": middleend.simplify_optional,
    "not-null-maps": middleend.not_null_maps,
    "null-union-slices": middleend.null_union_slices,
    "interface-to-type": middleend.interface_to_type,
    "missing-references-to-any": middleend.missing_references_to_any,
}

# The usual set for a web frontend consuming encoding/json output.
DEFAULT_MUTATIONS: list[str] = [
    "enum-as-types",
    "enum-lists",
    "export",
    "readonly",
    "not-null-maps",
    "null-union-slices",
    "missing-references-to-any",
]


def resolve_mutations(names: list[str]) -> list[Callable[..., None]]:
    """Look up mutation names. Unknown names raise KeyError naming them."""
    unknown = [n for n in names if n not in MUTATIONS]
    if len(unknown) > 0:
        raise KeyError("unknown mutation: " + ", ".join(unknown))
    return [MUTATIONS[n] for n in names]
