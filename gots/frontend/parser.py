"""GoParser: which Go packages to convert, and how.

All configuration happens before `to_typescript`. Packages come from an
introspector, either as `gotypes.Package` objects or through `gots.loader`.

    parser = GoParser()
    parser.include_generate(pkg)
    parser.include_reference(dep, prefix="Dep")
    parser.include_custom_declaration(config.standard_mappings())
    ts = parser.to_typescript()
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from ..errors import DuplicatePackageError, ExpressionParseError
from ..gotypes import Object, Package
from ..ir import KEYWORD_STRING, Expr, keyword
from ..typescript import Typescript
from .convert import TypeMapper
from .enums import finalize_enums
from .references import ReferencedTypes
from .single import parse_expression

logger = logging.getLogger(__name__)

# Produces a fresh expression per use site.
TypeOverride = Callable[[], Expr]

_COULD_NOT_IMPORT_RE = re.compile(r"could not import ([^\s]+)")


def _default_overrides() -> dict[str, TypeOverride]:
    return {"error": lambda: keyword(KEYWORD_STRING)}


class GoParser:
    """Collects packages and overrides, then maps them into a Typescript context."""

    def __init__(self) -> None:
        self.packages: dict[str, Package] = {}
        # Reference-only packages emit just what generated packages use.
        self.reference: dict[str, bool] = {}
        self.prefix: dict[str, str] = {}
        self.type_overrides: dict[str, TypeOverride] = _default_overrides()
        self.excluded: set[str] = set()
        self.referenced_types: ReferencedTypes = ReferencedTypes()

    # ============================================================
    # CONFIGURATION
    # ============================================================

    def include_generate(self, pkg: Package | list[Package], prefix: str = "") -> None:
        """Generate every declaration of pkg."""
        self._include(pkg, prefix, False)

    def include_reference(self, pkg: Package | list[Package], prefix: str = "") -> None:
        """Generate declarations of pkg only when a generated package refers to them."""
        self._include(pkg, prefix, True)

    def _include(self, pkgs: Package | list[Package], prefix: str, reference: bool) -> None:
        if isinstance(pkgs, Package):
            pkgs = [pkgs]
        for pkg in pkgs:
            if pkg.path in self.packages:
                raise DuplicatePackageError(pkg.path)
            self.packages[pkg.path] = pkg
            self.reference[pkg.path] = reference
            self.prefix[pkg.path] = prefix
            for err in pkg.errors:
                logger.error("%s: %s (pkg=%s)", parse_package_error(err), err, pkg.path)

    def include_custom_declaration(self, mappings: dict[str, TypeOverride]) -> None:
        """Override Go types (by type string, e.g. `time.Time`) with producers."""
        for go_type, producer in mappings.items():
            self.type_overrides[go_type] = producer

    def include_custom(self, mappings: dict[str, str]) -> None:
        """Override Go types with other Go types: {"time.Time": "string"}.

        Each replacement must parse; a bad one raises ExpressionParseError
        and no mapping from this call is applied.
        """
        checked: dict[str, TypeOverride] = {}
        for go_type, expr in mappings.items():
            try:
                parse_expression(expr)
            except ExpressionParseError as e:
                raise ExpressionParseError(
                    "failed to parse override for " + go_type + ": " + e.msg, e.expr, e.pos
                ) from e
            checked[go_type] = _expression_override(expr)
        self.type_overrides.update(checked)

    def exclude_custom(self, *go_types: str) -> None:
        """Never generate these declarations (`pkg/path.Name`). References stay dangling."""
        self.excluded.update(go_types)

    # ============================================================
    # QUERIES
    # ============================================================

    def is_loaded(self, path: str) -> bool:
        return path in self.packages

    def is_reference(self, path: str) -> bool:
        return self.reference.get(path, False)

    def prefix_for(self, path: str) -> str:
        return self.prefix.get(path, "")

    def is_excluded(self, obj: Object) -> bool:
        return obj.pkg_path() + "." + obj.name in self.excluded

    # ============================================================
    # CONVERSION
    # ============================================================

    def to_typescript(self) -> Typescript:
        """Map every included package into a new Typescript context.

        Enum constants are merged into their types before returning, so the
        context is ready for mutations and serialization.
        """
        self.referenced_types = ReferencedTypes()
        ts = Typescript(self)
        TypeMapper(ts, self).generate()
        finalize_enums(ts.store)
        logger.debug("generated %d declarations", len(ts.store))
        return ts


def _expression_override(expr: str) -> TypeOverride:
    return lambda: parse_expression(expr)


def parse_package_error(err: str) -> str:
    """Human readable summary of an introspector diagnostic."""
    if "could not import" in err:
        m = _COULD_NOT_IMPORT_RE.search(err)
        if m is not None:
            return (
                "parsing package, suggest running 'go get "
                + m.group(1)
                + "' where calling the go generator to include the referenced package."
            )
        return (
            "parsing package, import unavailable to generating code, "
            "try to add the package as a reference to the go generator"
        )
    return "parsing package"
