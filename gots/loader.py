"""Read a JSON package dump into the Go source model.

The dump is produced by an external introspector (a small `go/packages`
program). Schema:

    {"packages": [{
        "path": "github.com/acme/api", "name": "api",
        "errors": ["..."],                    diagnostics, logged not fatal
        "comments": ["// @typescript-ignore Foo"],
        "objects": [{                         in declaration order
            "kind": "type" | "const" | "var" | "func",
            "name": "User",
            "alias": false,                   type only: `type A = B`
            "type_params": [{"name": "T", "constraint": TYPE}],
            "type": TYPE,                     underlying type for "type"
            "value": {"kind": "string", "value": "foo"},   const only
            "pos": {"file": "user.go", "line": 3, "column": 6},
            "doc": ["// User is ..."], "comment": ["// trailing"]
        }]
    }]}

TYPE is one of:

| kind      | fields                                              |
|-----------|-----------------------------------------------------|
| basic     | name                                                |
| named     | pkg ("" for universe), name, args?, under?          |
| pointer   | elem                                                |
| slice     | elem                                                |
| array     | elem, len                                           |
| map       | key, elem                                           |
| chan      | elem                                                |
| struct    | fields: [{name, type, embedded, tag, doc, comment}] |
| interface | embeddeds, methods, implicit                        |
| union     | terms: [{tilde, type}]                              |
| typeparam | name                                                |
| signature |                                                     |

`under` describes a named type from a package that is not in the dump, so
the converter can still tell a foreign struct from a foreign enum.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from . import gotypes
from .errors import DuplicateObjectError, LoadError
from .gotypes import Package, Position

logger = logging.getLogger(__name__)


def load_file(path: str) -> list[Package]:
    return load_files([path])[0]


def load_files(paths: list[str]) -> list[list[Package]]:
    """Load several dumps into one model, so a type shared between them is one object.

    Returns the packages of each file, in file order.
    """
    raw_pkgs: list[Any] = []
    counts: list[int] = []
    for path in paths:
        data = _read(path)
        _check_dump(data)
        raw_pkgs.extend(data["packages"])
        counts.append(len(data["packages"]))
    pkgs = _Loader().load(raw_pkgs)
    result: list[list[Package]] = []
    start = 0
    for n in counts:
        result.append(pkgs[start : start + n])
        start += n
    return result


def load_packages(data: Any) -> list[Package]:
    """Build packages from a decoded dump. Cross-package references resolve by identity."""
    _check_dump(data)
    return _Loader().load(data["packages"])


def _read(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise LoadError("cannot read " + repr(path) + ": " + str(e)) from e
    except json.JSONDecodeError as e:
        raise LoadError("invalid JSON in " + repr(path) + ": " + str(e)) from e


def _check_dump(data: Any) -> None:
    if not isinstance(data, dict) or not isinstance(data.get("packages"), list):
        raise LoadError("dump must be an object with a 'packages' list")


class _Loader:
    def __init__(self) -> None:
        self.packages: dict[str, Package] = {}
        # Packages referenced by the dump but not part of it.
        self.external: dict[str, Package] = {}

    def load(self, raw_pkgs: list[Any]) -> list[Package]:
        result: list[Package] = []
        try:
            # Declare every name first so references in any order resolve.
            for raw in raw_pkgs:
                result.append(self._declare_package(raw))
            for raw, pkg in zip(raw_pkgs, result):
                for obj_raw in raw.get("objects", []):
                    self._define(pkg, obj_raw)
        except DuplicateObjectError as e:
            raise LoadError(str(e)) from e
        for raw, pkg in zip(raw_pkgs, result):
            # Types were declared ahead of the rest; restore source order.
            order = [obj_raw["name"] for obj_raw in raw.get("objects", [])]
            pkg.objects = {name: pkg.objects[name] for name in order}
        logger.debug("loaded %d packages", len(result))
        return result

    # ============================================================
    # PACKAGES AND OBJECTS
    # ============================================================

    def _declare_package(self, raw: Any) -> Package:
        path = _require(raw, "path", str)
        if path in self.packages:
            raise LoadError("package " + path + " appears twice in the dump")
        pkg = Package(path, _require(raw, "name", str))
        pkg.comments = list(raw.get("comments", []))
        pkg.errors = list(raw.get("errors", []))
        self.packages[path] = pkg
        for obj_raw in raw.get("objects", []):
            if _require(obj_raw, "kind", str) != "type":
                continue
            name = _require(obj_raw, "name", str)
            pos = _position(obj_raw.get("pos"))
            doc = list(obj_raw.get("doc", []))
            comment = list(obj_raw.get("comment", []))
            if obj_raw.get("alias", False):
                obj = pkg.new_alias(name, gotypes.INVALID, pos, doc)
                obj.comment = comment
                continue
            params = [(_require(p, "name", str), gotypes.ANY) for p in obj_raw.get("type_params", [])]
            pkg.new_type(name, None, params, pos, doc, comment)
        return pkg

    def _define(self, pkg: Package, raw: Any) -> None:
        kind = _require(raw, "kind", str)
        name = _require(raw, "name", str)
        pos = _position(raw.get("pos"))
        doc = list(raw.get("doc", []))
        comment = list(raw.get("comment", []))
        if kind == "type":
            obj = pkg.lookup(name)
            assert obj is not None
            typ = obj.type()
            scope = {tp.obj.name: tp for tp in gotypes.type_params_of(typ)}
            for tp, p in zip(gotypes.type_params_of(typ), raw.get("type_params", [])):
                tp.constraint = self.type(p["constraint"], scope)
            under = self.type(_require(raw, "type", dict), scope)
            if isinstance(typ, gotypes.Alias):
                typ.rhs = under
            elif isinstance(typ, gotypes.Named):
                typ.under = under
        elif kind == "const":
            value = _require(raw, "value", dict)
            pkg.new_const(
                name,
                self.type(_require(raw, "type", dict), {}),
                _require(value, "kind", str),
                value.get("value"),
                pos,
                doc,
                comment,
            )
        elif kind == "var":
            pkg.insert(gotypes.Var(name, pkg, self._optional_type(raw), pos, doc, comment))
        elif kind == "func":
            pkg.insert(gotypes.Func(name, pkg, gotypes.Signature(), pos, doc, comment))
        else:
            raise LoadError("unknown object kind " + repr(kind) + " for " + pkg.path + "." + name)

    def _optional_type(self, raw: Any) -> gotypes.Type | None:
        if "type" not in raw:
            return None
        return self.type(raw["type"], {})

    # ============================================================
    # TYPES
    # ============================================================

    def type(self, raw: Any, scope: dict[str, gotypes.TypeParam]) -> gotypes.Type:
        kind = _require(raw, "kind", str)
        if kind == "basic":
            name = _require(raw, "name", str)
            if name not in gotypes.UNIVERSE_BASICS:
                if name == "invalid type":
                    return gotypes.INVALID
                raise LoadError("unknown basic type " + repr(name))
            return gotypes.basic(name)
        if kind == "named":
            return self._named(raw, scope)
        if kind == "pointer":
            return gotypes.Pointer(self.type(raw["elem"], scope))
        if kind == "slice":
            return gotypes.Slice(self.type(raw["elem"], scope))
        if kind == "array":
            return gotypes.Array(self.type(raw["elem"], scope), int(raw.get("len", 0)))
        if kind == "map":
            return gotypes.Map(self.type(raw["key"], scope), self.type(raw["elem"], scope))
        if kind == "chan":
            return gotypes.Chan(self.type(raw["elem"], scope))
        if kind == "struct":
            fields: list[gotypes.Field] = []
            for f in raw.get("fields", []):
                fields.append(
                    gotypes.Field(
                        name=_require(f, "name", str),
                        type=self.type(f["type"], scope),
                        embedded=bool(f.get("embedded", False)),
                        tag=f.get("tag", ""),
                        doc=list(f.get("doc", [])),
                        comment=list(f.get("comment", [])),
                    )
                )
            return gotypes.Struct(fields)
        if kind == "interface":
            return gotypes.Interface(
                [self.type(e, scope) for e in raw.get("embeddeds", [])],
                list(raw.get("methods", [])),
                bool(raw.get("implicit", False)),
            )
        if kind == "union":
            terms = [
                gotypes.Term(bool(t.get("tilde", False)), self.type(t["type"], scope))
                for t in raw.get("terms", [])
            ]
            return gotypes.Union(terms)
        if kind == "typeparam":
            name = _require(raw, "name", str)
            tp = scope.get(name)
            if tp is None:
                raise LoadError("type parameter " + repr(name) + " is not declared")
            return tp
        if kind == "signature":
            return gotypes.Signature()
        raise LoadError("unknown type kind " + repr(kind))

    def _named(self, raw: Any, scope: dict[str, gotypes.TypeParam]) -> gotypes.Type:
        path = raw.get("pkg", "")
        name = _require(raw, "name", str)
        if path == "":
            typ = gotypes.UNIVERSE_TYPES.get(name)
            if typ is None:
                raise LoadError("unknown universe type " + repr(name))
            return typ
        pkg = self.packages.get(path)
        if pkg is None:
            pkg = self._external(path)
            if pkg.lookup(name) is None:
                under = raw.get("under")
                obj = pkg.new_type(name)
                if under is not None:
                    named = obj.type()
                    assert isinstance(named, gotypes.Named)
                    named.under = self.type(under, {})
        obj = pkg.lookup(name)
        if obj is None or not isinstance(obj, gotypes.TypeName):
            raise LoadError("reference to undeclared type " + path + "." + name)
        typ = obj.type()
        args = raw.get("args", [])
        if len(args) > 0 and isinstance(typ, gotypes.Named):
            return typ.instantiate(*[self.type(a, scope) for a in args])
        return typ

    def _external(self, path: str) -> Package:
        pkg = self.external.get(path)
        if pkg is None:
            pkg = Package(path, path.rsplit("/", 1)[-1])
            self.external[path] = pkg
        return pkg


def _position(raw: Any) -> Position:
    if raw is None:
        return Position()
    return Position(raw.get("file", ""), int(raw.get("line", 0)), int(raw.get("column", 0)))


def _require(raw: Any, key: str, kind: type) -> Any:
    if not isinstance(raw, dict):
        raise LoadError("expected an object, got " + type(raw).__name__)
    value = raw.get(key)
    if not isinstance(value, kind):
        raise LoadError("missing or invalid " + repr(key) + " in " + json.dumps(raw)[:80])
    return value
