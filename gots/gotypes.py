"""Go source model.

The converter never reads Go source text. An external introspector (for
example a `go/packages` based dumper) resolves every declaration and hands
the result over, either as these objects directly or as the JSON dump read
by `gots.loader`.

The model mirrors the parts of `go/types` the converter needs:

| Go                 | Here                  |
|--------------------|-----------------------|
| *types.Package     | Package               |
| *types.TypeName    | TypeName              |
| *types.Const       | Const                 |
| *types.Var         | Var                   |
| *types.Func        | Func                  |
| *types.Basic       | Basic                 |
| *types.Named       | Named                 |
| *types.Alias       | Alias                 |
| *types.Struct      | Struct + Field        |
| *types.Pointer     | Pointer               |
| *types.Slice       | Slice                 |
| *types.Array       | Array                 |
| *types.Map         | Map                   |
| *types.Chan        | Chan                  |
| *types.Interface   | Interface             |
| *types.Union       | Union + Term          |
| *types.TypeParam   | TypeParam             |
| *types.Signature   | Signature             |

Types compare by identity, like their Go counterparts.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import DuplicateObjectError


# ============================================================
# POSITIONS AND CONSTANTS
# ============================================================


@dataclass
class Position:
    """Declaration position. filename is relative to the package directory."""

    filename: str = ""
    line: int = 0
    column: int = 0


@dataclass
class Constant:
    """Value of a typed or untyped constant.

    kind is one of: string, int, float, bool, complex, unknown.
    """

    kind: str
    value: object


# ============================================================
# TYPES
# ============================================================


class Type:
    """Base for all Go types. Abstract."""

    def underlying(self) -> Type:
        return self

    def __str__(self) -> str:
        return type_string(self)

    def __repr__(self) -> str:
        return type(self).__name__ + "(" + type_string(self) + ")"


NUMERIC_KINDS = frozenset(
    {
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "float32",
        "float64",
        "complex64",
        "complex128",
        "byte",
        "rune",
        "untyped int",
        "untyped rune",
        "untyped float",
        "untyped complex",
    }
)
BOOLEAN_KINDS = frozenset({"bool", "untyped bool"})
STRING_KINDS = frozenset({"string", "untyped string"})


class Basic(Type):
    """Predeclared type. `byte` and `rune` keep their alias names."""

    def __init__(self, name: str) -> None:
        self.name: str = name

    def is_numeric(self) -> bool:
        return self.name in NUMERIC_KINDS

    def is_boolean(self) -> bool:
        return self.name in BOOLEAN_KINDS

    def is_string(self) -> bool:
        return self.name in STRING_KINDS

    def is_invalid(self) -> bool:
        return self.name == "invalid type"


class Named(Type):
    """A defined type, possibly an instantiation of a generic one."""

    def __init__(
        self,
        obj: TypeName,
        under: Type | None = None,
        type_params: list[TypeParam] | None = None,
        type_args: list[Type] | None = None,
    ) -> None:
        self.obj: TypeName = obj
        self.under: Type | None = under
        self.type_params: list[TypeParam] = type_params if type_params is not None else []
        self.type_args: list[Type] = type_args if type_args is not None else []

    def underlying(self) -> Type:
        if self.under is None:
            return INVALID
        return self.under.underlying()

    def instantiate(self, *args: Type) -> Named:
        """Instantiation sharing this type's underlying, e.g. GenBar[string]."""
        return Named(self.obj, self.under, self.type_params, list(args))


class Alias(Type):
    """type A = B"""

    def __init__(
        self,
        obj: TypeName,
        rhs: Type,
        type_params: list[TypeParam] | None = None,
    ) -> None:
        self.obj: TypeName = obj
        self.rhs: Type = rhs
        self.type_params: list[TypeParam] = type_params if type_params is not None else []

    def underlying(self) -> Type:
        return self.rhs.underlying()


@dataclass(eq=False)
class Field:
    """A struct field. tag is the raw struct tag without backquotes."""

    name: str
    type: Type
    embedded: bool = False
    tag: str = ""
    doc: list[str] = field(default_factory=list)
    comment: list[str] = field(default_factory=list)

    def exported(self) -> bool:
        return is_exported(self.name)


class Struct(Type):
    def __init__(self, fields: list[Field] | None = None) -> None:
        self.fields: list[Field] = fields if fields is not None else []


class Pointer(Type):
    def __init__(self, elem: Type) -> None:
        self.elem: Type = elem


class Slice(Type):
    def __init__(self, elem: Type) -> None:
        self.elem: Type = elem


class Array(Type):
    def __init__(self, elem: Type, length: int) -> None:
        self.elem: Type = elem
        self.length: int = length


class Map(Type):
    def __init__(self, key: Type, elem: Type) -> None:
        self.key: Type = key
        self.elem: Type = elem


class Chan(Type):
    def __init__(self, elem: Type) -> None:
        self.elem: Type = elem


class Signature(Type):
    """Function type. Parameters are irrelevant to the converter."""


class Interface(Type):
    """interface{ embeddeds; methods }

    implicit is set for constraint literals such as `[T int | string]`.
    """

    def __init__(
        self,
        embeddeds: list[Type] | None = None,
        methods: list[str] | None = None,
        implicit: bool = False,
    ) -> None:
        self.embeddeds: list[Type] = embeddeds if embeddeds is not None else []
        self.methods: list[str] = methods if methods is not None else []
        self.implicit: bool = implicit

    def empty(self) -> bool:
        return len(self.embeddeds) == 0 and len(self.methods) == 0


@dataclass(eq=False)
class Term:
    tilde: bool
    type: Type


class Union(Type):
    """A | ~B, only valid inside constraints."""

    def __init__(self, terms: list[Term]) -> None:
        self.terms: list[Term] = terms


class TypeParam(Type):
    """Use of a generic parameter. obj.type is this TypeParam."""

    def __init__(self, obj: TypeName, constraint: Type) -> None:
        self.obj: TypeName = obj
        self.constraint: Type = constraint

    def underlying(self) -> Type:
        return self.constraint.underlying()


# ============================================================
# OBJECTS
# ============================================================


class Object:
    """Base for all package-level objects. Abstract."""

    def __init__(
        self,
        name: str,
        pkg: Package | None,
        typ: Type | None = None,
        pos: Position | None = None,
        doc: list[str] | None = None,
        comment: list[str] | None = None,
    ) -> None:
        self.name: str = name
        self.pkg: Package | None = pkg
        self.typ: Type | None = typ
        self.pos: Position = pos if pos is not None else Position()
        # Raw comment lines, `//` or `/* */` prefixed as in the source.
        self.doc: list[str] = doc if doc is not None else []
        self.comment: list[str] = comment if comment is not None else []

    def type(self) -> Type:
        if self.typ is None:
            return INVALID
        return self.typ

    def exported(self) -> bool:
        return is_exported(self.name)

    def id(self) -> str:
        """Object id as go/types computes it: unexported names are package qualified."""
        if self.exported() or self.pkg is None:
            return self.name
        return self.pkg.path + "." + self.name

    def pkg_path(self) -> str:
        if self.pkg is None:
            return ""
        return self.pkg.path

    def __repr__(self) -> str:
        return type(self).__name__ + "(" + self.pkg_path() + "." + self.name + ")"


class TypeName(Object):
    pass


class Const(Object):
    def __init__(
        self,
        name: str,
        pkg: Package | None,
        typ: Type,
        value: Constant,
        pos: Position | None = None,
        doc: list[str] | None = None,
        comment: list[str] | None = None,
    ) -> None:
        super().__init__(name, pkg, typ, pos, doc, comment)
        self.value: Constant = value


class Var(Object):
    pass


class Func(Object):
    pass


# ============================================================
# PACKAGES
# ============================================================


class Package:
    """A loaded Go package: its scope in declaration order plus file comments."""

    def __init__(self, path: str, name: str) -> None:
        self.path: str = path
        self.name: str = name
        self.objects: dict[str, Object] = {}
        # Every comment line in the package files, for directives.
        self.comments: list[str] = []
        # Diagnostics reported by the introspector.
        self.errors: list[str] = []

    def names(self) -> list[str]:
        return list(self.objects.keys())

    def lookup(self, name: str) -> Object | None:
        return self.objects.get(name)

    def insert(self, obj: Object) -> Object:
        if obj.name in self.objects:
            raise DuplicateObjectError(self.path, obj.name)
        self.objects[obj.name] = obj
        return obj

    def new_type(
        self,
        name: str,
        under: Type | None = None,
        type_params: list[tuple[str, Type]] | None = None,
        pos: Position | None = None,
        doc: list[str] | None = None,
        comment: list[str] | None = None,
    ) -> TypeName:
        """Declare `type name[params] under`.

        When under is None the caller fills it in later through
        `obj.type().under`, which allows self-referencing and generic types
        whose underlying mentions their own parameters.
        """
        obj = TypeName(name, self, None, pos, doc, comment)
        named = Named(obj, under)
        if type_params is not None:
            for pname, constraint in type_params:
                named.type_params.append(new_type_param(pname, self, constraint))
        obj.typ = named
        self.insert(obj)
        return obj

    def new_alias(
        self,
        name: str,
        rhs: Type,
        pos: Position | None = None,
        doc: list[str] | None = None,
    ) -> TypeName:
        """Declare `type name = rhs`."""
        obj = TypeName(name, self, None, pos, doc)
        obj.typ = Alias(obj, rhs)
        self.insert(obj)
        return obj

    def new_const(
        self,
        name: str,
        typ: Type,
        kind: str,
        value: object,
        pos: Position | None = None,
        doc: list[str] | None = None,
        comment: list[str] | None = None,
    ) -> Const:
        obj = Const(name, self, typ, Constant(kind, value), pos, doc, comment)
        self.insert(obj)
        return obj

    def __repr__(self) -> str:
        return "Package(" + self.path + ")"


def new_type_param(name: str, pkg: Package | None, constraint: Type) -> TypeParam:
    obj = TypeName(name, pkg)
    tp = TypeParam(obj, constraint)
    obj.typ = tp
    return tp


def type_params_of(typ: Type) -> list[TypeParam]:
    """Declared type parameters of a named or alias type."""
    if isinstance(typ, Named):
        return typ.type_params
    if isinstance(typ, Alias):
        return typ.type_params
    return []


def is_exported(name: str) -> bool:
    return len(name) > 0 and name[0].isupper()


# ============================================================
# UNIVERSE
# ============================================================

INVALID = Basic("invalid type")

BASIC_NAMES = (
    "bool",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
    "float32",
    "float64",
    "complex64",
    "complex128",
    "string",
    "byte",
    "rune",
    "unsafe.Pointer",
    "untyped bool",
    "untyped int",
    "untyped rune",
    "untyped float",
    "untyped complex",
    "untyped string",
    "untyped nil",
)

UNIVERSE_BASICS: dict[str, Basic] = {name: Basic(name) for name in BASIC_NAMES}


def basic(name: str) -> Basic:
    """Shared predeclared basic type."""
    return UNIVERSE_BASICS[name]


def _universe_error() -> Named:
    obj = TypeName("error", None)
    named = Named(obj, Interface(methods=["Error"]))
    obj.typ = named
    return named


def _universe_comparable() -> Named:
    obj = TypeName("comparable", None)
    named = Named(obj, Interface())
    obj.typ = named
    return named


def _universe_any() -> Alias:
    obj = TypeName("any", None)
    alias = Alias(obj, Interface())
    obj.typ = alias
    return alias


ERROR = _universe_error()
COMPARABLE = _universe_comparable()
ANY = _universe_any()

UNIVERSE_TYPES: dict[str, Type] = {"error": ERROR, "comparable": COMPARABLE, "any": ANY}


# ============================================================
# STRINGS
# ============================================================


def _qualified(obj: TypeName) -> str:
    if obj.pkg is None:
        return obj.name
    return obj.pkg.path + "." + obj.name


def type_string(typ: Type) -> str:
    """Type string in go/types notation, package paths fully qualified."""
    if isinstance(typ, Basic):
        return typ.name
    if isinstance(typ, Named):
        s = _qualified(typ.obj)
        if len(typ.type_args) > 0:
            s += "[" + ", ".join(type_string(a) for a in typ.type_args) + "]"
        return s
    if isinstance(typ, Alias):
        return _qualified(typ.obj)
    if isinstance(typ, Pointer):
        return "*" + type_string(typ.elem)
    if isinstance(typ, Slice):
        return "[]" + type_string(typ.elem)
    if isinstance(typ, Array):
        return "[" + str(typ.length) + "]" + type_string(typ.elem)
    if isinstance(typ, Map):
        return "map[" + type_string(typ.key) + "]" + type_string(typ.elem)
    if isinstance(typ, Chan):
        return "chan " + type_string(typ.elem)
    if isinstance(typ, Signature):
        return "func()"
    if isinstance(typ, Struct):
        parts: list[str] = []
        for f in typ.fields:
            if f.embedded:
                parts.append(type_string(f.type))
            else:
                parts.append(f.name + " " + type_string(f.type))
        return "struct{" + "; ".join(parts) + "}"
    if isinstance(typ, Union):
        terms: list[str] = []
        for t in typ.terms:
            prefix = "~" if t.tilde else ""
            terms.append(prefix + type_string(t.type))
        return " | ".join(terms)
    if isinstance(typ, Interface):
        if typ.implicit and len(typ.embeddeds) == 1:
            return type_string(typ.embeddeds[0])
        if typ.empty():
            return "interface{}"
        elems = [type_string(e) for e in typ.embeddeds]
        elems.extend(m + "()" for m in typ.methods)
        return "interface{" + "; ".join(elems) + "}"
    if isinstance(typ, TypeParam):
        return typ.obj.name
    return "<" + type(typ).__name__ + ">"
