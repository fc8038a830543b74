"""Type mapper: Go objects and types -> declaration graph nodes.

One `parse` call maps one package-level object. Nested types go through
`typescript_type`, which returns the expression plus everything a use site
bubbles up to its owning declaration:

| Bubbled up       | Collected by                                   |
|------------------|------------------------------------------------|
| type parameters  | the owning Interface or Alias, then simplified |
| raised comments  | the owning field (or declaration)              |

Every expression is built fresh per use site, overrides included.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .. import gotypes
from ..errors import GenerationError, GotsError, UnsupportedTypeError
from ..gotypes import Object, type_params_of, type_string
from ..ir import (
    KEYWORD_ANY,
    KEYWORD_BOOLEAN,
    KEYWORD_NUMBER,
    KEYWORD_STRING,
    KEYWORD_UNKNOWN,
    NODE_FLAGS_CONSTANT,
    Alias,
    EnumMember,
    Expr,
    Identifier,
    Interface,
    LiteralType,
    Null,
    PropertySignature,
    Source,
    TypeParameter,
    UnionType,
    VariableDeclaration,
    VariableDeclarationList,
    VariableStatement,
    array,
    heritage_extends,
    keyword,
    reference,
    union,
)
from ..store import Entry
from .builtins import COMPARABLE, RECORD, include_comparable
from .comments import comments_for_field, comments_for_object, ignored_types
from .enums import queue_enum_member
from .generics import simplify
from .tags import Tag, parse_tags

if TYPE_CHECKING:
    from ..typescript import Typescript
    from .parser import GoParser

logger = logging.getLogger(__name__)


@dataclass
class ParsedType:
    """Result of mapping one type occurrence."""

    value: Expr
    type_parameters: list[TypeParameter] = field(default_factory=list)
    # Notes for the first parent that accepts comments.
    raised_comments: list[str] = field(default_factory=list)

    def with_comments(self, *comments: str) -> ParsedType:
        self.raised_comments.extend(comments)
        return self


class TypeMapper:
    """Maps the parser's packages into a build context's node store."""

    def __init__(self, ts: Typescript, parser: GoParser) -> None:
        self.ts: Typescript = ts
        self.parser: GoParser = parser

    # ============================================================
    # DRIVER
    # ============================================================

    def generate(self) -> None:
        """Map every package. Generated packages go first so references are known."""
        parser = self.parser
        gen_pkgs = [p for path, p in parser.packages.items() if not parser.is_reference(path)]
        ref_pkgs = [p for path, p in parser.packages.items() if parser.is_reference(path)]
        referenced = parser.referenced_types
        for pkg in gen_pkgs + ref_pkgs:
            skipped = ignored_types(pkg)
            for name in pkg.names():
                if name in skipped:
                    logger.debug("skipping %s.%s, ignored by directive", pkg.path, name)
                    continue
                obj = pkg.lookup(name)
                if obj is None:
                    continue
                if parser.is_excluded(obj):
                    continue
                if parser.is_reference(pkg.path) and not referenced.is_referenced(obj):
                    continue
                if referenced.is_generated(obj):
                    continue
                self.parse(obj)
                referenced.mark_generated(obj)
            # Referenced types can reference more types; keep going until done.
            referenced.remaining(self._generate_referenced)
        for pkg in ref_pkgs:
            self._reference_enum_members(pkg)

    def _reference_enum_members(self, pkg: gotypes.Package) -> None:
        """Constants of enum types pulled in from a reference-only package."""
        referenced = self.parser.referenced_types
        skipped = ignored_types(pkg)
        for name in pkg.names():
            obj = pkg.lookup(name)
            if not isinstance(obj, gotypes.Const) or name in skipped:
                continue
            if referenced.is_generated(obj):
                continue
            typ = obj.type()
            if not isinstance(typ, gotypes.Named) or not referenced.is_generated(typ.obj):
                continue
            self.parse(obj)
            referenced.mark_generated(obj)

    def _generate_referenced(self, obj: Object) -> None:
        self.parse(obj)
        self.parser.referenced_types.mark_generated(obj)

    # ============================================================
    # OBJECTS
    # ============================================================

    def identifier(self, obj: Object) -> Identifier:
        path = obj.pkg_path()
        return Identifier(name=obj.name, package=path, prefix=self.parser.prefix_for(path))

    def location(self, obj: Object) -> Source:
        if obj.pkg is None or obj.pos.filename == "":
            return Source()
        # Always forward slashes, whatever the platform.
        base = obj.pos.filename.replace("\\", "/").rsplit("/", 1)[-1]
        return Source(file=obj.pkg.name + "/" + base, line=obj.pos.line)

    def parse(self, obj: Object) -> None:
        """Map one package-level object into the store."""
        key = self.identifier(obj).ref()
        try:
            self._parse(obj, key)
        except GenerationError:
            raise
        except GotsError as e:
            raise GenerationError(key, e) from e

    def _parse(self, obj: Object, key: str) -> None:
        match obj:
            case gotypes.TypeName():
                self._parse_type_name(obj, key)
            case gotypes.Const():
                self._parse_const(obj, key)
            case gotypes.Var() | gotypes.Func():
                return
            case _:
                raise UnsupportedTypeError("unsupported object type " + type(obj).__name__)

    def _parse_type_name(self, obj: gotypes.TypeName, key: str) -> None:
        typ = obj.type()
        if isinstance(typ, gotypes.Alias):
            rhs = typ.rhs.underlying()
        else:
            rhs = typ.underlying()
        match rhs:
            case gotypes.Struct():
                self.ts.set_node(key, self.build_struct(obj, rhs))
            case gotypes.Basic():
                # Constants may upgrade this alias into an enum later.
                parsed = self.typescript_type(rhs)
                node = Alias(
                    name=self.identifier(obj),
                    type=parsed.value,
                    parameters=simplify(parsed.type_parameters),
                    source=self.location(obj),
                    comments=comments_for_object(obj),
                )
                for text in parsed.raised_comments:
                    node.leading_comment(text)

                def _set(entry: Entry) -> None:
                    entry.node = node

                self.ts.update_node(key, _set)
            case gotypes.Map() | gotypes.Slice() | gotypes.Array():
                # Never an enum, so no tag support and no deferred upgrade.
                parsed = self.typescript_type(rhs)
                node = Alias(
                    name=self.identifier(obj),
                    type=parsed.value,
                    parameters=simplify(self.type_parameters(typ) + parsed.type_parameters),
                    source=self.location(obj),
                    comments=comments_for_object(obj),
                )
                for text in parsed.raised_comments:
                    node.leading_comment(text)
                self.ts.set_node(key, node)
            case gotypes.Interface():
                # Interfaces only make sense as generic constraints.
                if len(rhs.embeddeds) == 1:
                    embedded = rhs.embeddeds[0]
                    if isinstance(embedded, gotypes.Union):
                        terms = embedded
                    else:
                        terms = gotypes.Union([gotypes.Term(True, embedded)])
                    self.ts.set_node(key, self.build_union(obj, terms))
                    return
                if len(rhs.embeddeds) == 0:
                    # Method sets have no JSON shape.
                    return
                raise UnsupportedTypeError(
                    "interface "
                    + repr(key)
                    + " is not a union, has "
                    + str(len(rhs.embeddeds))
                    + " embeds and unsupported"
                )
            case gotypes.Signature():
                return
            case _:
                raise UnsupportedTypeError("unsupported named type " + repr(type_string(rhs)))

    def _parse_const(self, obj: gotypes.Const, key: str) -> None:
        typ = obj.type()
        while isinstance(typ, gotypes.Alias):
            typ = typ.rhs
        if isinstance(typ, gotypes.Basic):
            self.ts.set_node(key, self.constant_declaration(obj))
            return
        if not isinstance(typ, gotypes.Named):
            raise UnsupportedTypeError("const " + repr(key) + " is not a named type")
        if not isinstance(typ.underlying(), gotypes.Basic):
            raise UnsupportedTypeError(
                "const " + repr(key) + " is not a basic type, enums only support basic"
            )
        base = typ.obj
        if not self.parser.is_loaded(base.pkg_path()):
            # The enum type itself will never be generated.
            logger.debug("skipping const %s, type %s is not loaded", key, type_string(typ))
            return
        if self.parser.is_excluded(base):
            logger.debug("skipping const %s, type %s is excluded", key, type_string(typ))
            return
        self.parser.referenced_types.mark_referenced(base)
        member = EnumMember(
            name=obj.name,
            value=self.constant_value(obj),
            comments=comments_for_object(obj),
        )
        queue_enum_member(self.ts.store, self.identifier(base).ref(), member)

    def constant_value(self, obj: gotypes.Const) -> LiteralType:
        kind = obj.value.kind
        value = obj.value.value
        if kind == "string":
            return LiteralType(str(value))
        if kind == "int":
            return LiteralType(int(value))  # type: ignore[call-overload]
        if kind == "float":
            return LiteralType(float(value))  # type: ignore[arg-type]
        if kind == "bool":
            return LiteralType(bool(value))
        raise UnsupportedTypeError(
            "const " + repr(obj.name) + " is not a supported basic type, enums only support basic"
        )

    def constant_declaration(self, obj: gotypes.Const) -> VariableStatement:
        """const Name = value"""
        decl = VariableDeclaration(name=self.identifier(obj), initializer=self.constant_value(obj))
        return VariableStatement(
            declarations=VariableDeclarationList(declarations=[decl], flags=NODE_FLAGS_CONSTANT),
            source=self.location(obj),
            comments=comments_for_object(obj),
        )

    def build_struct(self, obj: gotypes.TypeName, st: gotypes.Struct) -> Interface:
        """Struct -> Interface. Embedded fields without a json tag become heritage."""
        tsi = Interface(
            name=self.identifier(obj),
            source=self.location(obj),
            comments=comments_for_object(obj),
        )
        tags = [parse_tags(f.tag) for f in st.fields]
        # Declared parameters first, so unused ones still appear.
        params = self.type_parameters(obj.type())
        extends: list[Expr] = []
        for f, t in zip(st.fields, tags):
            if _promoted(f, t.get("json")):
                heritage = self.typescript_type(f.type)
                extends.append(heritage.value)
                params.extend(heritage.type_parameters)
        if len(extends) > 0:
            tsi.heritage.append(heritage_extends(*extends))
        for f, t in zip(st.fields, tags):
            json_tag = t.get("json")
            if _promoted(f, json_tag):
                continue
            if not f.exported():
                continue
            ts_tag = t.get("typescript")
            if ts_tag is not None and ts_tag.name == "-":
                continue
            name = f.name
            optional = False
            if json_tag is not None:
                # `json:"-,"` is a field literally named "-".
                if json_tag.name == "-" and len(json_tag.options) == 0:
                    continue
                if json_tag.name != "":
                    name = json_tag.name
                optional = json_tag.has_option("omitempty") or json_tag.has_option("omitzero")
            parsed = self.typescript_type(f.type)
            params.extend(parsed.type_parameters)
            tsi.fields.append(
                PropertySignature(
                    name=name,
                    type=parsed.value,
                    question_token=optional,
                    comments=comments_for_field(f, parsed.raised_comments),
                )
            )
        tsi.parameters = simplify(params)
        return tsi

    def build_union(self, obj: gotypes.TypeName, u: gotypes.Union) -> Alias:
        """Constraint interface -> Alias of a union of its terms. Tilde is ignored."""
        types: list[Expr] = []
        params = self.type_parameters(obj.type())
        raised: list[str] = []
        for term in u.terms:
            parsed = self.typescript_type(term.type)
            types.append(parsed.value)
            params.extend(parsed.type_parameters)
            raised.extend(parsed.raised_comments)
        alias = Alias(
            name=self.identifier(obj),
            type=UnionType(types=types),
            parameters=simplify(params),
            source=self.location(obj),
            comments=comments_for_object(obj),
        )
        for text in raised:
            alias.leading_comment(text)
        return alias

    def type_parameters(self, typ: gotypes.Type) -> list[TypeParameter]:
        """Declared generic parameters of a named or alias type."""
        params: list[TypeParameter] = []
        for tp in type_params_of(typ):
            params.extend(self.typescript_type(tp).type_parameters)
        return params

    # ============================================================
    # TYPES
    # ============================================================

    def typescript_type(self, typ: gotypes.Type) -> ParsedType:
        match typ:
            case gotypes.Basic():
                return self._basic(typ)
            case gotypes.Struct():
                return ParsedType(keyword(KEYWORD_UNKNOWN)).with_comments(
                    "embedded anonymous struct, please fix by naming it"
                )
            case gotypes.Map():
                key = self.typescript_type(typ.key)
                value = self.typescript_type(typ.elem)
                return ParsedType(
                    reference(RECORD, key.value, value.value),
                    simplify(key.type_parameters + value.type_parameters),
                    key.raised_comments + value.raised_comments,
                )
            case gotypes.Slice() | gotypes.Array():
                if type_string(typ.elem) == "byte":
                    # encoding/json writes byte slices as base64 strings.
                    return ParsedType(array(keyword(KEYWORD_STRING)))
                elem = self.typescript_type(typ.elem)
                return ParsedType(array(elem.value), elem.type_parameters, elem.raised_comments)
            case gotypes.Named():
                return self._named(typ)
            case gotypes.Pointer():
                # nil pointers marshal to null.
                resp = self.typescript_type(typ.elem)
                resp.value = union(resp.value, Null())
                return resp
            case gotypes.Interface():
                if typ.empty():
                    return ParsedType(keyword(KEYWORD_UNKNOWN)).with_comments(
                        "empty interface{} type, falling back to unknown"
                    )
                if len(typ.embeddeds) == 1:
                    return self.typescript_type(typ.embeddeds[0])
                return ParsedType(keyword(KEYWORD_UNKNOWN)).with_comments(
                    "interface type, falling back to unknown"
                )
            case gotypes.Union():
                terms = [self.typescript_type(term.type) for term in typ.terms]
                params: list[TypeParameter] = []
                raised: list[str] = []
                for t in terms:
                    params.extend(t.type_parameters)
                    raised.extend(t.raised_comments)
                return ParsedType(UnionType(types=[t.value for t in terms]), simplify(params), raised)
            case gotypes.TypeParam():
                return self._type_param(typ)
            case gotypes.Alias():
                return self.typescript_type(typ.underlying())
            case _:
                raise UnsupportedTypeError("unknown type: " + type_string(typ))

    def _basic(self, bs: gotypes.Basic) -> ParsedType:
        if bs.is_numeric():
            return ParsedType(keyword(KEYWORD_NUMBER))
        if bs.is_boolean():
            return ParsedType(keyword(KEYWORD_BOOLEAN))
        if bs.is_string():
            return ParsedType(keyword(KEYWORD_STRING))
        if bs.is_invalid():
            return ParsedType(keyword(KEYWORD_ANY)).with_comments(
                "Invalid type, using 'any'. Might be a reference to any external package"
            )
        raise UnsupportedTypeError("unsupported basic type " + repr(bs.name))

    def _named(self, n: gotypes.Named) -> ParsedType:
        override = self.parser.type_overrides.get(type_string(n))
        if override is not None:
            return ParsedType(override())
        ref = self.lookup_named_reference(n)
        if ref is not None:
            args = [self.typescript_type(arg) for arg in n.type_args]
            parsed = ParsedType(reference(self.identifier(ref), *[a.value for a in args]))
            for a in args:
                parsed.type_parameters.extend(a.type_parameters)
                parsed.raised_comments.extend(a.raised_comments)
            return parsed
        if isinstance(n.underlying(), gotypes.Struct):
            # A struct from a package that was never loaded. Its fields would
            # be inlined as an anonymous struct, so leave it unknown.
            return ParsedType(keyword(KEYWORD_UNKNOWN)).with_comments(
                "external type "
                + _go_quote(type_string(n))
                + ", to include this type the package must be explicitly included in the parsing"
            )
        parsed = self.typescript_type(n.underlying())
        return parsed.with_comments(
            "this is likely an enum in an external package " + _go_quote(type_string(n))
        )

    def _type_param(self, tp: gotypes.TypeParam) -> ParsedType:
        if not isinstance(tp.underlying(), gotypes.Interface):
            raise UnsupportedTypeError("type param must be an interface")
        # Generic parameters are local names; they never take a package prefix.
        name = Identifier(name=tp.obj.name, package=tp.obj.pkg_path())
        constraint_name = type_string(tp.constraint)
        pkg_path = tp.obj.pkg_path()
        if pkg_path != "" and constraint_name.startswith(pkg_path + "."):
            constraint_name = constraint_name[len(pkg_path) + 1 :]
        constraint: Expr
        if constraint_name == "comparable":
            constraint = reference(COMPARABLE)
            include_comparable(self.ts)
        elif constraint_name == "any" or (
            isinstance(tp.constraint, gotypes.Interface) and tp.constraint.empty()
        ):
            constraint = keyword(KEYWORD_ANY)
        else:
            constraint = self.typescript_type(tp.constraint).value
        return ParsedType(reference(name), [TypeParameter(name=name, type=constraint)])

    def lookup_named_reference(self, n: gotypes.Named) -> Object | None:
        """The declaring object of n if its package is loaded. Marks it referenced."""
        path = n.obj.pkg_path()
        if path == "" or not self.parser.is_loaded(path):
            return None
        obj = self.parser.packages[path].lookup(n.obj.name)
        if obj is None:
            return None
        if self.parser.is_excluded(obj):
            # Emitted as a reference but never generated.
            return obj
        if self.parser.is_reference(path) and not self.parser.referenced_types.is_referenced(obj):
            logger.info("found external type %s in %s", obj.name, path)
        self.parser.referenced_types.mark_referenced(obj)
        return obj


def _go_quote(s: str) -> str:
    """Quote like Go's %q for the plain names that reach comments."""
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _promoted(f: gotypes.Field, json_tag: Tag | None) -> bool:
    """An embedded field without a json name is inlined by encoding/json."""
    if not f.embedded:
        return False
    return json_tag is None or (json_tag.name == "" and len(json_tag.options) == 0)
