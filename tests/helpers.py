"""Builders for small Go source models."""

from gots import gotypes
from gots.frontend.convert import TypeMapper
from gots.frontend.parser import GoParser
from gots.gotypes import Field, Package, Position, Struct, TypeName
from gots.serialize import HEADER
from gots.typescript import Typescript

PKG_PATH = "example.com/api"


def new_package(path: str = PKG_PATH, name: str | None = None) -> Package:
    if name is None:
        name = path.rsplit("/", 1)[-1]
    return Package(path, name)


def field(
    name: str,
    typ: gotypes.Type,
    tag: str = "",
    embedded: bool = False,
    doc: list[str] | None = None,
    comment: list[str] | None = None,
) -> Field:
    return Field(
        name=name,
        type=typ,
        embedded=embedded,
        tag=tag,
        doc=doc if doc is not None else [],
        comment=comment if comment is not None else [],
    )


def struct(pkg: Package, name: str, *fields: Field, file: str = "", doc: list[str] | None = None) -> TypeName:
    pos = Position(file, 1) if file != "" else None
    return pkg.new_type(name, Struct(list(fields)), None, pos, doc)


def named(obj: TypeName) -> gotypes.Named:
    typ = obj.type()
    assert isinstance(typ, gotypes.Named)
    return typ


def string_enum(pkg: Package, name: str, *values: tuple[str, str]) -> TypeName:
    """type name string, then one typed string constant per (const name, value)."""
    obj = pkg.new_type(name, gotypes.basic("string"))
    for const_name, value in values:
        pkg.new_const(const_name, obj.type(), "string", value)
    return obj


def convert(
    *pkgs: Package,
    references: tuple[Package, ...] = (),
    mutations: tuple = (),
    parser: GoParser | None = None,
) -> Typescript:
    if parser is None:
        parser = GoParser()
    for p in pkgs:
        parser.include_generate(p)
    for p in references:
        parser.include_reference(p)
    ts = parser.to_typescript()
    ts.apply_mutations(*mutations)
    return ts


def render(*pkgs: Package, **kwargs) -> str:
    """Serialized output without the generated-code header."""
    out = convert(*pkgs, **kwargs).serialize()
    assert out.startswith(HEADER)
    return out[len(HEADER) :]


def mapper(parser: GoParser | None = None) -> TypeMapper:
    if parser is None:
        parser = GoParser()
    return TypeMapper(Typescript(parser), parser)
