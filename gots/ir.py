"""gots IR - TypeScript declaration graph.

This module defines the complete node taxonomy the converter builds and the
printer consumes. Each node's docstring documents its semantics and invariants.

Architecture:
    Go packages -> Frontend (mapping, enums, references) -> [IR] -> Middleend (mutations) -> Backend -> TypeScript

Frontend produces the declaration graph. Middleend rewrites it in place.
Backend renders one declaration at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union


# ============================================================
# IDENTIFIERS AND PROVENANCE
# ============================================================


@dataclass(unsafe_hash=True)
class Identifier:
    """A name in the generated output.

    Identifiers are unique within a Go package. The package path is kept to
    disambiguate same-named declarations from different packages; all output
    lands in one TypeScript namespace, so `ref()` is what gets emitted.
    """

    name: str
    package: str = ""
    prefix: str = ""

    def ref(self) -> str:
        """Identifier used in the generated code."""
        return self.prefix + self.name

    def go_name(self) -> str:
        """Unique name across all Go packages."""
        if self.package != "":
            return self.package + "." + self.name
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass
class SyntheticComment:
    """A comment attached to a node.

    | leading | single_line | Rendered                 |
    |---------|-------------|--------------------------|
    | True    | True        | `// text` above the node |
    | True    | False       | `/* text */` above       |
    | False   | True        | `// text` after the node |
    | False   | False       | `/* text */` after       |
    """

    leading: bool
    single_line: bool
    text: str
    trailing_new_line: bool


def leading_comment(text: str) -> SyntheticComment:
    """The most common comment: a single line above the node."""
    # Go comments are `// ` prefixed, so keep the space.
    return SyntheticComment(
        leading=True, single_line=True, text=" " + text, trailing_new_line=False
    )


@dataclass
class Source:
    """The Go file a declaration is sourced from."""

    file: str = ""
    line: int = 0

    def source_comment(self) -> SyntheticComment | None:
        """`From <file>` comment, or None if the file is unknown."""
        if self.file == "":
            return None
        return SyntheticComment(
            leading=True,
            single_line=True,
            text=" From " + self.file,
            trailing_new_line=False,
        )


Modifier = Literal[
    "AbstractKeyword",
    "AccessorKeyword",
    "AsyncKeyword",
    "ConstKeyword",
    "DeclareKeyword",
    "DefaultKeyword",
    "ExportKeyword",
    "InKeyword",
    "PrivateKeyword",
    "ProtectedKeyword",
    "PublicKeyword",
    "ReadonlyKeyword",
    "OutKeyword",
    "OverrideKeyword",
    "StaticKeyword",
]

MODIFIER_EXPORT: Modifier = "ExportKeyword"
MODIFIER_READONLY: Modifier = "ReadonlyKeyword"

NODE_FLAGS_NONE = 0
NODE_FLAGS_LET = 1
NODE_FLAGS_CONSTANT = 2


# ============================================================
# EXPRESSIONS
#
# Type-level expressions. Every use site owns its expression instance;
# mutation passes rewrite them in place, so sharing one instance between
# two fields would leak a rewrite into both.
# ============================================================


@dataclass
class LiteralKeyword:
    """Primitive type keyword.

    | keyword          | TS        |
    |------------------|-----------|
    | VoidKeyword      | void      |
    | AnyKeyword       | any       |
    | BooleanKeyword   | boolean   |
    | NumberKeyword    | number    |
    | StringKeyword    | string    |
    | UnknownKeyword   | unknown   |
    | NeverKeyword     | never     |
    | UndefinedKeyword | undefined |
    | BigIntKeyword    | bigint    |
    """

    keyword: str


KEYWORD_VOID = "VoidKeyword"
KEYWORD_ANY = "AnyKeyword"
KEYWORD_BOOLEAN = "BooleanKeyword"
KEYWORD_INTRINSIC = "IntrinsicKeyword"
KEYWORD_NEVER = "NeverKeyword"
KEYWORD_NUMBER = "NumberKeyword"
KEYWORD_OBJECT = "ObjectKeyword"
KEYWORD_STRING = "StringKeyword"
KEYWORD_SYMBOL = "SymbolKeyword"
KEYWORD_UNDEFINED = "UndefinedKeyword"
KEYWORD_UNKNOWN = "UnknownKeyword"
KEYWORD_BIGINT = "BigIntKeyword"
KEYWORD_READONLY = "ReadonlyKeyword"
KEYWORD_UNIQUE = "UniqueKeyword"
KEYWORD_KEYOF = "KeyOfKeyword"

TYPE_KEYWORDS = frozenset(
    {
        KEYWORD_VOID,
        KEYWORD_ANY,
        KEYWORD_BOOLEAN,
        KEYWORD_INTRINSIC,
        KEYWORD_NEVER,
        KEYWORD_NUMBER,
        KEYWORD_OBJECT,
        KEYWORD_STRING,
        KEYWORD_SYMBOL,
        KEYWORD_UNDEFINED,
        KEYWORD_UNKNOWN,
        KEYWORD_BIGINT,
    }
)

OPERATOR_KEYWORDS = frozenset({KEYWORD_READONLY, KEYWORD_UNIQUE, KEYWORD_KEYOF})


@dataclass
class LiteralType:
    """Constant value used as a type or initializer: "foo", 5, 1.5, true."""

    value: str | int | float | bool


@dataclass
class ReferenceType:
    """Reference to another type by name, with optional generic arguments."""

    name: Identifier
    arguments: list[Expr] = field(default_factory=list)


@dataclass
class ArrayType:
    """T[]"""

    node: Expr


@dataclass
class TupleType:
    """Homogeneous fixed-length tuple: [T, T, T].

    Invariants:
    - length >= 0
    """

    node: Expr
    length: int


@dataclass
class ArrayLiteralType:
    """Array literal expression: ["a", "b"]. Used as an initializer."""

    elements: list[Expr] = field(default_factory=list)


@dataclass
class UnionType:
    """A | B | C"""

    types: list[Expr] = field(default_factory=list)


@dataclass
class IntersectionType:
    """A & B & C"""

    types: list[Expr] = field(default_factory=list)


@dataclass
class Null:
    """The null type."""


@dataclass
class OperatorNodeType:
    """Keyword-prefixed type: readonly T[], unique symbol, keyof T.

    Invariants:
    - keyword in OPERATOR_KEYWORDS
    """

    keyword: str
    type: Expr


@dataclass
class PropertySignature:
    """A field in an interface or type literal."""

    name: str
    type: Expr
    modifiers: list[Modifier] = field(default_factory=list)
    question_token: bool = False
    comments: list[SyntheticComment] = field(default_factory=list)

    def leading_comment(self, text: str) -> None:
        self.comments.append(leading_comment(text))


@dataclass
class TypeLiteralNode:
    """Anonymous structural type: { a: string; b?: number }"""

    members: list[PropertySignature] = field(default_factory=list)


@dataclass
class VariableDeclaration:
    """`name: type = initializer` inside a variable declaration list."""

    name: Identifier
    type: Expr | None = None
    initializer: Expr | None = None
    exclamation_mark: bool = False


@dataclass
class VariableDeclarationList:
    """const a = 1, b = 2"""

    declarations: list[VariableDeclaration] = field(default_factory=list)
    flags: int = NODE_FLAGS_CONSTANT


Expr = Union[
    LiteralKeyword,
    LiteralType,
    ReferenceType,
    ArrayType,
    TupleType,
    ArrayLiteralType,
    UnionType,
    IntersectionType,
    Null,
    OperatorNodeType,
    TypeLiteralNode,
    VariableDeclarationList,
    VariableDeclaration,
]


# ============================================================
# GENERICS AND HERITAGE
# ============================================================


@dataclass
class TypeParameter:
    """A generic parameter.

    Foo[T comparable] ->
    - name: T
    - type: Comparable
    - default_type: None (no Go equivalent, never set by the frontend)
    """

    name: Identifier
    type: Expr | None = None
    default_type: Expr | None = None
    modifiers: list[Modifier] = field(default_factory=list)


HERITAGE_EXTENDS = "extends"
HERITAGE_IMPLEMENTS = "implements"


@dataclass
class HeritageClause:
    """interface Foo extends Bar, Baz {}"""

    token: Literal["extends", "implements"]
    args: list[Expr] = field(default_factory=list)


def heritage_extends(*args: Expr) -> HeritageClause:
    return HeritageClause(token=HERITAGE_EXTENDS, args=list(args))


# ============================================================
# DECLARATIONS
#
# Top level nodes. Each one renders to valid TypeScript on its own.
# ============================================================


@dataclass
class Declaration:
    """Base for all top level declarations. Abstract."""

    def leading_comment(self, text: str) -> None:
        self.comments.append(leading_comment(text))


@dataclass
class Interface(Declaration):
    """interface Name<T> extends Base { fields }

    Invariants (post-frontend):
    - parameters are simplified (unique names)
    """

    name: Identifier
    fields: list[PropertySignature] = field(default_factory=list)
    parameters: list[TypeParameter] = field(default_factory=list)
    heritage: list[HeritageClause] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)
    source: Source = field(default_factory=Source)
    comments: list[SyntheticComment] = field(default_factory=list)


@dataclass
class Alias(Declaration):
    """type Name<T> = type"""

    name: Identifier
    type: Expr
    parameters: list[TypeParameter] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)
    source: Source = field(default_factory=Source)
    comments: list[SyntheticComment] = field(default_factory=list)


@dataclass
class EnumMember:
    """Name = value inside an enum."""

    name: str
    value: Expr | None = None
    comments: list[SyntheticComment] = field(default_factory=list)


@dataclass
class Enum(Declaration):
    """enum Name { members }"""

    name: Identifier
    members: list[EnumMember] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)
    source: Source = field(default_factory=Source)
    comments: list[SyntheticComment] = field(default_factory=list)


@dataclass
class VariableStatement(Declaration):
    """const name: type = value"""

    declarations: VariableDeclarationList
    modifiers: list[Modifier] = field(default_factory=list)
    source: Source = field(default_factory=Source)
    comments: list[SyntheticComment] = field(default_factory=list)


DeclarationType = Union[Interface, Alias, Enum, VariableStatement]


# ============================================================
# CONSTRUCTORS
# ============================================================


def keyword(word: str) -> LiteralKeyword:
    return LiteralKeyword(word)


def reference(name: Identifier | str, *args: Expr) -> ReferenceType:
    if isinstance(name, str):
        name = Identifier(name)
    return ReferenceType(name=name, arguments=list(args))


def array(node: Expr) -> ArrayType:
    return ArrayType(node=node)


def union(*types: Expr) -> UnionType:
    return UnionType(types=list(types))


def intersection(*types: Expr) -> IntersectionType:
    return IntersectionType(types=list(types))


def operator_node(word: str, node: Expr) -> OperatorNodeType:
    return OperatorNodeType(keyword=word, type=node)


def is_null(expr: object) -> bool:
    return isinstance(expr, Null)


def declaration_name(node: DeclarationType) -> str:
    """Emitted name of a declaration; a variable statement uses its first declaration."""
    match node:
        case Interface(name=name) | Alias(name=name) | Enum(name=name):
            return name.ref()
        case VariableStatement(declarations=decls):
            if len(decls.declarations) == 0:
                return ""
            return decls.declarations[0].name.ref()
        case _:
            raise NotImplementedError("Unknown declaration")
