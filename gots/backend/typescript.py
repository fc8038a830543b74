"""TypeScript printer: one finished declaration -> TypeScript text.

Output follows the TypeScript compiler's printer for synthesized nodes:
4 space indentation, one member per line, `;` after interface members and
`,` between enum members. Comments print where they are attached:

| Comment                 | Printed                            |
|-------------------------|------------------------------------|
| Source provenance       | `// From pkg/file.go`, first line  |
| leading, single line    | `//text` on its own line above     |
| leading, multi line     | `/*text*/` on its own line above   |
| trailing                | after the node, same line          |
"""

from __future__ import annotations

from ..errors import RenderError
from ..ir import (
    KEYWORD_ANY,
    KEYWORD_BIGINT,
    KEYWORD_BOOLEAN,
    KEYWORD_INTRINSIC,
    KEYWORD_KEYOF,
    KEYWORD_NEVER,
    KEYWORD_NUMBER,
    KEYWORD_OBJECT,
    KEYWORD_READONLY,
    KEYWORD_STRING,
    KEYWORD_SYMBOL,
    KEYWORD_UNDEFINED,
    KEYWORD_UNIQUE,
    KEYWORD_UNKNOWN,
    KEYWORD_VOID,
    NODE_FLAGS_CONSTANT,
    NODE_FLAGS_LET,
    Alias,
    ArrayLiteralType,
    ArrayType,
    DeclarationType,
    Enum,
    EnumMember,
    Expr,
    HeritageClause,
    Interface,
    IntersectionType,
    LiteralKeyword,
    LiteralType,
    Modifier,
    Null,
    OperatorNodeType,
    PropertySignature,
    ReferenceType,
    SyntheticComment,
    TupleType,
    TypeLiteralNode,
    TypeParameter,
    UnionType,
    VariableDeclaration,
    VariableDeclarationList,
    VariableStatement,
)
from .util import Emitter, property_name, string_literal

KEYWORD_TEXT: dict[str, str] = {
    KEYWORD_VOID: "void",
    KEYWORD_ANY: "any",
    KEYWORD_BOOLEAN: "boolean",
    KEYWORD_INTRINSIC: "intrinsic",
    KEYWORD_NEVER: "never",
    KEYWORD_NUMBER: "number",
    KEYWORD_OBJECT: "object",
    KEYWORD_STRING: "string",
    KEYWORD_SYMBOL: "symbol",
    KEYWORD_UNDEFINED: "undefined",
    KEYWORD_UNKNOWN: "unknown",
    KEYWORD_BIGINT: "bigint",
}

OPERATOR_TEXT: dict[str, str] = {
    KEYWORD_READONLY: "readonly",
    KEYWORD_UNIQUE: "unique",
    KEYWORD_KEYOF: "keyof",
}

INDENT = "    "


class TsPrinter(Emitter):
    """Render declarations. Reusable; each call starts from a clean buffer."""

    def __init__(self) -> None:
        super().__init__(INDENT)

    def print_node(self, node: DeclarationType) -> str:
        self.indent = 0
        self.lines = []
        comments = list(node.comments)
        source = node.source.source_comment()
        if source is not None:
            comments.insert(0, source)
        for text in _leading_lines(comments):
            self.line(text)
        match node:
            case Interface():
                self._emit_interface(node)
            case Alias():
                self._emit_alias(node)
            case Enum():
                self._emit_enum(node)
            case VariableStatement():
                self._emit_variable_statement(node)
            case _:
                raise RenderError("unsupported declaration " + type(node).__name__)
        trailing = _trailing_text(comments)
        if trailing != "":
            self.append(trailing)
        return self.output()

    def _block(self, text: str) -> None:
        for part in text.split("\n"):
            self.line(part)

    # ============================================================
    # DECLARATIONS
    # ============================================================

    def _emit_interface(self, iface: Interface) -> None:
        header = _modifiers(iface.modifiers) + "interface " + iface.name.ref()
        header += _type_parameters(iface.parameters)
        header += _heritage(iface.heritage)
        self.line(header + " {")
        self.indent += 1
        for fld in iface.fields:
            self._block(_property_signature(fld))
        self.indent -= 1
        self.line("}")

    def _emit_alias(self, alias: Alias) -> None:
        text = _modifiers(alias.modifiers) + "type " + alias.name.ref()
        text += _type_parameters(alias.parameters)
        text += " = " + type_text(alias.type) + ";"
        self._block(text)

    def _emit_enum(self, enum: Enum) -> None:
        self.line(_modifiers(enum.modifiers) + "enum " + enum.name.ref() + " {")
        self.indent += 1
        for i, member in enumerate(enum.members):
            sep = "," if i < len(enum.members) - 1 else ""
            self._block(_enum_member(member, sep))
        self.indent -= 1
        self.line("}")

    def _emit_variable_statement(self, stmt: VariableStatement) -> None:
        self._block(_modifiers(stmt.modifiers) + _declaration_list(stmt.declarations) + ";")


def to_typescript(node: DeclarationType) -> str:
    """Render one declaration."""
    return TsPrinter().print_node(node)


# ============================================================
# MEMBERS
# ============================================================


def _property_signature(prop: PropertySignature) -> str:
    lines = _leading_lines(prop.comments)
    text = _modifiers(prop.modifiers) + property_name(prop.name)
    if prop.question_token:
        text += "?"
    text += ": " + type_text(prop.type) + ";"
    lines.append(text + _trailing_text(prop.comments))
    return "\n".join(lines)


def _enum_member(member: EnumMember, sep: str) -> str:
    lines = _leading_lines(member.comments)
    text = property_name(member.name)
    if member.value is not None:
        text += " = " + type_text(member.value)
    lines.append(text + sep + _trailing_text(member.comments))
    return "\n".join(lines)


def _type_parameters(params: list[TypeParameter]) -> str:
    if len(params) == 0:
        return ""
    return "<" + ", ".join(_type_parameter(p) for p in params) + ">"


def _type_parameter(param: TypeParameter) -> str:
    text = _modifiers(param.modifiers) + param.name.ref()
    if param.type is not None:
        text += " extends " + type_text(param.type)
    if param.default_type is not None:
        text += " = " + type_text(param.default_type)
    return text


def _heritage(clauses: list[HeritageClause]) -> str:
    text = ""
    for clause in clauses:
        if len(clause.args) == 0:
            continue
        text += " " + clause.token + " " + ", ".join(type_text(a) for a in clause.args)
    return text


def _declaration_list(decls: VariableDeclarationList) -> str:
    if decls.flags == NODE_FLAGS_CONSTANT:
        word = "const"
    elif decls.flags == NODE_FLAGS_LET:
        word = "let"
    else:
        word = "var"
    return word + " " + ", ".join(_variable_declaration(d) for d in decls.declarations)


def _variable_declaration(decl: VariableDeclaration) -> str:
    text = decl.name.ref()
    if decl.exclamation_mark:
        text += "!"
    if decl.type is not None:
        text += ": " + type_text(decl.type)
    if decl.initializer is not None:
        text += " = " + type_text(decl.initializer)
    return text


def _modifiers(mods: list[Modifier]) -> str:
    if len(mods) == 0:
        return ""
    return " ".join(_modifier(m) for m in mods) + " "


def _modifier(mod: Modifier) -> str:
    return mod.removesuffix("Keyword").lower()


# ============================================================
# COMMENTS
# ============================================================


def _comment_text(c: SyntheticComment) -> str:
    if c.single_line:
        return "//" + c.text
    return "/*" + c.text + "*/"


def _leading_lines(comments: list[SyntheticComment]) -> list[str]:
    return [_comment_text(c) for c in comments if c.leading]


def _trailing_text(comments: list[SyntheticComment]) -> str:
    """Trailing comments, each preceded by a space. Line comments go last."""
    blocks = [" /*" + c.text + "*/" for c in comments if not c.leading and not c.single_line]
    lines = [" //" + c.text for c in comments if not c.leading and c.single_line]
    return "".join(blocks) + "".join(lines)


# ============================================================
# EXPRESSIONS
# ============================================================


def type_text(expr: Expr) -> str:
    """Render an expression. Type literals span lines, indented one level."""
    match expr:
        case LiteralKeyword(keyword=kw):
            text = KEYWORD_TEXT.get(kw)
            if text is None:
                raise RenderError("unknown keyword " + repr(kw))
            return text
        case LiteralType(value=value):
            return _literal(value)
        case ReferenceType(name=name, arguments=args):
            if len(args) == 0:
                return name.ref()
            return name.ref() + "<" + ", ".join(type_text(a) for a in args) + ">"
        case ArrayType(node=node):
            return _wrap(node, (UnionType, IntersectionType, OperatorNodeType)) + "[]"
        case TupleType(node=node, length=length):
            return "[" + ", ".join(type_text(node) for _ in range(length)) + "]"
        case ArrayLiteralType(elements=elements):
            return "[" + ", ".join(type_text(e) for e in elements) + "]"
        case UnionType(types=types):
            if len(types) == 0:
                return "never"
            return " | ".join(type_text(t) for t in types)
        case IntersectionType(types=types):
            if len(types) == 0:
                return "unknown"
            return " & ".join(_wrap(t, (UnionType,)) for t in types)
        case Null():
            return "null"
        case OperatorNodeType(keyword=kw, type=operand):
            word = OPERATOR_TEXT.get(kw)
            if word is None:
                raise RenderError("unknown type operator " + repr(kw))
            return word + " " + _wrap(operand, (UnionType, IntersectionType))
        case TypeLiteralNode(members=members):
            if len(members) == 0:
                return "{}"
            body: list[str] = []
            for m in members:
                for part in _property_signature(m).split("\n"):
                    body.append(INDENT + part)
            return "{\n" + "\n".join(body) + "\n}"
        case VariableDeclarationList():
            return _declaration_list(expr)
        case VariableDeclaration():
            return _variable_declaration(expr)
        case _:
            raise RenderError("unsupported expression " + type(expr).__name__)


def _wrap(expr: Expr, kinds: tuple[type, ...]) -> str:
    text = type_text(expr)
    if isinstance(expr, kinds) and not _single(expr):
        return "(" + text + ")"
    return text


def _single(expr: Expr) -> bool:
    """A one-member union or intersection prints without an operator."""
    if isinstance(expr, (UnionType, IntersectionType)):
        return len(expr.types) <= 1
    return False


def _literal(value: str | int | float | bool) -> str:
    # bool before int: True is an int.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return string_literal(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise RenderError("non-finite numeric literal " + repr(value))
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    raise RenderError("unsupported literal " + type(value).__name__)
