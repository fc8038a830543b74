"""TypeScript printer tests: one declaration at a time."""

import pytest

from gots.backend.typescript import to_typescript, type_text
from gots.backend.util import escape_string, property_name
from gots.errors import RenderError
from gots.ir import (
    KEYWORD_KEYOF,
    KEYWORD_NUMBER,
    KEYWORD_STRING,
    NODE_FLAGS_LET,
    NODE_FLAGS_NONE,
    Alias,
    ArrayLiteralType,
    Enum,
    EnumMember,
    Identifier,
    Interface,
    LiteralKeyword,
    LiteralType,
    Null,
    PropertySignature,
    Source,
    SyntheticComment,
    TupleType,
    TypeParameter,
    VariableDeclaration,
    VariableDeclarationList,
    VariableStatement,
    array,
    intersection,
    keyword,
    operator_node,
    reference,
    union,
)


def comment(text: str, leading: bool = True, single_line: bool = True) -> SyntheticComment:
    return SyntheticComment(leading=leading, single_line=single_line, text=text, trailing_new_line=False)


@pytest.mark.parametrize(
    "expr,expected",
    [
        (keyword(KEYWORD_STRING), "string"),
        (LiteralType("a\"b"), '"a\\"b"'),
        (LiteralType(True), "true"),
        (LiteralType(3), "3"),
        (LiteralType(1.5), "1.5"),
        (LiteralType(2.0), "2"),
        (Null(), "null"),
        (union(), "never"),
        (union(keyword(KEYWORD_STRING)), "string"),
        (array(union(keyword(KEYWORD_STRING), Null())), "(string | null)[]"),
        (array(union(keyword(KEYWORD_STRING))), "string[]"),
        (intersection(reference("A"), union(reference("B"), reference("C"))), "A & (B | C)"),
        (TupleType(node=keyword(KEYWORD_NUMBER), length=3), "[number, number, number]"),
        (TupleType(node=keyword(KEYWORD_NUMBER), length=0), "[]"),
        (ArrayLiteralType(elements=[LiteralType("a"), LiteralType("b")]), '["a", "b"]'),
        (reference("Record", keyword(KEYWORD_STRING), array(reference("T"))), "Record<string, T[]>"),
        (operator_node(KEYWORD_KEYOF, reference("T")), "keyof T"),
    ],
)
def test_type_text(expr, expected: str):
    assert type_text(expr) == expected


def test_unknown_keyword():
    with pytest.raises(RenderError, match="unknown keyword"):
        type_text(LiteralKeyword("NotAKeyword"))


def test_non_finite_literal():
    with pytest.raises(RenderError):
        type_text(LiteralType(float("inf")))


def test_property_names():
    assert property_name("name") == "name"
    assert property_name("$ref") == "$ref"
    assert property_name("user-id") == '"user-id"'
    assert property_name("-") == '"-"'
    assert property_name("1st") == '"1st"'


def test_escape_string():
    assert escape_string('a"b\\c\nd') == 'a\\"b\\\\c\\nd'


def test_escape_nul_before_digit():
    assert escape_string("\x001") == "\\x001"
    assert type_text(LiteralType("a\x000")) == '"a\\x000"'


def test_interface_with_everything():
    node = Interface(
        name=Identifier("Page", prefix="Api"),
        fields=[
            PropertySignature(name="items", type=array(reference("T")), comments=[comment(" The items.")]),
            PropertySignature(
                name="next",
                type=union(keyword(KEYWORD_STRING), Null()),
                question_token=True,
                comments=[comment(" trailing", leading=False)],
            ),
        ],
        parameters=[TypeParameter(name=Identifier("T"), type=reference("Comparable"))],
        source=Source(file="api/page.go", line=4),
        comments=[comment(" Page is a page.")],
    )
    assert to_typescript(node) == (
        "// From api/page.go\n"
        "// Page is a page.\n"
        "interface ApiPage<T extends Comparable> {\n"
        "    // The items.\n"
        "    items: T[];\n"
        "    next?: string | null; // trailing\n"
        "}"
    )


def test_block_and_trailing_comments():
    node = Alias(
        name=Identifier("ID"),
        type=keyword(KEYWORD_STRING),
        comments=[
            comment(" line trailing", leading=False),
            comment(" block above ", single_line=False),
            comment(" block trailing ", leading=False, single_line=False),
        ],
    )
    assert to_typescript(node) == "/* block above */\ntype ID = string; /* block trailing */ // line trailing"


def test_enum_members():
    node = Enum(
        name=Identifier("Kind"),
        members=[
            EnumMember("A", LiteralType("a"), comments=[comment(" first")]),
            EnumMember("B", LiteralType("b"), comments=[comment(" second", leading=False)]),
            EnumMember("user-c", LiteralType(3)),
        ],
    )
    assert to_typescript(node) == (
        "enum Kind {\n"
        "    // first\n"
        '    A = "a",\n'
        '    B = "b", // second\n'
        '    "user-c" = 3\n'
        "}"
    )


def test_empty_enum():
    assert to_typescript(Enum(name=Identifier("Nothing"))) == "enum Nothing {\n}"


def test_variable_statements():
    decl = VariableDeclaration(name=Identifier("x"), type=keyword(KEYWORD_NUMBER), initializer=LiteralType(1))
    let = VariableStatement(declarations=VariableDeclarationList(declarations=[decl], flags=NODE_FLAGS_LET))
    assert to_typescript(let) == "let x: number = 1;"
    bare = VariableDeclaration(name=Identifier("y"), exclamation_mark=True, type=keyword(KEYWORD_NUMBER))
    var = VariableStatement(declarations=VariableDeclarationList(declarations=[bare], flags=NODE_FLAGS_NONE))
    assert to_typescript(var) == "var y!: number;"


def test_type_parameter_default():
    node = Alias(
        name=Identifier("Box"),
        type=reference("T"),
        parameters=[TypeParameter(name=Identifier("T"), type=keyword(KEYWORD_STRING), default_type=LiteralType("x"))],
    )
    assert to_typescript(node) == 'type Box<T extends string = "x"> = T;'


class Strange:
    def __init__(self):
        self.comments = []
        self.source = Source()


def test_unsupported_declaration():
    with pytest.raises(RenderError, match="unsupported declaration Strange"):
        to_typescript(Strange())
