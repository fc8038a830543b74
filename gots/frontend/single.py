"""Go type expressions: `map[string]*string` -> TypeScript expression.

Lets a caller write an override as a Go type instead of building IR by hand.
Only universe types can be named; a qualified name such as `time.Time`
would need an importer and is rejected, the same as an undefined name.

Grammar:

    type := '*' type
          | '[' ']' type
          | '[' INT ']' type
          | 'map' '[' type ']' type
          | 'interface' '{' '}'
          | 'struct' '{' '}'
          | IDENT
"""

from __future__ import annotations

from typing import NoReturn

from .. import gotypes
from ..errors import ExpressionParseError
from ..ir import Expr

TK_IDENT = "IDENT"
TK_INT = "INT"
TK_OP = "OP"
TK_EOF = "EOF"

OPS: set[str] = {"*", "[", "]", "{", "}", "."}


class Token:
    def __init__(self, type_: str, value: str, pos: int):
        self.type: str = type_
        self.value: str = value
        self.pos: int = pos

    def __repr__(self) -> str:
        return "Token(" + self.type + ", " + repr(self.value) + ", " + str(self.pos) + ")"


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def tokenize(expr: str) -> list[Token]:
    """Tokenize a type expression into a list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(expr):
        c = expr[pos]
        if c == " " or c == "\t":
            pos += 1
            continue
        start = pos
        if _is_alpha(c):
            while pos < len(expr) and (_is_alpha(expr[pos]) or _is_digit(expr[pos])):
                pos += 1
            tokens.append(Token(TK_IDENT, expr[start:pos], start))
            continue
        if _is_digit(c):
            while pos < len(expr) and _is_digit(expr[pos]):
                pos += 1
            tokens.append(Token(TK_INT, expr[start:pos], start))
            continue
        if c in OPS:
            tokens.append(Token(TK_OP, c, start))
            pos += 1
            continue
        raise ExpressionParseError("unexpected character " + repr(c), expr, pos)
    tokens.append(Token(TK_EOF, "", len(expr)))
    return tokens


class Parser:
    """Recursive descent over a single type expression."""

    def __init__(self, expr: str):
        self.expr: str = expr
        self.tokens: list[Token] = tokenize(expr)
        self.pos: int = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def expect(self, value: str) -> Token:
        tok = self.advance()
        if tok.type != TK_OP or tok.value != value:
            self.fail("expected " + repr(value), tok)
        return tok

    def fail(self, msg: str, tok: Token) -> NoReturn:
        raise ExpressionParseError(msg, self.expr, tok.pos)

    def parse(self) -> gotypes.Type:
        typ = self.parse_type()
        tok = self.peek()
        if tok.type != TK_EOF:
            self.fail("unexpected " + repr(tok.value) + " after type", tok)
        return typ

    def parse_type(self) -> gotypes.Type:
        tok = self.advance()
        if tok.type == TK_OP and tok.value == "*":
            return gotypes.Pointer(self.parse_type())
        if tok.type == TK_OP and tok.value == "[":
            nxt = self.advance()
            if nxt.type == TK_OP and nxt.value == "]":
                return gotypes.Slice(self.parse_type())
            if nxt.type == TK_INT:
                self.expect("]")
                return gotypes.Array(self.parse_type(), int(nxt.value))
            self.fail("expected ']' or array length", nxt)
        if tok.type == TK_IDENT:
            return self.parse_named(tok)
        if tok.type == TK_EOF:
            self.fail("unexpected end of expression", tok)
        self.fail("unexpected " + repr(tok.value), tok)

    def parse_named(self, tok: Token) -> gotypes.Type:
        name = tok.value
        if name == "map":
            self.expect("[")
            key = self.parse_type()
            self.expect("]")
            return gotypes.Map(key, self.parse_type())
        if name == "interface":
            self.expect("{")
            self.expect("}")
            return gotypes.Interface()
        if name == "struct":
            self.expect("{")
            self.expect("}")
            return gotypes.Struct()
        nxt = self.peek()
        if nxt.type == TK_OP and nxt.value == ".":
            self.fail("undefined: " + name, tok)
        if name in gotypes.UNIVERSE_BASICS:
            return gotypes.basic(name)
        if name == "error" or name == "any":
            return gotypes.UNIVERSE_TYPES[name]
        self.fail("undefined: " + name, tok)


def parse_type_expression(expr: str) -> gotypes.Type:
    return Parser(expr).parse()


def parse_expression(expr: str) -> Expr:
    """Map a Go type expression to a fresh TypeScript expression."""
    from ..typescript import Typescript
    from .convert import TypeMapper
    from .parser import GoParser

    typ = parse_type_expression(expr)
    parser = GoParser()
    mapper = TypeMapper(Typescript(parser), parser)
    return mapper.typescript_type(typ).value
