"""Recursive-descent parser for template formulas.

Grammar::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | primary
    primary    := NUMBER
                | NAME "(" expression ("," expression)* ")"
                | NAME
                | "(" expression ")"
"""

from __future__ import annotations

from dataclasses import dataclass

from roof_takeoff.formulas._errors import FormulaSyntaxError
from roof_takeoff.formulas._tokenizer import (
    COMMA,
    END,
    LPAREN,
    NAME,
    NUMBER,
    OP,
    RPAREN,
    Token,
    tokenize,
)

# Size limits; longer or deeper input is a syntax error
MAX_TOKENS = 512
MAX_NESTING = 64

# ---------------------------------------------------------------------------
# Syntax tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Number:
    value: float


@dataclass(frozen=True, slots=True)
class Identifier:
    name: str


@dataclass(frozen=True, slots=True)
class UnaryOp:
    op: str
    operand: Node


@dataclass(frozen=True, slots=True)
class BinaryOp:
    op: str
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Call:
    function: str
    args: tuple[Node, ...]


Node = Number | Identifier | UnaryOp | BinaryOp | Call


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, expression: str) -> None:
        self.expression = expression
        self.tokens = tokenize(expression)
        self.index = 0
        self.depth = 0
        if len(self.tokens) > MAX_TOKENS:
            msg = f"Expression has more than {MAX_TOKENS} tokens"
            raise FormulaSyntaxError(msg, expression=expression)

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def expect(self, kind: str, description: str) -> Token:
        token = self.current
        if token.kind != kind:
            found = token.text or "end of expression"
            msg = f"Expected {description}, found {found!r}"
            raise FormulaSyntaxError(msg, expression=self.expression, position=token.position)
        return self.advance()

    def parse(self) -> Node:
        if self.current.kind == END:
            raise FormulaSyntaxError("Empty expression", expression=self.expression)
        node = self.parse_expression()
        if self.current.kind != END:
            msg = f"Unexpected {self.current.text!r}"
            raise FormulaSyntaxError(msg, expression=self.expression, position=self.current.position)
        return node

    def parse_expression(self) -> Node:
        node = self.parse_term()
        while self.current.kind == OP and self.current.text in "+-":
            op = self.advance().text
            node = BinaryOp(op, node, self.parse_term())
        return node

    def parse_term(self) -> Node:
        node = self.parse_unary()
        while self.current.kind == OP and self.current.text in "*/":
            op = self.advance().text
            node = BinaryOp(op, node, self.parse_unary())
        return node

    def parse_unary(self) -> Node:
        # every parenthesis, call and unary sign passes through here
        self.depth += 1
        if self.depth > MAX_NESTING:
            msg = f"Expression nests deeper than {MAX_NESTING} levels"
            raise FormulaSyntaxError(msg, expression=self.expression, position=self.current.position)
        try:
            if self.current.kind == OP and self.current.text in "+-":
                op = self.advance().text
                return UnaryOp(op, self.parse_unary())
            return self.parse_primary()
        finally:
            self.depth -= 1

    def parse_primary(self) -> Node:
        token = self.current
        if token.kind == NUMBER:
            self.advance()
            return Number(float(token.text))
        if token.kind == NAME:
            self.advance()
            if self.current.kind == LPAREN:
                return self.parse_call(token)
            return Identifier(token.text)
        if token.kind == LPAREN:
            self.advance()
            node = self.parse_expression()
            self.expect(RPAREN, "')'")
            return node
        found = token.text or "end of expression"
        msg = f"Expected a number, identifier or '(', found {found!r}"
        raise FormulaSyntaxError(msg, expression=self.expression, position=token.position)

    def parse_call(self, name: Token) -> Node:
        self.expect(LPAREN, "'('")
        args = [self.parse_expression()]
        while self.current.kind == COMMA:
            self.advance()
            args.append(self.parse_expression())
        self.expect(RPAREN, "')'")
        return Call(name.text, tuple(args))


def parse(expression: str) -> Node:
    """Parse *expression* into a syntax tree.

    Raises:
        FormulaSyntaxError: If the expression is malformed.
    """
    if not isinstance(expression, str):
        msg = f"Expression must be a string, got {type(expression).__name__}"
        raise FormulaSyntaxError(msg)
    return _Parser(expression).parse()
