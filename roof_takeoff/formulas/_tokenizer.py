"""Tokenizer for template formulas."""

from __future__ import annotations

import re
from dataclasses import dataclass

from roof_takeoff.formulas._errors import FormulaSyntaxError

NUMBER = "NUMBER"
NAME = "NAME"
OP = "OP"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
COMMA = "COMMA"
END = "END"

# Segments after a dot may start with a digit: ``waste.10pct.squares``
_TOKEN_RE = re.compile(
    r"""
    (?P<NUMBER>\d+(?:\.\d*)?|\.\d+)
  | (?P<NAME>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z0-9_]+)*)
  | (?P<OP>[-+*/])
  | (?P<LPAREN>\()
  | (?P<RPAREN>\))
  | (?P<COMMA>,)
  | (?P<SKIP>\s+)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class Token:
    kind: str
    text: str
    position: int


def tokenize(expression: str) -> list[Token]:
    """Split *expression* into tokens, ending with an ``END`` token.

    Raises:
        FormulaSyntaxError: On a character that starts no token.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(expression):
        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            msg = f"Unexpected character {expression[pos]!r}"
            raise FormulaSyntaxError(msg, expression=expression, position=pos)
        kind = match.lastgroup
        if kind != "SKIP":
            tokens.append(Token(kind, match.group(), pos))  # type: ignore[arg-type]
        pos = match.end()
    tokens.append(Token(END, "", len(expression)))
    return tokens
