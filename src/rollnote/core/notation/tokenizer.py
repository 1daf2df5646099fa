"""
Tokenizer for dice notation.

Converts a notation string into a sequence of typed tokens. Input is
expected in lowercase canonical form; the CLI lowercases before parsing.
"""

from __future__ import annotations

import re
from enum import StrEnum, auto


class TokenKind(StrEnum):
    """Token types for dice notation."""

    # Literals
    INT = auto()

    # Dice
    D = auto()

    # Modifiers
    KEEP_HIGH = auto()
    KEEP_LOW = auto()
    DROP_HIGH = auto()
    DROP_LOW = auto()
    BANG = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the notation tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    @property
    def end(self) -> int:
        return self.pos + len(self.value)

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


MODIFIER_TOKENS = frozenset(
    {
        TokenKind.KEEP_HIGH,
        TokenKind.KEEP_LOW,
        TokenKind.DROP_HIGH,
        TokenKind.DROP_LOW,
        TokenKind.BANG,
    }
)

_TWO_CHAR: dict[str, TokenKind] = {
    "kh": TokenKind.KEEP_HIGH,
    "kl": TokenKind.KEEP_LOW,
    "dh": TokenKind.DROP_HIGH,
    "dl": TokenKind.DROP_LOW,
}

_SINGLE: dict[str, TokenKind] = {
    "d": TokenKind.D,
    "!": TokenKind.BANG,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

_NUMBER_RE = re.compile(r"[0-9]+")


class NotationTokenError(Exception):
    """Error during notation tokenization."""

    def __init__(self, message: str, pos: int) -> None:
        super().__init__(message)
        self.pos = pos


def tokenize(source: str) -> list[Token]:
    """Tokenize a notation string into a list of tokens."""
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c.isspace():
            i += 1
            continue

        if "0" <= c <= "9":
            m = _NUMBER_RE.match(source, i)
            assert m is not None
            tokens.append(Token(TokenKind.INT, m.group(0), i))
            i = m.end()
            continue

        # Modifier keywords win over a bare "d"
        two = source[i : i + 2]
        if two in _TWO_CHAR:
            tokens.append(Token(_TWO_CHAR[two], two, i))
            i += 2
            continue

        if c in _SINGLE:
            tokens.append(Token(_SINGLE[c], c, i))
            i += 1
            continue

        if c == "k":
            raise NotationTokenError(
                f"Unknown modifier {two!r}: expected 'kh' or 'kl'",
                i,
            )
        if c.isupper():
            raise NotationTokenError(f"Unexpected character: {c!r} (notation is lowercase)", i)

        raise NotationTokenError(f"Unexpected character: {c!r}", i)

    tokens.append(Token(TokenKind.EOF, "", n))
    return tokens
