"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Grammar punctuation
    COLON = auto()  # :
    COMMA = auto()  # ,
    DOTDOT = auto()  # ..
    LBRACE = auto()  # {
    RBRACE = auto()  # }

    # Annotation punctuation
    HASH = auto()  # #
    AT = auto()  # @
    DOT = auto()  # .
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LPAREN = auto()  # (
    RPAREN = auto()  # )

    # Content
    IDENTIFIER = auto()  # (letter | _) (letter | digit | _)*
    INTEGER = auto()  # digit (letter | digit | _)*, decoded by the parser
    STRING = auto()  # "...", value is the unescaped content
    PUNCT = auto()  # any other single printable character

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with resolved value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "#": TokenType.HASH,
    "@": TokenType.AT,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


def is_ident_start(ch: str) -> bool:
    """Return True if ch may begin an identifier."""
    return ch.isalpha() or ch == "_"


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier or integer literal."""
    return ch.isalnum() or ch == "_"
