"""Range DSL lexer: converts source text into a flat token stream."""

from __future__ import annotations

from enumranges.errors import LexError
from enumranges.tokens import (
    SINGLE_CHAR_TOKENS,
    Position,
    Span,
    Token,
    TokenType,
    is_ident_char,
    is_ident_start,
)

_DIGITS = frozenset("0123456789")
_STRING_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t", "r": "\r", "0": "\0"}


class Lexer:
    """Tokenize range DSL source text into a stream of Token objects.

    Whitespace and ``//`` line comments separate tokens but are not emitted;
    annotation text is recovered later by slicing the source with spans.
    """

    def __init__(self, source: str, filename: str = "input.ranges") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            self._lex_one()
        self._emit(TokenType.EOF, "", "")
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: str, raw: str, start: Position | None = None) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        tok = Token(tt, value, raw, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_one(self) -> None:
        ch = self._peek()

        if ch == "\0":
            raise self._error("NUL character in source")

        if ch in " \t\r\n":
            self._advance()
            return

        if ch == "/" and self._peek(1) == "/":
            self._skip_comment()
            return

        if ch == ".":
            start = self._current_pos()
            self._advance()
            if self._peek() == ".":
                self._advance()
                self._emit(TokenType.DOTDOT, "..", "..", start)
            else:
                self._emit(TokenType.DOT, ".", ".", start)
            return

        if ch in SINGLE_CHAR_TOKENS:
            start = self._current_pos()
            self._advance()
            self._emit(SINGLE_CHAR_TOKENS[ch], ch, ch, start)
            return

        if ch == '"':
            self._lex_string()
            return

        if ch in _DIGITS:
            self._lex_word(TokenType.INTEGER)
            return

        if is_ident_start(ch):
            self._lex_word(TokenType.IDENTIFIER)
            return

        if not ch.isprintable():
            raise self._error(f"unexpected character {ch!r}")

        # Anything else is opaque punctuation, only meaningful inside annotations
        start = self._current_pos()
        self._advance()
        self._emit(TokenType.PUNCT, ch, ch, start)

    def _skip_comment(self) -> None:
        while self._pos < len(self._source) and self._peek() != "\n":
            self._advance()

    def _lex_word(self, tt: TokenType) -> None:
        start = self._current_pos()
        chars = []
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        self._emit(tt, text, text, start)

    # ------------------------------------------------------------------
    # Strings (annotation arguments only)
    # ------------------------------------------------------------------

    def _lex_string(self) -> None:
        start = self._current_pos()
        self._advance()  # consume opening quote
        chars: list[str] = []

        while True:
            if self._pos >= len(self._source):
                raise self._error("unterminated string literal", start)
            ch = self._peek()
            if ch == '"':
                self._advance()
                break
            if ch == "\\":
                esc_start = self._current_pos()
                self._advance()
                if self._pos >= len(self._source):
                    raise self._error("unexpected end of input in string escape", esc_start)
                esc = self._peek()
                if esc not in _STRING_ESCAPES:
                    raise self._error(f"invalid string escape sequence '\\{esc}'", esc_start)
                self._advance()
                chars.append(_STRING_ESCAPES[esc])
                continue
            if ch == "\0":
                raise self._error("NUL character in source")
            chars.append(self._advance())

        raw = self._source[start.offset : self._pos]
        self._emit(TokenType.STRING, "".join(chars), raw, start)


def tokenize(source: str, filename: str = "input.ranges") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()
