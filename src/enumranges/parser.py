"""Range DSL parser: converts a token stream into declarations."""

from __future__ import annotations

import logging

from enumranges.ast import Annotation, Declaration, RangeToken, SourceFile
from enumranges.errors import ParseError
from enumranges.lexer import tokenize
from enumranges.tokens import Position, Span, Token, TokenType

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1


class Parser:
    """Recursive descent parser for range DSL token streams."""

    def __init__(self, tokens: list[Token], source: str, filename: str) -> None:
        self._tokens = tokens
        self._source = source
        self._filename = filename
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # EOF

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _expect(self, tt: TokenType, message: str) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._error(message, tok.span)
        return self._advance()

    def _expect_eof(self, message: str) -> None:
        if not self._at_eof():
            raise self._error(message, self._peek().span)

    def _prev_end(self) -> Position:
        """End position of the previously consumed token."""
        if self._pos > 0:
            return self._tokens[self._pos - 1].span.end
        return self._tokens[0].span.start

    # ------------------------------------------------------------------
    # File level
    # ------------------------------------------------------------------

    def parse(self) -> SourceFile:
        declarations: list[Declaration] = []
        start = self._peek().span.start

        while not self._at_eof():
            declarations.append(self.parse_declaration())

        end = self._peek().span.end
        return SourceFile(tuple(declarations), Span(start, end))

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def parse_declaration(self) -> Declaration:
        start = self._peek().span.start

        # Annotations are best-effort: any failure discards all of them and rewinds
        saved_pos = self._pos
        try:
            annotations = self.parse_annotations()
        except ParseError as exc:
            logger.debug("ignoring unparseable annotations: %s", exc.message)
            self._pos = saved_pos
            annotations = ()

        name_tok = self._expect(TokenType.IDENTIFIER, "expected enum name")
        self._expect(TokenType.LBRACE, "expected '{' after enum name")

        ranges = self.parse_range_list()

        if ranges and self._prev_type() != TokenType.COMMA:
            message = "expected ',' or '}' after range"
        else:
            message = "expected '}' to close range list"
        self._expect(TokenType.RBRACE, message)

        return Declaration(
            annotations, name_tok.value, ranges, name_tok.span, Span(start, self._prev_end())
        )

    def _prev_type(self) -> TokenType | None:
        if self._pos > 0:
            return self._tokens[self._pos - 1].type
        return None

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def parse_annotations(self) -> tuple[Annotation, ...]:
        annotations: list[Annotation] = []
        while self._at(TokenType.HASH, TokenType.AT):
            annotations.append(self._parse_annotation())
        return tuple(annotations)

    def _parse_annotation(self) -> Annotation:
        start = self._peek().span.start

        if self._advance().type == TokenType.HASH:
            self._expect(TokenType.LBRACKET, "expected '[' after '#'")
            self._skip_balanced(TokenType.RBRACKET)
        else:
            self._expect(TokenType.IDENTIFIER, "expected decorator name after '@'")
            while self._at(TokenType.DOT):
                self._advance()
                self._expect(TokenType.IDENTIFIER, "expected name after '.' in decorator")
            if self._at(TokenType.LPAREN):
                self._advance()
                self._skip_balanced(TokenType.RPAREN)

        end = self._prev_end()
        text = self._source[start.offset : end.offset]
        return Annotation(text, Span(start, end))

    def _skip_balanced(self, closer: TokenType) -> None:
        """Consume tokens up to and including *closer*, honouring nested groups."""
        expected = [closer]
        while expected:
            tok = self._peek()
            if tok.type == TokenType.EOF:
                raise self._error("unclosed delimiter in annotation", tok.span)
            if tok.type in _OPENERS:
                expected.append(_OPENERS[tok.type])
            elif tok.type in _CLOSERS:
                if tok.type != expected[-1]:
                    raise self._error(f"mismatched '{tok.value}' in annotation", tok.span)
                expected.pop()
            self._advance()

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------

    def parse_range_list(self) -> tuple[RangeToken, ...]:
        """Parse comma-separated ranges up to (not including) '}' or EOF."""
        ranges: list[RangeToken] = []
        while not self._at(TokenType.RBRACE, TokenType.EOF):
            ranges.append(self.parse_range_token())
            if not self._at(TokenType.COMMA):
                break
            self._advance()  # consume ',' (a trailing one is allowed)
        return tuple(ranges)

    def parse_range_token(self) -> RangeToken:
        name_tok = self._expect(TokenType.IDENTIFIER, "expected range name")
        self._expect(TokenType.COLON, "expected ':' after range name")
        start = self._parse_integer("expected integer literal after ':'")

        end: int | None = None
        if self._at(TokenType.DOTDOT):
            # Once '..' is seen the upper bound is mandatory
            self._advance()
            end = self._parse_integer("expected integer literal after '..'")

        return RangeToken(name_tok.value, start, end, Span(name_tok.span.start, self._prev_end()))

    def _parse_integer(self, message: str) -> int:
        tok = self._expect(TokenType.INTEGER, message)
        value = _decode_integer(tok.value)
        if value is None:
            raise self._error(f"invalid integer literal '{tok.value}'", tok.span)
        if value > U64_MAX:
            raise self._error(f"integer literal '{tok.value}' does not fit in u64", tok.span)
        return value

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _error(self, message: str, span: Span | None = None) -> ParseError:
        if span is None:
            span = self._peek().span
        return ParseError(message, span, self._source)


# Module-level constants
_OPENERS: dict[TokenType, TokenType] = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}
_CLOSERS: frozenset[TokenType] = frozenset(_OPENERS.values())
_RADIX_PREFIXES: dict[str, int] = {"0x": 16, "0o": 8, "0b": 2}


def _decode_integer(text: str) -> int | None:
    """Decode an integer literal (decimal, 0x, 0o, 0b, '_' separators), or None."""
    base = _RADIX_PREFIXES.get(text[:2], 10)
    body = text[2:] if base != 10 else text
    digits = body.replace("_", "")
    if not digits or not digits.isascii():
        return None
    try:
        return int(digits, base)
    except ValueError:
        return None


def _parser(source: str, filename: str) -> Parser:
    return Parser(tokenize(source, filename), source, filename)


def parse_range_token(source: str, filename: str = "input.ranges") -> RangeToken:
    """Parse a single `Name: start` or `Name: start..end` entry."""
    p = _parser(source, filename)
    token = p.parse_range_token()
    p._expect_eof("unexpected input after range")
    return token


def parse_range_list(source: str, filename: str = "input.ranges") -> tuple[RangeToken, ...]:
    """Parse the comma-separated body of a declaration (without braces)."""
    p = _parser(source, filename)
    ranges = p.parse_range_list()
    p._expect_eof("unexpected input after range list")
    return ranges


def parse_declaration(source: str, filename: str = "input.ranges") -> Declaration:
    """Parse exactly one declaration."""
    p = _parser(source, filename)
    decl = p.parse_declaration()
    p._expect_eof("unexpected input after declaration")
    return decl


def parse(source: str, filename: str = "input.ranges") -> SourceFile:
    """Convenience function: parse source text and return a SourceFile AST."""
    return _parser(source, filename).parse()
