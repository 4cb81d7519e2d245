"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any

import pytest

from enumranges import compile
from enumranges.ast import RangeToken
from enumranges.lexer import tokenize
from enumranges.parser import parse
from enumranges.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a SourceFile."""

    def _parse(source: str, filename: str = "test.ranges"):
        return parse(source, filename)

    return _parse


@pytest.fixture
def load_enum():
    """Return a helper that compiles source to Python, executes it, and returns the enum."""

    def _load(source: str, name: str) -> Any:
        namespace: dict[str, Any] = {"__name__": "generated"}
        exec(compile(source, "test.ranges"), namespace)
        return namespace[name]

    return _load


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_range(token: RangeToken, name: str, start: int, end: int | None) -> None:
    """Assert the name and bounds of a RangeToken, ignoring its span."""
    assert isinstance(token, RangeToken), f"Expected RangeToken, got {type(token).__name__}"
    assert (token.name, token.start, token.end) == (name, start, end)


def convert(enum_cls: Any, x: int) -> Any:
    """Call try_from and return the member, or ('error', value) on failure."""
    try:
        return enum_cls.try_from(x)
    except ValueError as exc:
        return ("error", exc.args[0])
