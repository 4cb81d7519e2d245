"""Output AST: what to generate for a declaration, independent of target syntax.

The printers in :mod:`enumranges.render` walk these nodes once; keeping the
structure separate from the text means keyword placement (``if`` vs.
``elif``/``else if``) is decided in one place per target.
"""

from __future__ import annotations

from dataclasses import dataclass

from enumranges.ast import Declaration, RangeToken, SourceFile
from enumranges.tokens import Span


@dataclass(frozen=True, slots=True)
class Variant:
    """An enum variant, with the span of the range it came from."""

    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class EnumDecl:
    """The enum type: annotations emitted verbatim above it, variants in order."""

    name: str
    annotations: tuple[str, ...]
    variants: tuple[Variant, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class EqualsTest:
    """``x == value``"""

    value: int


@dataclass(frozen=True, slots=True)
class RangeTest:
    """``start <= x < end``"""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Clause:
    """One link of the conversion chain: if *test* holds, return *variant*."""

    test: EqualsTest | RangeTest
    variant: str


@dataclass(frozen=True, slots=True)
class ConversionChain:
    """Ordered test-and-branch chain; the first matching clause wins."""

    enum_name: str
    clauses: tuple[Clause, ...]


@dataclass(frozen=True, slots=True)
class GeneratedEnum:
    """Everything emitted for one declaration."""

    enum: EnumDecl
    conversion: ConversionChain


def _test_for(token: RangeToken) -> EqualsTest | RangeTest:
    if token.end is None:
        return EqualsTest(token.start)
    return RangeTest(token.start, token.end)


def generate(decl: Declaration) -> GeneratedEnum:
    """Build the output AST for a single declaration."""
    variants = tuple(Variant(r.name, r.span) for r in decl.ranges)
    enum = EnumDecl(
        decl.name,
        tuple(a.text for a in decl.annotations),
        variants,
        decl.name_span,
    )
    clauses = tuple(Clause(_test_for(r), r.name) for r in decl.ranges)
    return GeneratedEnum(enum, ConversionChain(decl.name, clauses))


def generate_file(source_file: SourceFile) -> tuple[GeneratedEnum, ...]:
    """Build the output AST for every declaration in a file, in order."""
    return tuple(generate(decl) for decl in source_file.declarations)
