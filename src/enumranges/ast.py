"""AST node types for parsed range declarations."""

from __future__ import annotations

from dataclasses import dataclass

from enumranges.tokens import Span


@dataclass(frozen=True, slots=True)
class Annotation:
    """Opaque annotation text, kept exactly as written in the source."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class RangeToken:
    """A named single value (end is None) or half-open interval [start, end)."""

    name: str
    start: int
    end: int | None
    span: Span

    def contains(self, x: int) -> bool:
        if self.end is None:
            return x == self.start
        return self.start <= x < self.end


@dataclass(frozen=True, slots=True)
class Declaration:
    """One enum declaration: annotations, type name, and ordered ranges."""

    annotations: tuple[Annotation, ...]
    name: str
    ranges: tuple[RangeToken, ...]
    name_span: Span
    span: Span


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Root node: every declaration in a .ranges file, in source order."""

    declarations: tuple[Declaration, ...]
    span: Span
