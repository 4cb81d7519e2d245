"""Error types with formatted source context."""

from __future__ import annotations

from enumranges.tokens import Position, Span


def _snippet(message: str, span: Span, source: str, filename: str) -> str:
    """Render a rustc-style error block pointing at *span* within *source*."""
    lines = source.splitlines(keepends=True)
    line_idx = span.start.line - 1
    col = span.start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if span.end.line == span.start.line:
        underline_len = max(1, span.end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(span.start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{span.start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.ranges") -> str:
        # A lex error points at a single character
        end = Position(self.position.line, self.position.column + 1, self.position.offset + 1)
        return _snippet(self.message, Span(self.position, end), self.source, filename)


class ParseError(Exception):
    """Raised on the first parse error, with span and source context."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.ranges") -> str:
        return _snippet(self.message, self.span, self.source, filename)


class BuildError(Exception):
    """Raised when well-formed input is rejected while generating code.

    Covers reserved names, unreadable files and variant names that the
    output target cannot express. The span is absent when the failure is
    not tied to a source location (e.g. a missing file).
    """

    def __init__(self, message: str, span: Span | None = None, source: str | None = None) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.ranges") -> str:
        if self.span is None or self.source is None:
            return f"error: {self.message}"
        return _snippet(self.message, self.span, self.source, filename)
