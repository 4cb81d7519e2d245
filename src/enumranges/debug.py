"""--debug dump of parsed declarations to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from enumranges.ast import Declaration, RangeToken, SourceFile


def dump_ast(source_file: SourceFile, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable tree of *source_file* to *file*."""
    file.write("SourceFile\n")
    for decl in source_file.declarations:
        _dump_declaration(decl, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_declaration(decl: Declaration, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}Declaration {decl.name}\n")
    for annotation in decl.annotations:
        f.write(f"{_indent(depth + 1)}Annotation({annotation.text!r})\n")
    for token in decl.ranges:
        _dump_range(token, depth + 1, f)


def _dump_range(token: RangeToken, depth: int, f: TextIO) -> None:
    if token.end is None:
        f.write(f"{_indent(depth)}Range {token.name} == {token.start}\n")
    else:
        f.write(f"{_indent(depth)}Range {token.name} [{token.start}, {token.end})\n")
