"""Small companion generators: type-name reflection and file word lists."""

from __future__ import annotations

import logging
from pathlib import Path

from enumranges.errors import BuildError, ParseError
from enumranges.lexer import tokenize
from enumranges.parser import Parser
from enumranges.tokens import Token, TokenType

logger = logging.getLogger(__name__)

# describe_struct refuses to describe a type with this name
RESERVED_STRUCT_NAME = "OhNo"

_DECL_KEYWORDS = frozenset({"pub", "struct", "enum", "union", "class"})


def _declared_name(source: str, filename: str) -> Token:
    """Find the type name in `struct Foo;`, `class Foo:`, `pub(crate) enum Foo {}` or `Foo`.

    Leading `#[...]` attributes and `@decorator` lines are skipped.
    """
    p = Parser(tokenize(source, filename), source, filename)
    p.parse_annotations()
    while p._at(TokenType.IDENTIFIER) and p._peek().value in _DECL_KEYWORDS:
        if p._advance().value == "pub" and p._at(TokenType.LPAREN):
            p._advance()
            p._skip_balanced(TokenType.RPAREN)
    tok = p._peek()
    if tok.type != TokenType.IDENTIFIER:
        raise ParseError("expected type declaration", tok.span, source)
    return tok


def describe_struct(source: str, target: str = "python", filename: str = "<declaration>") -> str:
    """Emit a `struct_name` method returning the declared type's name."""
    name_tok = _declared_name(source, filename)
    name = name_tok.value
    if name == RESERVED_STRUCT_NAME:
        raise BuildError(f"cannot describe a struct named '{name}'", name_tok.span, source)

    if target == "python":
        return f'    def struct_name(self) -> str:\n        return "{name}"\n'
    if target == "rust":
        return (
            f"impl DescribeStruct for {name} {{\n"
            f"    fn struct_name(&self) -> &'static str {{\n"
            f'        "{name}"\n'
            f"    }}\n"
            f"}}\n"
        )
    raise BuildError(f"unknown target '{target}'")


def file_words(path: str | Path, target: str = "python", base_dir: Path | None = None) -> str:
    """Emit the whitespace-separated words of a file as a fixed-size literal.

    Relative paths are resolved against *base_dir* (default: the working
    directory). Any failure to read the file is a BuildError.
    """
    file_path = Path(path)
    if base_dir is not None and not file_path.is_absolute():
        file_path = base_dir / file_path

    logger.debug("reading words from %s", file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BuildError(f"could not read '{path}': {exc}") from exc

    words = text.split()
    if target == "python":
        if len(words) == 1:
            return f"({words[0]!r},)"
        return "(" + ", ".join(repr(w) for w in words) + ")"
    if target == "rust":
        return "[" + ", ".join(_rust_str(w) for w in words) + "]"
    raise BuildError(f"unknown target '{target}'")


def _rust_str(text: str) -> str:
    """Quote *text* as a Rust string literal."""
    out: list[str] = ['"']
    for ch in text:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif not ch.isprintable():
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)
