"""Source printers: turn the output AST into Python or Rust source text."""

from __future__ import annotations

import keyword
from collections.abc import Callable, Sequence

from enumranges.codegen import (
    ConversionChain,
    EnumDecl,
    EqualsTest,
    GeneratedEnum,
    RangeTest,
)
from enumranges.errors import BuildError
from enumranges.tokens import Span

TARGETS: tuple[str, ...] = ("python", "rust")

# Name of the generated conversion function/classmethod
CONVERT_FN = "try_from"

_RUST_KEYWORDS: frozenset[str] = frozenset(
    {
        # strict
        "as", "async", "await", "break", "const", "continue", "crate", "dyn",
        "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
        "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "self", "Self", "static", "struct", "super", "trait", "true", "type",
        "unsafe", "use", "where", "while",
        # reserved
        "abstract", "become", "box", "do", "final", "gen", "macro", "override",
        "priv", "try", "typeof", "unsized", "virtual", "yield",
        "_",
    }
)  # fmt: skip


def render(
    generated: Sequence[GeneratedEnum],
    target: str = "python",
    *,
    header: bool = True,
    source_name: str | None = None,
    source: str | None = None,
) -> str:
    """Render generated enums to a single source file for *target*.

    *source* is only used to quote the offending line if a name cannot be
    expressed in the target language.
    """
    try:
        renderer = _RENDERERS[target]
    except KeyError:
        expected = ", ".join(TARGETS)
        raise BuildError(f"unknown target '{target}' (expected one of: {expected})") from None
    return renderer(generated, header, source_name, source)


def _header_text(source_name: str | None) -> str:
    origin = f" from {source_name}" if source_name else ""
    return f"Generated by enumranges{origin}. Do not edit."


def _check_name(
    name: str,
    span: Span,
    reserved: Callable[[str], bool],
    target: str,
    source: str | None,
) -> None:
    if reserved(name):
        message = f"'{name}' is a reserved word in {target} and cannot be used"
        raise BuildError(message, span, source)


# ---------------------------------------------------------------------------
# Python
# ---------------------------------------------------------------------------


# Module-level names the generated Python looks up after each class is defined
_PYTHON_RUNTIME_NAMES: frozenset[str] = frozenset({"enum", "classmethod", "ValueError"})


def _python_reserved(name: str) -> bool:
    # Keywords, plus names the Enum machinery claims for itself
    if keyword.iskeyword(name) or name == CONVERT_FN:
        return True
    return len(name) > 2 and name.startswith("_") and name.endswith("_")


def _check_python_name(name: str, span: Span, source: str | None) -> None:
    if name in _PYTHON_RUNTIME_NAMES:
        message = f"'{name}' would shadow a name the generated Python module uses"
        raise BuildError(message, span, source)
    _check_name(name, span, _python_reserved, "Python", source)


def _python_annotation(text: str) -> list[str]:
    """Source lines for one annotation; a multi-line `#[...]` stays a comment throughout."""
    first, *rest = text.splitlines()
    if not first.startswith("#"):
        return [first, *rest]
    return [first, *(f"# {line}" for line in rest)]


def _render_python(
    generated: Sequence[GeneratedEnum],
    header: bool,
    source_name: str | None,
    source: str | None,
) -> str:
    lines: list[str] = []
    if header:
        lines.append(f"# {_header_text(source_name)}")
        lines.append("")
    lines.append("from __future__ import annotations")
    lines.append("")
    lines.append("import enum")

    for item in generated:
        lines.append("")
        lines.append("")
        _python_enum(item.enum, lines, source)
        _python_conversion(item.conversion, lines, bool(item.enum.variants))

    return "\n".join(lines) + "\n"


def _python_enum(enum: EnumDecl, lines: list[str], source: str | None) -> None:
    _check_python_name(enum.name, enum.span, source)
    for annotation in enum.annotations:
        lines.extend(_python_annotation(annotation))
    lines.append(f"class {enum.name}(enum.Enum):")
    for index, variant in enumerate(enum.variants):
        _check_python_name(variant.name, variant.span, source)
        lines.append(f"    {variant.name} = {index}")


def _python_conversion(chain: ConversionChain, lines: list[str], has_members: bool) -> None:
    if has_members:
        lines.append("")
    lines.append("    @classmethod")
    lines.append(f"    def {CONVERT_FN}(cls, x: int) -> {chain.enum_name}:")
    for index, clause in enumerate(chain.clauses):
        lead = "if" if index == 0 else "elif"
        lines.append(f"        {lead} {_python_test(clause.test)}:")
        lines.append(f"            return cls.{clause.variant}")
    lines.append("        raise ValueError(x)")


def _python_test(test: EqualsTest | RangeTest) -> str:
    if isinstance(test, EqualsTest):
        return f"x == {test.value}"
    return f"{test.start} <= x < {test.end}"


# ---------------------------------------------------------------------------
# Rust
# ---------------------------------------------------------------------------


def _render_rust(
    generated: Sequence[GeneratedEnum],
    header: bool,
    source_name: str | None,
    source: str | None,
) -> str:
    blocks: list[str] = []
    if header:
        blocks.append(f"// {_header_text(source_name)}")

    for item in generated:
        lines: list[str] = []
        _rust_enum(item.enum, lines, source)
        lines.append("")
        _rust_conversion(item.conversion, lines)
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks) + "\n"


def _rust_enum(enum: EnumDecl, lines: list[str], source: str | None) -> None:
    _check_name(enum.name, enum.span, _RUST_KEYWORDS.__contains__, "Rust", source)
    lines.extend(enum.annotations)
    lines.append(f"enum {enum.name} {{")
    for variant in enum.variants:
        _check_name(variant.name, variant.span, _RUST_KEYWORDS.__contains__, "Rust", source)
        lines.append(f"    {variant.name},")
    lines.append("}")


def _rust_conversion(chain: ConversionChain, lines: list[str]) -> None:
    name = chain.enum_name
    lines.append(f"impl ::core::convert::TryFrom<u64> for {name} {{")
    lines.append("    type Error = u64;")
    lines.append("")
    lines.append(f"    fn {CONVERT_FN}(x: u64) -> Result<Self, u64> {{")
    if not chain.clauses:
        lines.append("        Err(x)")
    else:
        for index, clause in enumerate(chain.clauses):
            lead = "if" if index == 0 else "else if"
            lines.append(
                f"        {lead} {_rust_test(clause.test)} {{ Ok({name}::{clause.variant}) }}"
            )
        lines.append("        else { Err(x) }")
    lines.append("    }")
    lines.append("}")


def _rust_test(test: EqualsTest | RangeTest) -> str:
    if isinstance(test, EqualsTest):
        return f"x == {test.value}"
    return f"({test.start}..{test.end}).contains(&x)"


_RENDERERS: dict[
    str, Callable[[Sequence[GeneratedEnum], bool, str | None, str | None], str]
] = {
    "python": _render_python,
    "rust": _render_rust,
}
