"""Range declaration to enum compiler."""

from __future__ import annotations

__version__ = "0.1.0"


def compile(
    source: str,
    filename: str = "input.ranges",
    target: str = "python",
    *,
    header: bool = True,
) -> str:
    """Parse range declarations and generate *target* source for all of them."""
    from enumranges.codegen import generate_file
    from enumranges.parser import parse
    from enumranges.render import render

    source_file = parse(source, filename)
    return render(
        generate_file(source_file),
        target,
        header=header,
        source_name=filename,
        source=source,
    )
