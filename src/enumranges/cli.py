"""Command-line interface for enumranges."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from enumranges.errors import BuildError, LexError, ParseError
from enumranges.render import TARGETS

logger = logging.getLogger(__name__)

CONFIG_NAME = "enumranges.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Resolved options for the `gen` command."""

    input_file: Path
    output_file: Path | None
    target: str
    header: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="enumranges",
        description="Generate range-mapped enums from a range declaration file",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("gen", help="Generate enums from a .ranges file")
    gen.add_argument("input", help="Input .ranges file")
    gen.add_argument("-o", "--output", help="Output file (default: stdout)")
    gen.add_argument("-t", "--target", choices=TARGETS, default=None, help="Output language")
    gen.add_argument(
        "--header",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit the 'Generated by' comment (default: on)",
    )
    gen.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    gen.add_argument("--debug", action="store_true", help="Dump parsed declarations to stderr")

    describe = sub.add_parser("describe", help="Emit a struct_name method for a type")
    describe.add_argument("declaration", help="Type declaration, e.g. 'struct Foo;'")
    describe.add_argument("-t", "--target", choices=TARGETS, default="python")

    words = sub.add_parser("words", help="Emit a file's words as a literal array")
    words.add_argument("file", help="File to read")
    words.add_argument("-t", "--target", choices=TARGETS, default="python")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    logger.debug("loading config from %s", path)
    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    target = "python"
    cfg_target = config.get("target")
    if cfg_target is not None:
        if cfg_target not in TARGETS:
            expected = ", ".join(TARGETS)
            raise argparse.ArgumentTypeError(
                f"invalid target in config: {cfg_target!r} (expected one of: {expected})"
            )
        target = cfg_target
    if args.target is not None:
        target = args.target

    header = True
    cfg_header = config.get("header")
    if isinstance(cfg_header, bool):
        header = cfg_header
    if args.header is not None:
        header = args.header

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        target=target,
        header=header,
        debug=args.debug,
    )


def compile_file(options: CliOptions) -> str:
    """Read, parse, and generate source for every declaration in a file."""
    from enumranges.codegen import generate_file
    from enumranges.debug import dump_ast
    from enumranges.parser import parse
    from enumranges.render import render

    source = options.input_file.read_text(encoding="utf-8")
    source_file = parse(source, str(options.input_file))
    logger.debug(
        "parsed %d declaration(s) from %s", len(source_file.declarations), options.input_file
    )

    if options.debug:
        dump_ast(source_file, file=sys.stderr)

    return render(
        generate_file(source_file),
        options.target,
        header=options.header,
        source_name=options.input_file.name,
        source=source,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _run_gen(args: argparse.Namespace) -> int:
    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    filename = str(options.input_file)
    try:
        output = compile_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: could not read '{filename}': {exc}", file=sys.stderr)
        return 2
    except (LexError, ParseError) as exc:
        print(exc.format(filename), file=sys.stderr)
        return 1
    except BuildError as exc:
        print(exc.format(filename), file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
        logger.debug("wrote %s", options.output_file)
    else:
        sys.stdout.write(output)

    return 0


def _run_describe(args: argparse.Namespace) -> int:
    from enumranges.helpers import describe_struct

    try:
        output = describe_struct(args.declaration, args.target, filename="<declaration>")
    except (LexError, ParseError) as exc:
        print(exc.format("<declaration>"), file=sys.stderr)
        return 1
    except BuildError as exc:
        print(exc.format("<declaration>"), file=sys.stderr)
        return 2
    sys.stdout.write(output)
    return 0


def _run_words(args: argparse.Namespace) -> int:
    from enumranges.helpers import file_words

    try:
        output = file_words(args.file, args.target)
    except BuildError as exc:
        print(exc.format(), file=sys.stderr)
        return 2
    sys.stdout.write(output + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "describe":
        return _run_describe(args)
    if args.command == "words":
        return _run_words(args)
    return _run_gen(args)
