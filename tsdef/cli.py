"""tsdef CLI: JSON object model in, TypeScript declarations out."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from .loader import ModelError, load_document
from .log import get_logger, setup_logging
from .translate import Definition, TranslateError, TranslateOptions, translate_all

logger = get_logger(__name__)

POINTER_MODES: list[str] = ["array", "opaque"]
RESULT_MODES: list[str] = ["union", "tagged"]

USAGE: str = """\
tsdef [OPTIONS] [INPUT] [-o OUTPUT]

Translate a resolved object model (JSON) into TypeScript type declarations.

Options:
  --debug             Emit the single-line debug form
  --external          Enums without tag configuration are externally tagged
  --pointers MODE     Raw pointers: array (default), opaque
  --results MODE      Result<T, E>: union (default), tagged
  -v, --verbose       Log translation steps to stderr
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


@dataclass
class CliArgs:
    input_file: str | None = None
    output_file: str | None = None
    debug: bool = False
    verbose: bool = False
    external: bool | None = None
    pointers: str | None = None
    results: str | None = None


def parse_args(args: list[str]) -> CliArgs:
    """Parse command-line arguments. Exits with status 2 on usage errors."""
    parsed = CliArgs()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            sys.exit(0)
        elif arg in ("--pointers", "--results", "-o", "--output"):
            if i + 1 >= len(args):
                print("error: " + arg + " requires an argument", file=sys.stderr)
                sys.exit(2)
            value = args[i + 1]
            if arg == "--pointers":
                if value not in POINTER_MODES:
                    print("error: unknown pointer mode '" + value + "'", file=sys.stderr)
                    sys.exit(2)
                parsed.pointers = value
            elif arg == "--results":
                if value not in RESULT_MODES:
                    print("error: unknown result mode '" + value + "'", file=sys.stderr)
                    sys.exit(2)
                parsed.results = value
            else:
                parsed.output_file = value
            i += 2
        elif arg == "--debug":
            parsed.debug = True
            i += 1
        elif arg == "--external":
            parsed.external = True
            i += 1
        elif arg == "-v" or arg == "--verbose":
            parsed.verbose = True
            i += 1
        elif arg.startswith("-") and arg != "-":
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            sys.exit(2)
        else:
            if parsed.input_file is not None:
                print("error: unexpected argument '" + arg + "'", file=sys.stderr)
                sys.exit(2)
            parsed.input_file = arg
            i += 1
    return parsed


def _source_name(input_file: str | None) -> str:
    if input_file is None or input_file == "-":
        return "<stdin>"
    return "'" + input_file + "'"


def read_model(input_file: str | None) -> tuple[str, int]:
    """Read the JSON model text. Returns (text, exit_code).

    A leading UTF-8 byte order mark is dropped; json.loads rejects it.
    """
    if input_file is not None and input_file != "-":
        try:
            raw = Path(input_file).read_bytes()
        except OSError as e:
            logger.debug("open failed: %s", e)
            print("error: cannot open '" + input_file + "'", file=sys.stderr)
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.debug("decode failed at byte %d", e.start)
        print("error: invalid utf-8 in " + _source_name(input_file), file=sys.stderr)
        return ("", 1)
    logger.debug("read %d bytes of model from %s", len(raw), _source_name(input_file))
    return (text, 0)


def format_definitions(definitions: list[Definition], debug: bool) -> str:
    """One `export type` declaration per definition, newline terminated."""
    if debug:
        return "".join(d.debug_declaration + "\n" for d in definitions)
    return "".join(d.declaration + "\n" for d in definitions)


def write_declarations(text: str, output_file: str | None) -> int:
    """Write declaration text to a .d.ts file or stdout."""
    if output_file is None:
        sys.stdout.write(text)
        return 0
    try:
        Path(output_file).write_text(text, encoding="utf-8")
    except OSError as e:
        logger.debug("write failed: %s", e)
        print("error: cannot write '" + output_file + "'", file=sys.stderr)
        return 1
    logger.info("wrote %s", output_file)
    return 0


def build_options(doc_options: dict[str, object], args: CliArgs) -> TranslateOptions:
    """Document options, overridden by command-line flags."""
    merged = dict(doc_options)
    if args.pointers is not None:
        merged["pointers"] = args.pointers
    if args.results is not None:
        merged["results"] = args.results
    if args.external is not None:
        merged["external_tagging"] = args.external
    return TranslateOptions(**merged)  # type: ignore[arg-type]


def run(source: str, args: CliArgs) -> tuple[int, str]:
    """Load, translate and format. Returns (exit_code, output)."""
    try:
        doc = load_document(source)
        options = build_options(doc.options, args)
    except (ModelError, ValueError) as e:
        print("error: " + str(e), file=sys.stderr)
        return (1, "")
    try:
        definitions = translate_all(doc.containers, options)
    except TranslateError as e:
        print("error: " + str(e), file=sys.stderr)
        return (1, "")
    return (0, format_definitions(definitions, args.debug))


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv if argv is not None else sys.argv[1:])
    setup_logging(logging.DEBUG if args.verbose else None)
    source, err = read_model(args.input_file)
    if err != 0:
        return err
    if not source.strip():
        print("error: no input provided", file=sys.stderr)
        return 2
    exit_code, output = run(source, args)
    if exit_code != 0:
        return exit_code
    return write_declarations(output, args.output_file)


if __name__ == "__main__":
    sys.exit(main())
