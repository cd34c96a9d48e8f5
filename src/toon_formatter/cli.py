"""Command-line entry point: ``toon-formatter --from json --to toon -i data.json``."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .constants import MAX_EXTRACTION_PASSES
from .converters import FORMATS, convert, csv_to_toon, json_to_toon, xml_to_toon
from .errors import InputError, ToonError
from .phrases import DEFAULT_PHRASES
from .validator import validate

logger = logging.getLogger(__name__)

_MIXED_TEXT_CONVERTERS = {
    "json": json_to_toon,
    "xml": xml_to_toon,
    "csv": csv_to_toon,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toon-formatter",
        description="Convert between TOON and JSON, YAML, XML or CSV, or validate TOON.",
    )
    parser.add_argument("--from", dest="source", choices=FORMATS, help="Input format")
    parser.add_argument("--to", dest="target", choices=FORMATS, help="Output format")
    parser.add_argument("--validate", choices=("toon",), help="Validate the input instead of converting it")
    parser.add_argument("-i", "--input", help="Input file (default: stdin)")
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument(
        "--mixed",
        action="store_true",
        help="Treat the input as prose with embedded payloads (json, xml or csv to toon only)",
    )
    parser.add_argument(
        "--phrases",
        action="store_true",
        help="Shorten verbose phrases in the prose around payloads (implies --mixed)",
    )
    parser.add_argument(
        "--max-passes",
        type=int,
        default=MAX_EXTRACTION_PASSES,
        help=f"Upper bound on extraction passes for mixed text (default: {MAX_EXTRACTION_PASSES})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _read_input(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def _write_output(path: Optional[str], text: str) -> None:
    if path is None:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)


def run(args: argparse.Namespace) -> int:
    text = _read_input(args.input)

    if args.validate:
        result = validate(text)
        _write_output(args.output, json.dumps(result))
        return 0 if result["valid"] else 1

    mixed = args.mixed or args.phrases
    if mixed:
        converter = _MIXED_TEXT_CONVERTERS.get(args.source)
        if args.target != "toon" or converter is None:
            raise InputError("--mixed requires --to toon and --from json, xml or csv")
        output = converter(
            text,
            phrases=DEFAULT_PHRASES if args.phrases else None,
            max_passes=args.max_passes,
        )
    else:
        output = convert(text, args.source, args.target)

    _write_output(args.output, output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.validate and not (args.source and args.target):
        parser.error("either --validate toon or both --from and --to are required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        return run(args)
    except (ToonError, OSError) as exc:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Conversion error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
