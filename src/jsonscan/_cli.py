"""
Command-line entry point.

Scans one file, prints the structure outline and then the validation
result. A given path always exits 0; argparse exits 2 with a usage message
when the path is missing.
"""

import argparse
import logging
import sys

from jsonscan import DEFAULT_MAX_DEPTH
from jsonscan import ScanConfig
from jsonscan import load_file
from jsonscan import validate
from jsonscan._sink import NullSink
from jsonscan._sink import PrintSink
from jsonscan._sink import StructureSink

logger = logging.getLogger(__name__)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="jsonscan",
        description="Check that a file holds a JSON object and outline its structure.",
    )
    ap.add_argument("file", help="JSON file to scan")
    ap.add_argument("--quiet", action="store_true", help="print only the result")
    ap.add_argument(
        "--no-content", action="store_true", help="omit primitive values from the outline"
    )
    ap.add_argument("--indent", type=int, default=4, help="spaces per nesting level")
    ap.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    ap.add_argument(
        "--strict-numbers",
        action="store_true",
        help="reject numbers cut short by the end of the input",
    )
    ap.add_argument(
        "--escape-aware-strings",
        action="store_true",
        help="pair backslash escapes when looking for a closing quote",
    )
    ap.add_argument("--log-level", choices=_LOG_LEVELS, default="WARNING")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ScanConfig(
            max_depth=args.max_depth,
            strict_numbers=args.strict_numbers,
            escape_aware_strings=args.escape_aware_strings,
        )
        sink: StructureSink = (
            NullSink()
            if args.quiet
            else PrintSink(sys.stdout, indent_step=args.indent, show_content=not args.no_content)
        )
    except ValueError as exc:
        ap.error(str(exc))

    try:
        text = load_file(args.file)
    except OSError as exc:
        # An unreadable file scans like an empty one.
        logger.warning("could not read %s: %s", args.file, exc)
        text = ""

    print(validate(text, sink=sink, config=config))
    return 0
