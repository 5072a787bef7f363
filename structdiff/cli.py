"""Command-line interface for structdiff."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structdiff",
        description="Print every point where two structured documents disagree",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"structdiff {__version__}",
    )
    parser.add_argument(
        "left",
        type=Path,
        help="Left document (.json, .toml, or a Python literal)",
    )
    parser.add_argument(
        "right",
        type=Path,
        help="Right document (.json, .toml, or a Python literal)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Append the differences to this file instead of stdout",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Print nothing, only set the exit status",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic log level (default: WARNING)",
    )
    return parser


def run_diff(args: argparse.Namespace) -> int:
    """Compare the two documents named in ``args``.

    Returns:
        0 when they agree, 1 when they differ
    """
    from .core import diff
    from .formats import load_document

    left = load_document(args.left)
    right = load_document(args.right)
    lines = diff(left, right)
    logger.info("%s vs %s: %d difference(s)", args.left, args.right, len(lines))

    if not args.quiet and lines:
        text = "".join(line + "\n" for line in lines)
        if args.output:
            with open(args.output, "a", encoding="utf-8") as fh:
                fh.write(text)
        else:
            sys.stdout.write(text)
    return 1 if lines else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s: %(message)s",
    )

    try:
        return run_diff(args)
    except Exception as exc:
        from .errors import exit_code_for_exception

        print(str(exc), file=sys.stderr)
        return exit_code_for_exception(exc)


if __name__ == "__main__":
    sys.exit(main())
