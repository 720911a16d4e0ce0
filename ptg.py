#!/usr/bin/env python3
"""
Unified CLI for the polychrome image converter.

Usage:
    ptg greyscale [source]              # Average color channels into greyscale
    ptg sobel [source] -t 64            # Sobel edge map with threshold 64
    ptg sobel photo.png --border replicate
    ptg greyscale input -o output -j 4  # Explicit folders and worker count

Results are written to the output folder as <name>_Greyscale.png or
<name>_Sobel.png.
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.convert import add_convert_subparsers

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ptg",
        description="Polychrome to greyscale - batch greyscale and edge detection for images",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    add_convert_subparsers(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
