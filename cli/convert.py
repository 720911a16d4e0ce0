"""Greyscale and Sobel command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

from batch import run_conversion
from config import (
    BORDER_POLICIES,
    DEFAULT_BORDER_POLICY,
    DEFAULT_INPUT_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_THRESHOLD,
    MAX_THRESHOLD,
    MIN_THRESHOLD,
)

logger = logging.getLogger(__name__)


def clamp_threshold(value: int) -> int:
    """Clamp a user supplied threshold into [0, 255]."""
    clamped = max(MIN_THRESHOLD, min(MAX_THRESHOLD, value))
    if clamped != value:
        logger.warning("Threshold %s out of range, using %s", value, clamped)
    return clamped


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "source",
        nargs="?",
        default=DEFAULT_INPUT_DIR,
        help=f"Image file or directory of images (default: {DEFAULT_INPUT_DIR})",
    )
    parser.add_argument(
        "-o", "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory to write results to (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "-j", "--workers",
        type=int,
        default=None,
        help="Number of images converted in parallel (default: processor count)",
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Maximum number of images to process (default: all)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )


def add_convert_subparsers(subparsers: argparse._SubParsersAction) -> None:
    greyscale_parser = subparsers.add_parser(
        "greyscale",
        help="Convert images to greyscale by averaging their color channels",
    )
    _add_common_args(greyscale_parser)
    greyscale_parser.set_defaults(_cmd=cmd_greyscale)

    sobel_parser = subparsers.add_parser(
        "sobel",
        help="Run Sobel edge detection on images",
    )
    _add_common_args(sobel_parser)
    sobel_parser.add_argument(
        "-t", "--threshold",
        type=int,
        default=DEFAULT_THRESHOLD,
        help=(
            f"Discard gradients below this value ({MIN_THRESHOLD}-{MAX_THRESHOLD}, "
            f"default: {DEFAULT_THRESHOLD}). Out-of-range values are clamped."
        ),
    )
    sobel_parser.add_argument(
        "--border",
        choices=BORDER_POLICIES,
        default=DEFAULT_BORDER_POLICY,
        help=(
            "Border handling: 'zero' leaves the outer pixel ring transparent black, "
            "'replicate' computes it from clamped neighbors (default: zero)"
        ),
    )
    sobel_parser.set_defaults(_cmd=cmd_sobel)


def _run(
    args: argparse.Namespace,
    transform: str,
    threshold: int = DEFAULT_THRESHOLD,
    border: str = DEFAULT_BORDER_POLICY,
) -> int:
    if args.workers is not None and args.workers < 1:
        logger.error("--workers must be at least 1")
        return 1
    if args.limit is not None and args.limit < 0:
        logger.error("--limit must be at least 0")
        return 1

    try:
        report = run_conversion(
            args.source,
            transform,
            output_dir=args.output_dir,
            threshold=threshold,
            workers=args.workers,
            border=border,
            limit=args.limit,
            progress=not args.no_progress,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    stats = report.to_dict()
    logger.info("%s", "=" * 50)
    logger.info("Conversion Complete!")
    logger.info("%s", "=" * 50)
    logger.info("Transform:         %s", stats["transform"])
    logger.info("Images found:      %s", stats["images_found"])
    logger.info("Images converted:  %s", stats["images_converted"])
    logger.info("Images failed:     %s", stats["images_failed"])
    logger.info("Time elapsed:      %.2f seconds", stats["elapsed"])
    for outcome in report.failed:
        logger.info("  failed: %s (%s)", outcome.source.name, outcome.error)
    if report.succeeded:
        logger.info("Results saved to %s", args.output_dir)
    return 1 if report.failed else 0


def cmd_greyscale(args: argparse.Namespace) -> int:
    return _run(args, "greyscale")


def cmd_sobel(args: argparse.Namespace) -> int:
    threshold = clamp_threshold(args.threshold)
    return _run(args, "sobel", threshold=threshold, border=args.border)
