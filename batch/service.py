"""Conversion service entrypoints for reuse across CLI and library callers."""

from __future__ import annotations

import logging
from pathlib import Path

from config import DEFAULT_BORDER_POLICY, DEFAULT_OUTPUT_DIR, DEFAULT_THRESHOLD
from processing import build_step
from sources import scan_local_images

from .pipeline import BatchReport, run_batch

logger = logging.getLogger(__name__)


def run_conversion(
    source: str | Path,
    transform: str,
    output_dir: str | Path = DEFAULT_OUTPUT_DIR,
    threshold: int = DEFAULT_THRESHOLD,
    workers: int | None = None,
    border: str = DEFAULT_BORDER_POLICY,
    limit: int | None = None,
    progress: bool = True,
) -> BatchReport:
    """Convert a single image or every image in a directory.

    Configuration is validated before any image is touched, so a bad
    threshold rejects the whole batch.

    Args:
        source: Image file or directory of images.
        transform: "greyscale" or "sobel".
        output_dir: Directory results are written to (created if missing).
        threshold: Sobel threshold in [0, 255]; ignored for greyscale.
        workers: Number of images converted in parallel.
        border: Sobel border policy.
        limit: Maximum number of images to convert.
        progress: Show a progress bar.

    Raises:
        ValueError: If the source is invalid or the parameters are rejected.
    """
    step = build_step(transform, threshold=threshold, border=border)
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be at least 0, got {limit}")

    image_files = scan_local_images(source)
    logger.info("Found %s images in %s", len(image_files), source)
    if not image_files:
        logger.warning("No images found.")
        return BatchReport(transform=step.name)

    if limit is not None:
        image_files = image_files[:limit]
        logger.info("Processing limited to %s images", limit)

    output_path = Path(output_dir)
    if not output_path.is_dir():
        logger.info("Creating output folder %s", output_path)
        output_path.mkdir(parents=True, exist_ok=True)

    return run_batch(
        image_files,
        step,
        output_path,
        workers=workers,
        progress=progress,
    )
