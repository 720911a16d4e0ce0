"""
Sobel edge detection on a PixelGrid.

For every computed pixel the 3x3 neighborhood is reduced to greyscale
(floor average of the color channels), convolved with the fixed Sobel
kernels, and each raw gradient component below the threshold is zeroed
before the magnitude is taken. The magnitude is clamped to 255 and written
(truncated) to the three color channels; alpha comes from the input pixel.

Rows are independent work items: a row reads input rows y-1..y+1 and writes
only its own output row, so they are spread over a thread pool without
locking. The input grid is never modified.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from config import (
    BORDER_POLICIES,
    COLOR_CHANNELS,
    DEFAULT_BORDER_POLICY,
    MAX_MAGNITUDE,
    MAX_THRESHOLD,
    MIN_THRESHOLD,
    default_worker_count,
)

from .buffer import PixelBuffer, PixelGrid
from .errors import ThresholdRangeError
from .greyscale import greyscale_value
from .grid import buffer_to_grid, grid_to_buffer

logger = logging.getLogger(__name__)

# Kernels are indexed [dy + 1][dx + 1]
SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.int64)
SOBEL_Y = np.array([[1, 2, 1], [0, 0, 0], [-1, -2, -1]], dtype=np.int64)
SOBEL_X.setflags(write=False)
SOBEL_Y.setflags(write=False)

_OFFSETS = [
    (dx, dy, int(SOBEL_X[dy + 1, dx + 1]), int(SOBEL_Y[dy + 1, dx + 1]))
    for dy in (-1, 0, 1)
    for dx in (-1, 0, 1)
]


def validate_threshold(threshold) -> int:
    """Return ``threshold`` as an int, or raise if it is out of range.

    Raises:
        ThresholdRangeError: If threshold is not an integer in [0, 255].
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, np.integer)):
        raise ThresholdRangeError(
            f"threshold must be an integer, got {type(threshold).__name__}"
        )
    if not MIN_THRESHOLD <= threshold <= MAX_THRESHOLD:
        raise ThresholdRangeError(
            f"threshold must be between {MIN_THRESHOLD} and {MAX_THRESHOLD}, got {threshold}"
        )
    return int(threshold)


def _resolve_workers(workers: int | None) -> int:
    if workers is None:
        return default_worker_count()
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    return workers


def _sobel_row(
    grey: np.ndarray,
    source: PixelGrid,
    output: PixelGrid,
    y: int,
    x_start: int,
    x_stop: int,
    pad: int,
    threshold: int,
) -> None:
    """Compute output pixels ``x_start <= x < x_stop`` of row ``y``.

    ``grey`` is the greyscale plane indexed [x, y], padded by ``pad``
    pixels on every side.
    """
    count = x_stop - x_start
    gx = np.zeros(count, dtype=np.int64)
    gy = np.zeros(count, dtype=np.int64)

    for dx, dy, kx, ky in _OFFSETS:
        if kx == 0 and ky == 0:
            continue
        row = y + dy + pad
        neighbors = grey[x_start + dx + pad:x_stop + dx + pad, row]
        if kx:
            gx += kx * neighbors
        if ky:
            gy += ky * neighbors

    gx[gx < threshold] = 0
    gy[gy < threshold] = 0

    magnitude = np.sqrt((gx * gx + gy * gy).astype(np.float64))
    np.minimum(magnitude, MAX_MAGNITUDE, out=magnitude)

    target = output.cells[x_start:x_stop, y]
    target[:, :COLOR_CHANNELS] = magnitude.astype(np.uint8)[:, np.newaxis]
    target[:, COLOR_CHANNELS] = source.cells[x_start:x_stop, y, COLOR_CHANNELS]


def detect_edges(
    grid: PixelGrid,
    threshold: int,
    *,
    workers: int | None = None,
    border: str = DEFAULT_BORDER_POLICY,
) -> PixelGrid:
    """Run Sobel edge detection and return a new grid of the same size.

    Args:
        grid: Input grid; read only.
        threshold: Raw gradient components below this value are discarded.
                  Must be an integer in [0, 255].
        workers: Number of threads computing rows. Defaults to the
                processor count; 1 computes rows inline.
        border: "zero" leaves the one-pixel border as (0, 0, 0, 0);
               "replicate" computes it with clamped neighbor sampling.

    Returns:
        PixelGrid with edge magnitudes in the color channels.

    Raises:
        ThresholdRangeError: If threshold is outside [0, 255].
        ValueError: If border or workers is invalid.
    """
    threshold = validate_threshold(threshold)
    if border not in BORDER_POLICIES:
        raise ValueError(
            f"Unknown border policy '{border}'. Expected one of {', '.join(BORDER_POLICIES)}."
        )
    workers = _resolve_workers(workers)

    width, height = grid.size
    output = PixelGrid.empty(width, height)
    if width == 0 or height == 0:
        return output

    grey = greyscale_value(grid.cells)
    if border == "replicate":
        grey = np.pad(grey, 1, mode="edge")
        pad = 1
        rows = range(height)
        x_start, x_stop = 0, width
    else:
        if width < 3 or height < 3:
            return output
        pad = 0
        rows = range(1, height - 1)
        x_start, x_stop = 1, width - 1

    logger.debug(
        "Sobel %dx%d threshold=%d border=%s workers=%d",
        width, height, threshold, border, workers,
    )

    def compute(y: int) -> None:
        _sobel_row(grey, grid, output, y, x_start, x_stop, pad, threshold)

    if workers == 1 or len(rows) <= 1:
        for y in rows:
            compute(y)
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # list() re-raises the first failing row
            list(pool.map(compute, rows))

    return output


def sobel_filter(
    buffer: PixelBuffer,
    threshold: int,
    *,
    workers: int | None = None,
    border: str = DEFAULT_BORDER_POLICY,
) -> PixelBuffer:
    """Run edge detection on a packed buffer.

    The threshold is checked before ``buffer`` is consumed. Returns a new
    buffer; the input buffer is released.
    """
    threshold = validate_threshold(threshold)
    grid = buffer_to_grid(buffer)
    edges = detect_edges(grid, threshold, workers=workers, border=border)
    return grid_to_buffer(edges)
