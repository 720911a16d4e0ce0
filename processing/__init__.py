"""
Pixel processing engine.

This package holds the in-memory image representations and the two
transforms. Everything below operates on the canonical layout: 4 bytes per
pixel, 8 bits per channel, alpha last.

Key components:
- buffer: PixelBuffer (packed) and PixelGrid ([x][y] indexable)
- normalization: to_pixel_buffer() gate into the canonical layout
- greyscale: convert_to_greyscale() channel averaging, in place
- grid: buffer_to_grid() / grid_to_buffer() conversions
- sobel: detect_edges() thresholded gradient magnitude
- steps: TransformStep classes used by the batch layer
- errors: exception taxonomy
"""

from .buffer import PixelBuffer, PixelGrid
from .errors import (
    PolychromeError,
    DecodeError,
    UnsupportedFormatError,
    ThresholdRangeError,
    LayoutError,
    ConsumedBufferError,
)
from .normalization import to_pixel_buffer, is_canonical
from .greyscale import convert_to_greyscale, greyscale_value
from .grid import buffer_to_grid, grid_to_buffer
from .sobel import SOBEL_X, SOBEL_Y, detect_edges, sobel_filter, validate_threshold
from .steps import (
    TransformStep,
    GreyscaleStep,
    SobelStep,
    TRANSFORMS,
    build_step,
)

__all__ = [
    # Representations
    "PixelBuffer",
    "PixelGrid",
    # Errors
    "PolychromeError",
    "DecodeError",
    "UnsupportedFormatError",
    "ThresholdRangeError",
    "LayoutError",
    "ConsumedBufferError",
    # Function API
    "to_pixel_buffer",
    "is_canonical",
    "convert_to_greyscale",
    "greyscale_value",
    "buffer_to_grid",
    "grid_to_buffer",
    "SOBEL_X",
    "SOBEL_Y",
    "detect_edges",
    "sobel_filter",
    "validate_threshold",
    # Class-based API
    "TransformStep",
    "GreyscaleStep",
    "SobelStep",
    "TRANSFORMS",
    "build_step",
]
