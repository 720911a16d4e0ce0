"""Channel-averaging greyscale conversion."""

import numpy as np

from config import COLOR_CHANNELS

from .buffer import PixelBuffer


def greyscale_value(pixels: np.ndarray) -> np.ndarray:
    """Floor average of the three color channels.

    Args:
        pixels: uint8 array whose last axis holds ``[c0, c1, c2, alpha]``.

    Returns:
        Integer array with the last axis removed, values in [0, 255].
    """
    return pixels[..., :COLOR_CHANNELS].sum(axis=-1, dtype=np.int32) // COLOR_CHANNELS


def convert_to_greyscale(buffer: PixelBuffer) -> PixelBuffer:
    """Replace each pixel's color channels with their average, in place.

    Alpha is left untouched. Returns the same buffer for chaining. A
    zero-sized buffer is a no-op.

    Examples:
        >>> buf = PixelBuffer(1, 1, np.array([10, 20, 30, 255], dtype=np.uint8))
        >>> convert_to_greyscale(buf).data.tolist()
        [20, 20, 20, 255]
    """
    if buffer.is_empty:
        return buffer

    pixels = buffer.pixels()
    average = greyscale_value(pixels).astype(np.uint8)
    pixels[:, :COLOR_CHANNELS] = average[:, np.newaxis]
    return buffer
