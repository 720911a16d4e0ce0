"""
Normalization of arbitrary images into the canonical packed layout.

Every core algorithm expects a PixelBuffer: 4 channels, 8 bits per channel.
This module is the single gate into that layout. Inputs already in the
canonical layout pass through untouched; everything else is converted into
a freshly allocated buffer.
"""

import numpy as np
import cv2
from PIL import Image

from config import BYTES_PER_PIXEL

from .buffer import PixelBuffer
from .errors import UnsupportedFormatError

# Pillow modes that Image.convert("RGBA") handles without loss of meaning
_CONVERTIBLE_MODES = {
    "1", "L", "LA", "La", "P", "PA", "RGB", "RGBX", "RGBa", "CMYK",
    "YCbCr", "LAB", "HSV",
}

# Single-channel integer modes holding 16-bit samples (16-bit PNG and TIFF)
_SIXTEEN_BIT_MODES = {"I", "I;16", "I;16B", "I;16L"}

_MAX_SIXTEEN_BIT = 65535


def is_canonical(image) -> bool:
    """Check whether ``image`` is already in the canonical layout."""
    if isinstance(image, PixelBuffer):
        return True
    if isinstance(image, Image.Image):
        return image.mode == "RGBA"
    if isinstance(image, np.ndarray):
        return (
            image.ndim == 3
            and image.shape[2] == BYTES_PER_PIXEL
            and image.dtype == np.uint8
        )
    return False


def _to_uint8(img: np.ndarray) -> np.ndarray:
    if img.dtype == np.uint8:
        return img
    if img.dtype == np.bool_:
        return img.astype(np.uint8) * 255
    if np.issubdtype(img.dtype, np.integer):
        return np.clip(img, 0, 255).astype(np.uint8)
    raise UnsupportedFormatError(
        f"Unsupported pixel dtype {img.dtype}; expected an integer type"
    )


def array_to_pixel_buffer(img: np.ndarray) -> PixelBuffer:
    """Convert a numpy image array to a PixelBuffer.

    Args:
        img: Image array. Can be:
             - 2D greyscale (height, width)
             - 3D with 1 channel (greyscale)
             - 3D with 3 channels: alpha 255 is appended
             - 3D with 4 channels: used as-is

    Returns:
        PixelBuffer owning a copy of the pixels.

    Raises:
        UnsupportedFormatError: For unsupported dimensions, channels or dtypes.
    """
    if img.ndim == 2:
        img = img[:, :, np.newaxis]
    if img.ndim != 3:
        raise UnsupportedFormatError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    channels = img.shape[2]
    img = _to_uint8(img)

    if img.shape[0] == 0 or img.shape[1] == 0:
        if channels not in (1, 3, BYTES_PER_PIXEL):
            raise UnsupportedFormatError(f"Unsupported number of channels: {channels}")
        return PixelBuffer.empty(img.shape[1], img.shape[0])

    if channels == 1:
        rgba = cv2.cvtColor(np.ascontiguousarray(img[:, :, 0]), cv2.COLOR_GRAY2RGBA)
    elif channels == 3:
        rgba = cv2.cvtColor(np.ascontiguousarray(img), cv2.COLOR_RGB2RGBA)
    elif channels == BYTES_PER_PIXEL:
        rgba = img
    else:
        raise UnsupportedFormatError(
            f"Unsupported number of channels: {channels}. "
            "Expected 1 (greyscale), 3 (color) or 4 (color + alpha)."
        )
    return PixelBuffer.from_array(rgba)


def image_to_pixel_buffer(image: Image.Image) -> PixelBuffer:
    """Convert a Pillow image to a PixelBuffer in RGBA order.

    The source image is not modified. Integer modes (16-bit greyscale)
    are scaled down to 8 bits; float images are clipped to [0, 255].
    """
    if image.mode in _SIXTEEN_BIT_MODES:
        # Keep the high byte; "I" values outside 0..65535 are clipped first
        samples = np.clip(np.asarray(image).astype(np.int64), 0, _MAX_SIXTEEN_BIT)
        return array_to_pixel_buffer((samples >> 8).astype(np.uint8))
    if image.mode == "F":
        return array_to_pixel_buffer(np.clip(np.asarray(image), 0, 255).astype(np.uint8))

    if image.mode != "RGBA":
        if image.mode not in _CONVERTIBLE_MODES:
            raise UnsupportedFormatError(f"Cannot normalize image mode '{image.mode}'")
        image = image.convert("RGBA")

    width, height = image.size
    if width == 0 or height == 0:
        return PixelBuffer.empty(width, height)
    array = np.asarray(image, dtype=np.uint8)
    return PixelBuffer.from_array(array)


def to_pixel_buffer(image) -> PixelBuffer:
    """Normalize ``image`` into the canonical packed layout.

    A PixelBuffer is returned unchanged (same object, no copy). Pillow
    images and numpy arrays are converted into a new buffer.

    Raises:
        UnsupportedFormatError: If the image cannot be normalized.
        TypeError: If ``image`` is not a supported type.
    """
    if isinstance(image, PixelBuffer):
        return image
    if isinstance(image, Image.Image):
        return image_to_pixel_buffer(image)
    if isinstance(image, np.ndarray):
        return array_to_pixel_buffer(image)
    raise TypeError(
        f"Expected PixelBuffer, PIL.Image.Image or numpy.ndarray, got {type(image).__name__}"
    )
