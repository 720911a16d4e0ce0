"""
Image file decode/encode.

Decoding goes through Pillow so every container it understands (PNG, JPEG,
GIF, BMP, TIFF, WebP) is accepted; the result is normalized to the canonical
PixelBuffer layout. Results are written as PNG to keep the alpha channel.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from processing import DecodeError, PixelBuffer, to_pixel_buffer

logger = logging.getLogger(__name__)


def decode_image(path: str | Path) -> PixelBuffer:
    """Load an image file into a canonical PixelBuffer.

    Multi-frame images (animated GIF, multi-page TIFF) use their first frame.

    Raises:
        DecodeError: If the file cannot be opened or decoded.
        UnsupportedFormatError: If the decoded mode cannot be normalized.
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            image.load()
            return to_pixel_buffer(image)
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise DecodeError(f"Cannot decode {path.name}: {exc}") from exc


def encode_image(buffer: PixelBuffer, path: str | Path) -> Path:
    """Write a PixelBuffer to ``path`` as PNG.

    The buffer's channel order is written as RGBA.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.fromarray(buffer.as_array())
    image.save(path, format="PNG")
    logger.debug("Saved %dx%d image -> %s", buffer.width, buffer.height, path)
    return path
