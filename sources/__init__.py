"""
Image source adapters.

This module provides the file-facing side of the converter:
- Local directories (enumeration and extension filtering)
- Decoding files into PixelBuffers and encoding results as PNG
"""

from .local import scan_local_images, is_supported_image
from .codec import decode_image, encode_image

__all__ = [
    "scan_local_images",
    "is_supported_image",
    "decode_image",
    "encode_image",
]
