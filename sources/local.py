"""
Local directory image scanning.

Functions for finding images in local directories.
"""

import logging
from pathlib import Path

from config import VALID_EXTENSIONS

logger = logging.getLogger(__name__)


def is_supported_image(path: Path) -> bool:
    """Check the file extension against the accepted image formats."""
    return path.suffix.lower() in VALID_EXTENSIONS


def scan_local_images(path: str | Path) -> list[Path]:
    """Find all image files in a directory or return a single image file.

    Only files directly inside the directory are considered.

    Args:
        path: Path to directory or single image file to scan.

    Returns:
        Sorted list of image file paths.

    Raises:
        ValueError: If path doesn't exist or isn't a valid image/directory.
    """
    file_path = Path(path).resolve()

    # Handle single file
    if file_path.is_file():
        if is_supported_image(file_path):
            return [file_path]
        raise ValueError(f"{path} is not a supported image file")

    # Handle directory
    if not file_path.is_dir():
        raise ValueError(f"{path} is not a valid file or directory")

    image_files = set()
    for candidate in file_path.iterdir():
        if not candidate.is_file():
            continue
        if is_supported_image(candidate):
            image_files.add(candidate)
        else:
            logger.debug("%s has an unsupported extension, dropping file.", candidate.name)

    return sorted(image_files)
