"""Central configuration for the polychrome image converter.

All tunable parameters are defined here with descriptive names.
"""

import os

# =============================================================================
# PIXEL LAYOUT
# =============================================================================

# Canonical layout: 4 bytes per pixel, [c0, c1, c2, alpha], 8 bits per channel
BYTES_PER_PIXEL = 4

# Number of color channels averaged into a greyscale value (alpha excluded)
COLOR_CHANNELS = 3

# =============================================================================
# EDGE DETECTION
# =============================================================================

# Valid threshold range for discarding weak gradient components (inclusive)
MIN_THRESHOLD = 0
MAX_THRESHOLD = 255

# Threshold used by the CLI when none is given
DEFAULT_THRESHOLD = 64

# Magnitudes above this value are clamped
MAX_MAGNITUDE = 255

# Border handling for the Sobel operator:
#   "zero"      - border pixels are not computed and stay (0, 0, 0, 0)
#   "replicate" - border pixels are computed with clamped neighbor sampling
BORDER_POLICIES = ("zero", "replicate")
DEFAULT_BORDER_POLICY = "zero"

# =============================================================================
# FILES
# =============================================================================

DEFAULT_INPUT_DIR = "input"
DEFAULT_OUTPUT_DIR = "output"

# Extensions accepted when enumerating a source directory
VALID_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".exif", ".tiff", ".tif", ".webp",
}

# Suffixes appended to the source stem for each transform
GREYSCALE_SUFFIX = "_Greyscale"
SOBEL_SUFFIX = "_Sobel"

# Results are always written as PNG to keep the alpha channel
OUTPUT_EXTENSION = ".png"

# =============================================================================
# CONCURRENCY
# =============================================================================


def default_worker_count() -> int:
    """Number of workers used when none is requested (processor count)."""
    return os.cpu_count() or 1
