"""Exception types raised by the pixel processing engine.

Business errors derive from PolychromeError and are handled per image by
the batch layer. Layout errors are invariant violations (programming
errors) and derive from AssertionError so they are never mistaken for
bad input data.
"""


class PolychromeError(Exception):
    """Base class for recoverable image processing errors."""


class DecodeError(PolychromeError):
    """A source image could not be read or decoded."""


class UnsupportedFormatError(PolychromeError, ValueError):
    """An image cannot be normalized to the canonical 4-channel layout."""


class ThresholdRangeError(PolychromeError, ValueError):
    """An edge detection threshold lies outside [0, 255]."""


class LayoutError(AssertionError):
    """A buffer or grid violates its size or shape invariant."""


class ConsumedBufferError(LayoutError):
    """A pixel buffer was used after ownership moved to another stage."""
