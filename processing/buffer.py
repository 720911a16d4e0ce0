"""
In-memory image representations used by the processing engine.

PixelBuffer is the packed form: one flat uint8 array holding
``width * height`` pixels of 4 bytes each, row by row. PixelGrid is the
2D-indexable form used for neighbor lookups: ``grid[x, y]`` is the 4-byte
cell at column ``x`` and row ``y``.

The channel order inside a pixel is preserved but never interpreted. Only
the position of alpha (last byte) matters.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from config import BYTES_PER_PIXEL

from .errors import ConsumedBufferError, LayoutError


def _check_dimension(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise LayoutError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise LayoutError(f"{name} must be non-negative, got {value}")
    return int(value)


class PixelBuffer:
    """Packed 4-channel, 8-bit image.

    The buffer exclusively owns its data. Once a converting stage takes
    ownership it calls ``release()``; any later access to ``data`` raises
    ConsumedBufferError.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        data: Flat contiguous uint8 array of length ``width * height * 4``.
    """

    __slots__ = ("width", "height", "_data")

    def __init__(self, width: int, height: int, data: np.ndarray):
        self.width = _check_dimension(width, "width")
        self.height = _check_dimension(height, "height")

        if not isinstance(data, np.ndarray):
            raise LayoutError(f"data must be a numpy.ndarray, got {type(data).__name__}")
        if data.dtype != np.uint8:
            raise LayoutError(f"data must have dtype uint8, got {data.dtype}")
        if data.ndim != 1:
            raise LayoutError(f"data must be one-dimensional, got shape {data.shape}")

        expected = self.width * self.height * BYTES_PER_PIXEL
        if data.size != expected:
            raise LayoutError(
                f"Buffer length {data.size} does not match "
                f"{self.width}x{self.height}x{BYTES_PER_PIXEL}={expected}"
            )
        if not data.flags.c_contiguous:
            data = np.ascontiguousarray(data)
        self._data = data

    @classmethod
    def empty(cls, width: int, height: int) -> PixelBuffer:
        """Allocate a zero-filled buffer (transparent black)."""
        width = _check_dimension(width, "width")
        height = _check_dimension(height, "height")
        return cls(width, height, np.zeros(width * height * BYTES_PER_PIXEL, dtype=np.uint8))

    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelBuffer:
        """Build a buffer from an ``(height, width, 4)`` uint8 array.

        The array is copied so the buffer owns its storage.
        """
        if array.ndim != 3 or array.shape[2] != BYTES_PER_PIXEL:
            raise LayoutError(
                f"Expected an (height, width, {BYTES_PER_PIXEL}) array, got shape {array.shape}"
            )
        if array.dtype != np.uint8:
            raise LayoutError(f"array must have dtype uint8, got {array.dtype}")
        height, width = array.shape[:2]
        return cls(width, height, np.array(array, dtype=np.uint8, order="C").reshape(-1))

    @property
    def data(self) -> np.ndarray:
        if self._data is None:
            raise ConsumedBufferError(
                f"PixelBuffer {self.width}x{self.height} has been consumed"
            )
        return self._data

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the image."""
        return self.width, self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def pixels(self) -> np.ndarray:
        """Return an ``(width * height, 4)`` view of the pixel data."""
        return self.data.reshape(-1, BYTES_PER_PIXEL)

    def as_array(self) -> np.ndarray:
        """Return an ``(height, width, 4)`` view of the pixel data."""
        return self.data.reshape(self.height, self.width, BYTES_PER_PIXEL)

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, self.data.copy())

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    def release(self) -> None:
        """Give up ownership of the pixel data."""
        self._data = None

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.size == other.size
            and np.array_equal(self.data, other.data)
        )

    def __repr__(self) -> str:
        state = "released" if self.released else f"{self.data.size} bytes"
        return f"PixelBuffer(width={self.width}, height={self.height}, {state})"


@dataclass(eq=False)
class PixelGrid:
    """2D-indexable image with one 4-byte cell per pixel.

    ``cells`` has shape ``(width, height, 4)`` so that ``grid[x, y]`` and
    ``grid[x][y]`` both address column ``x``, row ``y``.
    """

    cells: np.ndarray

    def __post_init__(self):
        if not isinstance(self.cells, np.ndarray):
            raise LayoutError(f"cells must be a numpy.ndarray, got {type(self.cells).__name__}")
        if self.cells.ndim != 3 or self.cells.shape[2] != BYTES_PER_PIXEL:
            raise LayoutError(
                f"Grid cells must have shape (width, height, {BYTES_PER_PIXEL}), "
                f"got {self.cells.shape}"
            )
        if self.cells.dtype != np.uint8:
            raise LayoutError(f"Grid cells must have dtype uint8, got {self.cells.dtype}")

    @classmethod
    def empty(cls, width: int, height: int) -> PixelGrid:
        """Allocate a zero-initialized grid."""
        width = _check_dimension(width, "width")
        height = _check_dimension(height, "height")
        return cls(np.zeros((width, height, BYTES_PER_PIXEL), dtype=np.uint8))

    @property
    def width(self) -> int:
        return self.cells.shape[0]

    @property
    def height(self) -> int:
        return self.cells.shape[1]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def __getitem__(self, key):
        return self.cells[key]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.cells.shape == other.cells.shape and np.array_equal(self.cells, other.cells)
