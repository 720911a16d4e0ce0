"""Tests for the PixelBuffer and PixelGrid representations."""

import numpy as np
import pytest

from processing import ConsumedBufferError, LayoutError, PixelBuffer, PixelGrid


class TestPixelBuffer:
    """Tests for PixelBuffer invariants and helpers."""

    def test_valid_buffer(self):
        buf = PixelBuffer(3, 2, np.zeros(24, dtype=np.uint8))
        assert buf.size == (3, 2)
        assert buf.data.size == 24

    def test_length_mismatch_raises(self):
        with pytest.raises(LayoutError, match="does not match"):
            PixelBuffer(3, 2, np.zeros(23, dtype=np.uint8))

    def test_layout_error_is_assertion(self):
        """Invariant violations are programming errors, not ValueErrors."""
        with pytest.raises(AssertionError):
            PixelBuffer(2, 2, np.zeros(3, dtype=np.uint8))

    def test_wrong_dtype_raises(self):
        with pytest.raises(LayoutError, match="uint8"):
            PixelBuffer(1, 1, np.zeros(4, dtype=np.int32))

    def test_multidimensional_data_raises(self):
        with pytest.raises(LayoutError, match="one-dimensional"):
            PixelBuffer(1, 1, np.zeros((1, 4), dtype=np.uint8))

    def test_negative_dimension_raises(self):
        with pytest.raises(LayoutError, match="non-negative"):
            PixelBuffer(-1, 2, np.zeros(0, dtype=np.uint8))

    def test_non_int_dimension_raises(self):
        with pytest.raises(LayoutError, match="must be an int"):
            PixelBuffer(1.5, 2, np.zeros(0, dtype=np.uint8))

    def test_empty_is_transparent_black(self):
        buf = PixelBuffer.empty(4, 3)
        assert buf.data.size == 48
        assert not buf.data.any()

    def test_zero_area(self):
        buf = PixelBuffer.empty(0, 5)
        assert buf.is_empty
        assert buf.data.size == 0

    def test_from_array_layout(self):
        array = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
        buf = PixelBuffer.from_array(array)
        assert buf.size == (3, 2)
        assert buf.tobytes() == array.tobytes()

    def test_from_array_copies(self):
        array = np.zeros((2, 2, 4), dtype=np.uint8)
        buf = PixelBuffer.from_array(array)
        array[0, 0, 0] = 99
        assert buf.data[0] == 0

    def test_from_array_wrong_channels_raises(self):
        with pytest.raises(LayoutError):
            PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_pixels_view_is_writable_view(self):
        buf = PixelBuffer.empty(2, 1)
        buf.pixels()[1] = [1, 2, 3, 4]
        assert buf.data.tolist() == [0, 0, 0, 0, 1, 2, 3, 4]

    def test_release_invalidates_data(self):
        buf = PixelBuffer.empty(2, 2)
        buf.release()
        assert buf.released
        with pytest.raises(ConsumedBufferError, match="consumed"):
            _ = buf.data

    def test_equality(self):
        a = PixelBuffer(1, 1, np.array([1, 2, 3, 4], dtype=np.uint8))
        b = PixelBuffer(1, 1, np.array([1, 2, 3, 4], dtype=np.uint8))
        c = PixelBuffer(1, 1, np.array([1, 2, 3, 5], dtype=np.uint8))
        assert a == b
        assert a != c

    def test_same_bytes_different_shape_not_equal(self):
        data = np.zeros(8, dtype=np.uint8)
        assert PixelBuffer(2, 1, data.copy()) != PixelBuffer(1, 2, data.copy())

    def test_copy_is_independent(self):
        buf = PixelBuffer.empty(1, 1)
        clone = buf.copy()
        clone.data[0] = 7
        assert buf.data[0] == 0


class TestPixelGrid:
    """Tests for PixelGrid invariants and indexing."""

    def test_empty_grid_dimensions(self):
        grid = PixelGrid.empty(4, 3)
        assert grid.size == (4, 3)
        assert grid.cells.shape == (4, 3, 4)
        assert not grid.cells.any()

    def test_indexing_by_x_then_y(self):
        grid = PixelGrid.empty(3, 2)
        grid.cells[2, 1] = [9, 8, 7, 6]
        assert grid[2, 1].tolist() == [9, 8, 7, 6]
        assert grid[2][1].tolist() == [9, 8, 7, 6]

    def test_wrong_cell_length_raises(self):
        with pytest.raises(LayoutError, match="shape"):
            PixelGrid(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_wrong_dtype_raises(self):
        with pytest.raises(LayoutError, match="uint8"):
            PixelGrid(np.zeros((2, 2, 4), dtype=np.float32))

    def test_equality(self):
        a = PixelGrid.empty(2, 2)
        b = PixelGrid.empty(2, 2)
        assert a == b
        b.cells[0, 0, 3] = 1
        assert a != b
