"""Tests for channel-averaging greyscale conversion."""

import numpy as np

from processing import PixelBuffer, convert_to_greyscale, greyscale_value


def _buffer(pixels: list[list[int]], width: int | None = None) -> PixelBuffer:
    width = width if width is not None else len(pixels)
    data = np.array(pixels, dtype=np.uint8).reshape(-1)
    return PixelBuffer(width, len(pixels) // width, data)


class TestConvertToGreyscale:
    """Tests for convert_to_greyscale."""

    def test_average_of_color_channels(self):
        buf = _buffer([[10, 20, 30, 255]])
        convert_to_greyscale(buf)
        assert buf.data.tolist() == [20, 20, 20, 255]

    def test_floor_division(self):
        buf = _buffer([[1, 1, 2, 255], [255, 255, 254, 255]])
        convert_to_greyscale(buf)
        assert buf.pixels().tolist() == [[1, 1, 1, 255], [254, 254, 254, 255]]

    def test_no_overflow_on_white(self):
        buf = _buffer([[255, 255, 255, 255]])
        convert_to_greyscale(buf)
        assert buf.data.tolist() == [255, 255, 255, 255]

    def test_alpha_untouched(self):
        buf = _buffer([[90, 0, 0, 0], [0, 90, 0, 17], [0, 0, 90, 128]])
        convert_to_greyscale(buf)
        assert buf.pixels()[:, 3].tolist() == [0, 17, 128]
        assert buf.pixels()[:, :3].tolist() == [[30, 30, 30]] * 3

    def test_in_place_returns_same_buffer(self):
        buf = _buffer([[10, 20, 30, 255]])
        data = buf.data
        result = convert_to_greyscale(buf)
        assert result is buf
        assert result.data is data

    def test_idempotent(self):
        rng = np.random.default_rng(7)
        data = rng.integers(0, 256, 16 * 9 * 4, dtype=np.uint8)
        once = convert_to_greyscale(PixelBuffer(16, 9, data.copy()))
        twice = convert_to_greyscale(convert_to_greyscale(PixelBuffer(16, 9, data.copy())))
        assert once == twice

    def test_color_channels_equal_after_conversion(self):
        rng = np.random.default_rng(3)
        buf = PixelBuffer(8, 8, rng.integers(0, 256, 8 * 8 * 4, dtype=np.uint8))
        convert_to_greyscale(buf)
        pixels = buf.pixels()
        assert np.array_equal(pixels[:, 0], pixels[:, 1])
        assert np.array_equal(pixels[:, 1], pixels[:, 2])

    def test_zero_sized_is_noop(self):
        buf = PixelBuffer.empty(0, 0)
        assert convert_to_greyscale(buf) is buf
        assert buf.data.size == 0


class TestGreyscaleValue:
    """Tests for the shared averaging helper."""

    def test_ignores_alpha(self):
        pixels = np.array([[3, 3, 3, 0], [3, 3, 3, 255]], dtype=np.uint8)
        assert greyscale_value(pixels).tolist() == [3, 3]

    def test_keeps_leading_axes(self):
        cells = np.zeros((4, 3, 4), dtype=np.uint8)
        assert greyscale_value(cells).shape == (4, 3)
