"""Tests for the transform step classes."""

import numpy as np
import pytest

from processing import (
    GreyscaleStep,
    PixelBuffer,
    SobelStep,
    ThresholdRangeError,
    TRANSFORMS,
    build_step,
)


class TestGreyscaleStep:
    """Tests for the GreyscaleStep class."""

    def test_apply_averages_in_place(self):
        buf = PixelBuffer(1, 1, np.array([10, 20, 30, 255], dtype=np.uint8))
        result = GreyscaleStep().apply(buf)
        assert result is buf
        assert result.data.tolist() == [20, 20, 20, 255]

    def test_suffix_and_name(self):
        step = GreyscaleStep()
        assert step.suffix == "_Greyscale"
        assert step.name == "greyscale"
        assert step.get_metadata() == {}


class TestSobelStep:
    """Tests for the SobelStep class."""

    def test_apply_returns_new_buffer(self):
        buf = PixelBuffer.empty(5, 5)
        result = SobelStep(threshold=10).apply(buf)
        assert result is not buf
        assert result.size == (5, 5)

    def test_suffix_and_metadata(self):
        step = SobelStep(threshold=42, border="replicate")
        assert step.suffix == "_Sobel"
        assert step.name == "sobel(threshold=42)"
        assert step.get_metadata() == {"threshold": 42, "border": "replicate"}

    def test_invalid_threshold_fails_on_construction(self):
        with pytest.raises(ThresholdRangeError):
            SobelStep(threshold=300)

    def test_invalid_border_fails_on_construction(self):
        with pytest.raises(ValueError, match="border policy"):
            SobelStep(threshold=10, border="mirror")


class TestBuildStep:
    """Tests for build_step."""

    def test_known_transforms(self):
        assert TRANSFORMS == ("greyscale", "sobel")
        assert isinstance(build_step("greyscale"), GreyscaleStep)
        step = build_step("sobel", threshold=7)
        assert isinstance(step, SobelStep)
        assert step.threshold == 7

    def test_greyscale_ignores_threshold(self):
        assert isinstance(build_step("greyscale", threshold=999), GreyscaleStep)

    def test_unknown_transform_raises(self):
        with pytest.raises(ValueError, match="Unknown transform"):
            build_step("sepia")
