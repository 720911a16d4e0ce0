"""
Transform step classes with a common interface.

Each step turns a canonical PixelBuffer into the transformed buffer and
knows the filename suffix its results are saved under. The batch layer only
talks to this interface.

Usage:
    from processing.steps import build_step

    step = build_step("sobel", threshold=64)
    result = step.apply(buffer)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from config import (
    BORDER_POLICIES,
    DEFAULT_BORDER_POLICY,
    DEFAULT_THRESHOLD,
    GREYSCALE_SUFFIX,
    SOBEL_SUFFIX,
)

from .buffer import PixelBuffer
from .greyscale import convert_to_greyscale
from .sobel import sobel_filter, validate_threshold


class TransformStep(ABC):
    """Base class for image transforms.

    ``apply`` may consume its input: callers must use the returned buffer
    and treat the argument as gone.
    """

    @abstractmethod
    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        """Transform a canonical buffer and return the result."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        pass

    @property
    @abstractmethod
    def suffix(self) -> str:
        """Filename suffix for results of this transform."""
        pass

    def get_metadata(self) -> dict[str, Any]:
        """Parameters worth reporting alongside results."""
        return {}


@dataclass(frozen=True)
class GreyscaleStep(TransformStep):
    """Average the color channels of every pixel, in place."""

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return convert_to_greyscale(buffer)

    @property
    def name(self) -> str:
        return "greyscale"

    @property
    def suffix(self) -> str:
        return GREYSCALE_SUFFIX


@dataclass(frozen=True)
class SobelStep(TransformStep):
    """Sobel edge detection.

    Attributes:
        threshold: Gradient components below this value are discarded.
        border: Border policy, "zero" or "replicate".
        workers: Row threads per image. Defaults to 1 because the batch
                layer already runs images in parallel.
    """

    threshold: int = DEFAULT_THRESHOLD
    border: str = DEFAULT_BORDER_POLICY
    workers: int = 1

    def __post_init__(self):
        validate_threshold(self.threshold)
        if self.border not in BORDER_POLICIES:
            raise ValueError(
                f"Unknown border policy '{self.border}'. "
                f"Expected one of {', '.join(BORDER_POLICIES)}."
            )

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return sobel_filter(
            buffer, self.threshold, workers=self.workers, border=self.border
        )

    @property
    def name(self) -> str:
        return f"sobel(threshold={self.threshold})"

    @property
    def suffix(self) -> str:
        return SOBEL_SUFFIX

    def get_metadata(self) -> dict[str, Any]:
        return {"threshold": self.threshold, "border": self.border}


TRANSFORMS = ("greyscale", "sobel")


def build_step(
    transform: str,
    threshold: int = DEFAULT_THRESHOLD,
    border: str = DEFAULT_BORDER_POLICY,
    workers: int = 1,
) -> TransformStep:
    """Build the step for a transform name.

    Raises:
        ValueError: For unknown transforms or invalid parameters.
    """
    if transform == "greyscale":
        return GreyscaleStep()
    if transform == "sobel":
        return SobelStep(threshold=threshold, border=border, workers=workers)
    raise ValueError(
        f"Unknown transform '{transform}'. Expected one of {', '.join(TRANSFORMS)}."
    )
