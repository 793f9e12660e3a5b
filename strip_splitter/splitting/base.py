"""
Base types for strip splitting.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union
import numpy as np
from PIL import Image


class SplitReason(str, Enum):
    """Why a segment boundary was placed where it is."""

    SAFE = "safe"
    BOUNDARY = "boundary"
    FALLBACK = "fallback"
    REMAINDER = "remainder"


class SplitError(Exception):
    """Raised when an image cannot be segmented."""

    pass


class IncompleteSplitError(SplitError):
    """Raised when segmentation stops before covering the whole image."""

    def __init__(self, covered: int, height: int):
        self.covered = covered
        self.height = height
        super().__init__(
            f"Segmentation stopped at row {covered} of {height}"
        )


@dataclass(frozen=True)
class SplitSettings:
    """Settings shared by every image of a batch."""

    split_height: int
    """Target segment height in pixels."""

    sensitivity: int
    """0-100, higher values tolerate less pixel change on a cut row."""

    scan_line_step: int
    """Row increment used while searching for a cut row."""

    ignorable_border: int
    """Columns excluded from the safety check on each side."""


@dataclass(frozen=True)
class Segment:
    """A full-width vertical slice [start_y, end_y) of an image."""

    start_y: int
    end_y: int
    reason: SplitReason = SplitReason.SAFE

    @property
    def height(self) -> int:
        return self.end_y - self.start_y

    def crop(self, buffer: np.ndarray) -> np.ndarray:
        """Return this segment's rows of the buffer."""
        return buffer[self.start_y:self.end_y]


@dataclass
class SplitResult:
    """Result of splitting one image."""

    segments: list[Segment]
    """Ordered, contiguous segments."""

    original_size: tuple[int, int]
    """Original image size (width, height)."""

    metadata: dict = field(default_factory=dict)
    """Additional metadata about the split."""

    @property
    def num_segments(self) -> int:
        return len(self.segments)

    @property
    def was_split(self) -> bool:
        return len(self.segments) > 1

    @property
    def heights(self) -> list[int]:
        return [segment.height for segment in self.segments]


def _pil_to_buffer(image: Image.Image) -> np.ndarray:
    if image.mode not in ("RGB", "RGBA", "L"):
        image = image.convert("RGB")
    return np.array(image)


def to_pixel_buffer(image: Union[np.ndarray, Image.Image, Path, str]) -> np.ndarray:
    """
    Convert an image, or a path to one, into an RGB pixel buffer.

    Args:
        image: Numpy array, PIL Image, or path.

    Returns:
        Array of shape (height, width, channels) or (height, width).

    Raises:
        TypeError: If the image type is not supported.
    """
    if isinstance(image, np.ndarray):
        return image

    if isinstance(image, (str, Path)):
        with Image.open(image) as img:
            return _pil_to_buffer(img)

    if isinstance(image, Image.Image):
        return _pil_to_buffer(image)

    raise TypeError(f"Unsupported image type: {type(image)}")
