"""
Strip splitter.

Cuts a tall image top to bottom into segments of roughly split_height rows,
moving each cut to a nearby quiet row when one exists.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Optional, Union
import numpy as np
from PIL import Image

from .base import (
    IncompleteSplitError,
    Segment,
    SplitReason,
    SplitResult,
    SplitSettings,
    to_pixel_buffer,
)
from .seam import SeamScorer
from .search import search_split_position

logger = logging.getLogger(__name__)


def smart_split(buffer: np.ndarray, settings: SplitSettings) -> list[Segment]:
    """
    Split a pixel buffer into contiguous vertical segments.

    Args:
        buffer: Pixel buffer of shape (height, width[, channels]).
        settings: Split settings.

    Returns:
        Ordered segments covering every row of the buffer.

    Raises:
        IncompleteSplitError: If a cut would produce an empty segment.
    """
    scorer = SeamScorer(buffer, settings)
    height = scorer.height
    segments: list[Segment] = []
    current_y = 0

    while current_y < height:
        target_y = current_y + settings.split_height

        if target_y >= height:
            boundary, reason = height, SplitReason.REMAINDER
        else:
            outcome = search_split_position(scorer, target_y, current_y)
            boundary, reason = outcome.y, outcome.reason

        if boundary <= current_y:
            raise IncompleteSplitError(current_y, height)

        segments.append(Segment(current_y, boundary, reason))
        current_y = boundary

    return segments


class SmartSplitter:
    """
    Splits tall images with a fixed set of settings.

    Holds the batch-wide settings; every call to split() works on its own
    pixel buffer.
    """

    def __init__(self, settings: SplitSettings):
        """
        Initialize the splitter.

        Args:
            settings: Settings shared by every image split with this instance.
        """
        self.settings = settings

    def split(self, image: Union[np.ndarray, Image.Image, Path, str]) -> SplitResult:
        """
        Split an image.

        Args:
            image: Image as numpy array, PIL Image, or path.

        Returns:
            SplitResult with the segments and per-reason counts.
        """
        buffer = to_pixel_buffer(image)
        height, width = buffer.shape[:2]

        segments = smart_split(buffer, self.settings)
        reasons = Counter(segment.reason.value for segment in segments)

        if reasons.get(SplitReason.FALLBACK.value):
            logger.debug(
                f"{reasons[SplitReason.FALLBACK.value]} forced cut(s) "
                f"in {width}x{height} image"
            )

        return SplitResult(
            segments=segments,
            original_size=(width, height),
            metadata={
                "split_height": self.settings.split_height,
                "reasons": dict(reasons),
            },
        )

    @staticmethod
    def crop(buffer: np.ndarray, segment: Segment) -> np.ndarray:
        """Return a segment's pixels as a contiguous array."""
        return np.ascontiguousarray(segment.crop(buffer))


def create_splitter(
    split_height: int = 1280,
    sensitivity: int = 90,
    scan_line_step: int = 5,
    ignorable_border: int = 5,
    config: Optional[SplitSettings] = None,
) -> SmartSplitter:
    """
    Factory function to create a configured SmartSplitter.

    Args:
        split_height: Target segment height.
        sensitivity: Cut row sensitivity (0-100).
        scan_line_step: Row increment while searching.
        ignorable_border: Columns ignored on each side.
        config: Ready-made settings, used instead of the other arguments.

    Returns:
        Configured SmartSplitter.
    """
    settings = config or SplitSettings(
        split_height=split_height,
        sensitivity=sensitivity,
        scan_line_step=scan_line_step,
        ignorable_border=ignorable_border,
    )
    return SmartSplitter(settings)
