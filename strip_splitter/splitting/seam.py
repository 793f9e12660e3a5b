"""
Seam scoring.

A row is safe to cut when the luma of every pair of adjacent pixels inside
the scanned columns differs by no more than a sensitivity-derived threshold.
"""

import numpy as np

from .base import SplitSettings

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def luma(pixels: np.ndarray) -> np.ndarray:
    """
    Compute the luma of a row (or any array) of pixels.

    Args:
        pixels: Array whose last axis holds R, G, B (and optionally alpha).
            A 2-D grayscale row is returned as floats unchanged.

    Returns:
        Float array of luma values.
    """
    if pixels.ndim == 1:
        return pixels.astype(np.float32)
    return pixels[..., :3].astype(np.float32) @ LUMA_WEIGHTS


def compute_threshold(sensitivity: int) -> int:
    """Maximum tolerated adjacent luma difference for a sensitivity (0-100)."""
    sensitivity = min(max(sensitivity, 0), 100)
    return 255 * (100 - sensitivity) // 100


def scan_range(width: int, ignorable_border: int) -> tuple[int, int]:
    """Inclusive (start, end) columns checked on each row."""
    return ignorable_border, max(width - ignorable_border - 1, 0)


def _row_is_safe(row: np.ndarray, start: int, end: int, threshold: int) -> bool:
    if start >= end:
        # Too narrow to compare anything
        return True

    values = luma(row[start:end + 1])
    return not bool(np.any(np.abs(np.diff(values)) > threshold))


def is_safe_line(buffer: np.ndarray, y: int, settings: SplitSettings) -> bool:
    """
    Check if row y is safe to cut.

    Args:
        buffer: Pixel buffer of shape (height, width[, channels]).
        y: Row index.
        settings: Split settings.

    Returns:
        True if no adjacent luma difference exceeds the threshold.
    """
    width = buffer.shape[1]
    start, end = scan_range(width, settings.ignorable_border)
    return _row_is_safe(buffer[y], start, end, compute_threshold(settings.sensitivity))


class SeamScorer:
    """
    Row safety checks for one image.

    Caches the verdict per row since the search revisits its target row.
    """

    def __init__(self, buffer: np.ndarray, settings: SplitSettings):
        self.buffer = buffer
        self.settings = settings
        self.threshold = compute_threshold(settings.sensitivity)
        self.start, self.end = scan_range(buffer.shape[1], settings.ignorable_border)
        self._verdicts: dict[int, bool] = {}

    @property
    def height(self) -> int:
        return self.buffer.shape[0]

    @property
    def scans_nothing(self) -> bool:
        """Whether the border leaves no adjacent column pair to compare."""
        return self.start >= self.end

    def is_safe(self, y: int) -> bool:
        verdict = self._verdicts.get(y)
        if verdict is None:
            verdict = _row_is_safe(self.buffer[y], self.start, self.end, self.threshold)
            self._verdicts[y] = verdict
        return verdict
