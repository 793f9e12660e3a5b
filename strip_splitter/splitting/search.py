"""
Split position search.

Walks outward from a target row, upward first, looking for the nearest safe
row that leaves the previous segment at least MIN_DISTANCE_PERCENT of the
split height tall.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .base import SplitReason, SplitSettings
from .seam import SeamScorer

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 1000
MIN_DISTANCE_PERCENT = 40


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class SearchOutcome:
    """Row chosen by the search and how it was reached."""

    y: int
    reason: SplitReason
    attempts: int


def min_distance(split_height: int) -> int:
    """Minimum rows between two cuts chosen by the search."""
    return split_height * MIN_DISTANCE_PERCENT // 100


def search_split_position(
    scorer: SeamScorer,
    target_y: int,
    last_split_y: int,
) -> SearchOutcome:
    """
    Search for the cut row closest to target_y.

    Args:
        scorer: Seam scorer bound to the image being split.
        target_y: Preferred cut row.
        last_split_y: Row of the previous cut.

    Returns:
        SearchOutcome with the chosen row.
    """
    settings = scorer.settings
    height = scorer.height
    step = max(settings.scan_line_step, 1)
    min_gap = min_distance(settings.split_height)

    current = target_y
    direction = Direction.UP
    attempts = 0

    while attempts < MAX_ATTEMPTS:
        attempts += 1

        if current >= height:
            return SearchOutcome(height - 1, SplitReason.BOUNDARY, attempts)

        if current <= last_split_y:
            return SearchOutcome(last_split_y + 1, SplitReason.BOUNDARY, attempts)

        if current - last_split_y < min_gap:
            # Too close to the previous cut, continue below the target instead
            current = last_split_y + settings.split_height
            direction = Direction.DOWN
            continue

        if scorer.is_safe(current):
            return SearchOutcome(current, SplitReason.SAFE, attempts)

        if direction is Direction.UP:
            if current > step:
                current -= step
            else:
                current = target_y
                direction = Direction.DOWN
        else:
            current += step

    fallback = min(target_y, height - 1)
    logger.debug(
        f"No safe row found near {target_y} after {attempts} attempts, "
        f"cutting at {fallback}"
    )
    return SearchOutcome(fallback, SplitReason.FALLBACK, attempts)


def find_split_position(
    buffer: np.ndarray,
    target_y: int,
    last_split_y: int,
    settings: SplitSettings,
) -> int:
    """
    Find the row to cut at near target_y.

    Args:
        buffer: Pixel buffer of shape (height, width[, channels]).
        target_y: Preferred cut row.
        last_split_y: Row of the previous cut.
        settings: Split settings.

    Returns:
        The chosen row.
    """
    return search_split_position(SeamScorer(buffer, settings), target_y, last_split_y).y
