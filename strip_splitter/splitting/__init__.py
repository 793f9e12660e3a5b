"""
Seam-aware splitting of tall images.

Cuts long vertical strips into pieces of roughly fixed height, placing each
cut on a nearby row where neighbouring pixels barely change.
"""

from .base import (
    IncompleteSplitError,
    Segment,
    SplitError,
    SplitReason,
    SplitResult,
    SplitSettings,
    to_pixel_buffer,
)
from .seam import SeamScorer, compute_threshold, is_safe_line, luma
from .search import (
    MAX_ATTEMPTS,
    SearchOutcome,
    find_split_position,
    min_distance,
    search_split_position,
)
from .splitter import SmartSplitter, create_splitter, smart_split

__all__ = [
    "IncompleteSplitError",
    "Segment",
    "SplitError",
    "SplitReason",
    "SplitResult",
    "SplitSettings",
    "to_pixel_buffer",
    "SeamScorer",
    "compute_threshold",
    "is_safe_line",
    "luma",
    "MAX_ATTEMPTS",
    "SearchOutcome",
    "find_split_position",
    "min_distance",
    "search_split_position",
    "SmartSplitter",
    "create_splitter",
    "smart_split",
]
