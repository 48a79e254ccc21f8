"""Series module for tsalign.

Provides the pure stages of the merge pipeline.
"""

from .aggregation import add_sum, row_sum
from .alignment import align_series, build_timestamp_union, match_nearest
from .filtering import filter_rows, has_series_data
from .normalize import is_normalized, normalize_series, restrict_series
from .scaling import estimate_axis_range

__all__ = [
    # Normalization
    "normalize_series",
    "is_normalized",
    "restrict_series",
    # Alignment
    "build_timestamp_union",
    "match_nearest",
    "align_series",
    # Aggregation
    "add_sum",
    "row_sum",
    # Filtering
    "filter_rows",
    "has_series_data",
    # Scaling
    "estimate_axis_range",
]
