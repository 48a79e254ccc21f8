"""Time alignment of independently sampled series.

Builds the row grid from the union of all sample timestamps and matches
each series onto it with a nearest-sample rule bounded by a tolerance
window. Nothing is interpolated or carried forward: a series without a
sample inside the window is simply absent from that row.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from tsalign.core.config import DEFAULT_WINDOW_MS
from tsalign.core.types import MergedRow, Series

_NO_MATCH = -1
_FAR = np.iinfo(np.int64).max


def build_timestamp_union(series_list: Sequence[Series]) -> tuple[int, ...]:
    """Sorted, deduplicated timestamps of every sample in every series.

    Args:
        series_list: Series to merge (any order within each series)

    Returns:
        Ascending tuple of distinct timestamps; empty if no samples
    """
    arrays = [s.timestamps for s in series_list if not s.is_empty]
    if not arrays:
        return ()
    return tuple(int(t) for t in np.unique(np.concatenate(arrays)))


def match_nearest(timestamps: np.ndarray, grid: np.ndarray, window_ms: int) -> np.ndarray:
    """Index of the nearest sample for every grid point, -1 where none is in window.

    ``timestamps`` must be strictly ascending. For each grid point the two
    candidates are the last sample before it and the first sample at or
    after it, found by binary search. On equal distance the earlier
    sample wins.

    Args:
        timestamps: Sorted sample timestamps of one series
        grid: Grid timestamps to match
        window_ms: Maximum allowed distance

    Returns:
        int64 array of sample indices, same length as ``grid``
    """
    n = len(timestamps)
    if n == 0:
        return np.full(len(grid), _NO_MATCH, dtype=np.int64)

    right = np.searchsorted(timestamps, grid, side="left")
    left = right - 1

    has_right = right < n
    has_left = left >= 0
    dist_right = np.where(has_right, timestamps[np.minimum(right, n - 1)] - grid, _FAR)
    dist_left = np.where(has_left, grid - timestamps[np.maximum(left, 0)], _FAR)

    take_left = dist_left <= dist_right
    best = np.where(take_left, left, right)
    best_dist = np.where(take_left, dist_left, dist_right)

    return np.where(best_dist <= window_ms, best, _NO_MATCH).astype(np.int64)


def align_series(
    union: Sequence[int],
    series_list: Sequence[Series],
    window_ms: int = DEFAULT_WINDOW_MS,
) -> tuple[MergedRow, ...]:
    """Produce one merged row per union timestamp.

    Args:
        union: Ascending row timestamps (see build_timestamp_union)
        series_list: Normalized series; keys must be unique
        window_ms: Tolerance window in milliseconds

    Returns:
        Tuple of MergedRow in union order, ``sum`` unset
    """
    if window_ms < 0:
        raise ValueError(f"window_ms must be non-negative, got {window_ms}")

    grid = np.asarray(union, dtype=np.int64)
    matches = [
        (s.key, s.values, match_nearest(s.timestamps, grid, window_ms))
        for s in series_list
        if not s.is_empty
    ]

    rows: list[MergedRow] = []
    for i, ts in enumerate(union):
        values: dict[str, float] = {}
        for key, series_values, idx in matches:
            j = idx[i]
            if j != _NO_MATCH:
                values[key] = float(series_values[j])
        rows.append(MergedRow(timestamp=int(ts), values=values))

    return tuple(rows)
