"""Axis range estimation for the reference series.

The reference axis has a fixed width anchored at the observed peak, so
it stays stable even when the series minimum is an outlier.
"""

from __future__ import annotations

from tsalign.core.config import DEFAULT_RANGE_SPAN
from tsalign.core.types import AxisRange, Series
from tsalign.series.normalize import restrict_series


def estimate_axis_range(
    reference: Series | None,
    span: float = DEFAULT_RANGE_SPAN,
    start_ms: int | None = None,
    end_ms: int | None = None,
) -> AxisRange | None:
    """Fixed-span range ending at the reference maximum.

    Args:
        reference: Reference series (None means no reference)
        span: Distance between the range minimum and maximum
        start_ms: Ignore samples before this timestamp
        end_ms: Ignore samples after this timestamp

    Returns:
        AxisRange(max - span, max), or None when there are no samples in
        the range and the caller should fall back to automatic scaling
    """
    if reference is None:
        return None
    window = restrict_series(reference, start_ms, end_ms)
    if window.is_empty:
        return None
    peak = float(window.values.max())
    return AxisRange(min=peak - span, max=peak)
