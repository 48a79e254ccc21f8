"""Row filtering for merged tables."""

from __future__ import annotations

from collections.abc import Sequence

from tsalign.core.types import MergedRow


def has_series_data(row: MergedRow) -> bool:
    """True if at least one real series has a value in ``row``.

    The derived sum is ignored: it cannot keep an otherwise empty row.
    """
    return len(row.values) > 0


def filter_rows(rows: Sequence[MergedRow]) -> tuple[MergedRow, ...]:
    """Drop rows that carry no series data."""
    return tuple(row for row in rows if has_series_data(row))
