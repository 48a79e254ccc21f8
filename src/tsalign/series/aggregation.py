"""Derived sum over a subset of merged series."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from tsalign.core.types import MergedRow


def row_sum(row: MergedRow, keys: Sequence[str]) -> float | None:
    """Sum of the values of ``keys`` present in ``row``, in ``keys`` order.

    Returns None when none of the keys is present, so a row without
    contributing data never reports 0.
    """
    present = [row.values[k] for k in keys if k in row.values]
    if not present:
        return None
    total = 0.0
    for value in present:
        total += value
    return total


def add_sum(
    rows: Sequence[MergedRow],
    keys: Sequence[str],
    enabled: bool = True,
) -> tuple[MergedRow, ...]:
    """Attach the derived sum of ``keys`` to every row.

    Args:
        rows: Aligned rows
        keys: Contributing series keys
        enabled: When False, rows are returned with ``sum`` cleared

    Returns:
        New rows; ``values`` is never modified
    """
    if not enabled:
        return tuple(row if row.sum is None else replace(row, sum=None) for row in rows)
    return tuple(replace(row, sum=row_sum(row, keys)) for row in rows)
