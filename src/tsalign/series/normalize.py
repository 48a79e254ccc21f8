"""Series normalization: sort by timestamp and drop duplicate timestamps."""

from __future__ import annotations

import numpy as np

from tsalign.core.types import Sample, Series


def normalize_series(series: Series) -> Series:
    """Return ``series`` sorted ascending by timestamp with unique timestamps.

    Samples are stable-sorted, so samples sharing a timestamp keep their
    input order and the one appearing last in the input wins. Samples
    with a NaN value are not observations and are dropped first.

    Args:
        series: Raw series, in any order

    Returns:
        New normalized Series with the same key
    """
    if series.is_empty:
        return Series(key=series.key)

    ts = series.timestamps
    values = series.values

    observed = ~np.isnan(values)
    ts = ts[observed]
    values = values[observed]

    order = np.argsort(ts, kind="stable")
    ts = ts[order]
    values = values[order]

    # Keep the last sample of each run of equal timestamps
    last_of_run = np.ones(len(ts), dtype=bool)
    if len(ts) > 1:
        last_of_run[:-1] = ts[1:] != ts[:-1]

    samples = tuple(
        Sample(int(t), float(v))
        for t, v in zip(ts[last_of_run], values[last_of_run], strict=True)
    )
    return Series(key=series.key, samples=samples)


def is_normalized(series: Series) -> bool:
    """True if timestamps are strictly ascending."""
    ts = series.timestamps
    return bool(len(ts) < 2 or np.all(ts[1:] > ts[:-1]))


def restrict_series(series: Series, start_ms: int | None = None, end_ms: int | None = None) -> Series:
    """Keep samples with ``start_ms <= timestamp <= end_ms`` (open bounds if None)."""
    if start_ms is None and end_ms is None:
        return series
    samples = tuple(
        s
        for s in series.samples
        if (start_ms is None or s.timestamp >= start_ms) and (end_ms is None or s.timestamp <= end_ms)
    )
    return Series(key=series.key, samples=samples)
