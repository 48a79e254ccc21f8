"""Temporal helpers for request time ranges."""

from __future__ import annotations

from datetime import datetime, timedelta


def default_time_range(
    now: datetime | None = None,
    lookback_days: int = 7,
    anchor_hour: int = 12,
) -> tuple[int, int]:
    """Time range from ``lookback_days`` ago at ``anchor_hour``:00 until ``now``.

    Naive ``now`` values are interpreted in local time, like
    ``datetime.now()``.

    Returns:
        (start_ts, end_ts) in epoch seconds
    """
    now = now or datetime.now().astimezone()
    start = (now - timedelta(days=lookback_days)).replace(
        hour=anchor_hour, minute=0, second=0, microsecond=0
    )
    return int(start.timestamp()), int(now.timestamp())


def seconds_to_ms(ts: int | None) -> int | None:
    return None if ts is None else int(ts) * 1000
