"""Parallel acquisition of raw series.

A fetch round submits every fetch at once and returns only when all of
them have finished (join barrier). A failing fetch never aborts the
round: it is recorded and its series contributes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from tsalign.core.types import Series

logger = logging.getLogger(__name__)

FetchTask = Callable[[], "Series | None"]


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fetch within a round."""

    key: str
    series: Series | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.series is not None and not self.series.is_empty

    def series_or_empty(self) -> Series:
        """The fetched series relabelled to ``key``, or an empty series with that key."""
        if self.series is None:
            return Series(key=self.key)
        if self.series.key != self.key:
            return Series(key=self.key, samples=self.series.samples)
        return self.series


def _run_task(key: str, task: FetchTask) -> FetchOutcome:
    try:
        series = task()
    except Exception as e:
        logger.warning("Source for '%s' failed: %s", key, e)
        return FetchOutcome(key=key, series=None, error=f"{type(e).__name__}: {e}")

    if series is None:
        logger.warning("Source for '%s' returned no data", key)
        return FetchOutcome(key=key, series=None, error="unavailable")
    if not isinstance(series, Series):
        logger.warning("Source for '%s' returned %s, expected Series", key, type(series).__name__)
        return FetchOutcome(key=key, series=None, error="invalid result type")
    if series.is_empty:
        logger.info("Source for '%s' returned an empty series", key)
    return FetchOutcome(key=key, series=series)


def fetch_round(
    tasks: Mapping[str, FetchTask],
    executor: Executor | None = None,
    max_workers: int | None = None,
) -> dict[str, FetchOutcome]:
    """Run all fetch tasks concurrently and wait for every one of them.

    Args:
        tasks: Series key -> zero-argument fetch callable
        executor: Executor to submit to (a private thread pool if None)
        max_workers: Pool size when a private pool is created

    Returns:
        Outcomes keyed like ``tasks``, in ``tasks`` order
    """
    if not tasks:
        return {}

    outcomes: dict[str, FetchOutcome] = {}

    # For a single task or max_workers=1, run sequentially
    if executor is None and (len(tasks) <= 1 or max_workers == 1):
        for key, task in tasks.items():
            outcomes[key] = _run_task(key, task)
        return outcomes

    own_pool = executor is None
    pool = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="tsalign-fetch")
    try:
        futures = {pool.submit(_run_task, key, task): key for key, task in tasks.items()}
        for future in as_completed(futures):
            outcomes[futures[future]] = future.result()
    finally:
        if own_pool:
            pool.shutdown(wait=True)

    return {key: outcomes[key] for key in tasks}
