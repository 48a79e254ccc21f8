"""Collaborator contracts for series acquisition.

Fetchers return a Series, or None when the source is unavailable. They
are expected not to raise; the acquisition layer still guards against
it. Time bounds are epoch seconds, granularity is in minutes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tsalign.core.types import Series


@runtime_checkable
class SeriesFetcher(Protocol):
    def __call__(
        self, series_id: str, start_ts: int, end_ts: int, granularity: int
    ) -> Series | None: ...


@runtime_checkable
class ReferenceFetcher(Protocol):
    def __call__(self, start_ts: int, end_ts: int, granularity: int) -> Series | None: ...
