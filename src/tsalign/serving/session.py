"""Chart session: versioned, coalesced alignment rounds.

Every selection change is a request tagged with a new generation. At most
one round runs at a time; requests arriving meanwhile collapse into the
newest one. A round whose generation has been superseded by the time it
finishes is discarded instead of published.

Example:
    >>> session = ChartSession(poly.fetch_series, btc.fetch_reference_series)
    >>> session.request(Selection(series_ids=("123", "456"), show_sum=True))
    >>> session.wait()
    >>> session.latest.result.to_dataframe()
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from types import MappingProxyType

from tsalign.core.config import AlignConfig
from tsalign.core.errors import TSAlignError
from tsalign.core.options import AlignOptions
from tsalign.core.results import AlignResult
from tsalign.pipeline.runner import run_pipeline
from tsalign.serving.acquisition import FetchOutcome, fetch_round
from tsalign.sources.protocol import ReferenceFetcher, SeriesFetcher
from tsalign.utils.temporal import default_time_range, seconds_to_ms

logger = logging.getLogger(__name__)

_REFERENCE_TASK = "__reference__"

# Reported in RoundResult.failed when the reference fetcher has no ``key``
REFERENCE = "reference"


@dataclass(frozen=True)
class Selection:
    """What the chart should show.

    Args:
        series_ids: Source ids of the selected series, in display order
        show_sum: Add the derived sum of the selected series
        reference: Include the reference series
    """

    series_ids: tuple[str, ...] = ()
    show_sum: bool = False
    reference: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "series_ids", tuple(dict.fromkeys(self.series_ids)))

    def toggle(self, series_id: str) -> Selection:
        """Selection with ``series_id`` added or removed."""
        if series_id in self.series_ids:
            ids = tuple(i for i in self.series_ids if i != series_id)
        else:
            ids = (*self.series_ids, series_id)
        return Selection(series_ids=ids, show_sum=self.show_sum, reference=self.reference)


@dataclass(frozen=True)
class RoundResult:
    """Outcome of one acquisition + alignment round."""

    generation: int
    selection: Selection
    result: AlignResult | None = None
    error: TSAlignError | None = None
    failed: tuple[str, ...] = ()
    time_range: tuple[int, int] | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class _State:
    generation: int = 0
    pending: tuple[int, Selection] | None = None
    running: bool = False
    latest: RoundResult | None = None
    discarded: int = 0
    labels: Mapping[str, str] = field(default_factory=dict)


class ChartSession:
    """Owns the selection-to-chart loop for one chart.

    Args:
        fetch_series: Fetcher for selected series
        fetch_reference: Fetcher for the reference series (optional)
        config: Alignment and acquisition configuration
        labels: Series id -> display key (ids are used when missing)
        on_result: Called with every published RoundResult
        clock: Returns "now" for the default time range
        fetch_executor: Executor for parallel fetches (private pool if None)
    """

    def __init__(
        self,
        fetch_series: SeriesFetcher,
        fetch_reference: ReferenceFetcher | None = None,
        config: AlignConfig | None = None,
        labels: Mapping[str, str] | None = None,
        on_result: Callable[[RoundResult], None] | None = None,
        clock: Callable[[], datetime] | None = None,
        fetch_executor: Executor | None = None,
    ) -> None:
        self.fetch_series = fetch_series
        self.fetch_reference = fetch_reference
        self.config = config or AlignConfig()
        self.on_result = on_result
        self.clock = clock or (lambda: datetime.now().astimezone())

        self._own_fetch_pool = fetch_executor is None
        self._fetch_pool = fetch_executor or ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="tsalign-fetch"
        )
        self._control = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tsalign-round")
        self._counter = itertools.count(1)
        self._cond = threading.Condition()
        self._state = _State(labels=MappingProxyType(dict(labels or {})))
        self._closed = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        """Newest generation requested so far (0 before any request)."""
        with self._cond:
            return self._state.generation

    @property
    def latest(self) -> RoundResult | None:
        """Most recent published round."""
        with self._cond:
            return self._state.latest

    @property
    def discarded(self) -> int:
        """Number of rounds dropped because a newer generation was requested."""
        with self._cond:
            return self._state.discarded

    def set_labels(self, labels: Mapping[str, str]) -> None:
        with self._cond:
            self._state.labels = MappingProxyType(dict(labels))

    def request(self, selection: Selection) -> int:
        """Queue a round for ``selection`` and return its generation.

        If a round is already running, this request replaces any request
        still waiting behind it.
        """
        with self._cond:
            if self._closed:
                raise RuntimeError("ChartSession is closed")
            generation = next(self._counter)
            self._state.generation = generation
            self._state.pending = (generation, selection)
            start = not self._state.running
            if start:
                self._state.running = True
        if start:
            self._control.submit(self._drain)
        return generation

    def refresh(self, selection: Selection) -> RoundResult | None:
        """Run a round for ``selection`` in the calling thread.

        Returns:
            The published RoundResult, or None if a newer generation was
            requested while it ran
        """
        with self._cond:
            if self._closed:
                raise RuntimeError("ChartSession is closed")
            generation = next(self._counter)
            self._state.generation = generation
            self._state.pending = None
        outcome = self.run_round(generation, selection)
        return outcome if self._publish(outcome) else None

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no round is running or queued. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(
                lambda: not self._state.running and self._state.pending is None,
                timeout=timeout,
            )

    def close(self) -> None:
        with self._cond:
            self._closed = True
        self._control.shutdown(wait=True)
        if self._own_fetch_pool:
            self._fetch_pool.shutdown(wait=True)

    def __enter__(self) -> ChartSession:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def run_round(self, generation: int, selection: Selection) -> RoundResult:
        """Fetch everything the selection needs, then align once all fetches are back."""
        start_ts, end_ts = default_time_range(
            self.clock(), self.config.lookback_days, self.config.anchor_hour
        )
        granularity = self.config.granularity_minutes
        with self._cond:
            labels = self._state.labels

        tasks = {
            series_id: partial(self.fetch_series, series_id, start_ts, end_ts, granularity)
            for series_id in selection.series_ids
        }
        if selection.reference and self.fetch_reference is not None:
            tasks[_REFERENCE_TASK] = partial(self.fetch_reference, start_ts, end_ts, granularity)

        outcomes = fetch_round(tasks, executor=self._fetch_pool)
        owner = getattr(self.fetch_reference, "__self__", self.fetch_reference)
        reference_label = getattr(owner, "key", REFERENCE)
        failed = tuple(
            reference_label if key == _REFERENCE_TASK else key
            for key, o in outcomes.items()
            if o.series is None
        )

        reference = None
        ref_outcome = outcomes.pop(_REFERENCE_TASK, None)
        if ref_outcome is not None and ref_outcome.series is not None:
            reference = ref_outcome.series

        series = [
            FetchOutcome(
                key=labels.get(series_id, series_id),
                series=outcome.series,
                error=outcome.error,
            ).series_or_empty()
            for series_id, outcome in outcomes.items()
        ]

        config = self.config.evolve(aggregate=selection.show_sum, aggregate_keys=())
        options = AlignOptions(
            config=config,
            reference=reference,
            start_ms=seconds_to_ms(start_ts),
            end_ms=seconds_to_ms(end_ts),
        )
        try:
            result = run_pipeline(series, options)
        except TSAlignError as e:
            logger.warning("Round %d rejected: %s", generation, e)
            return RoundResult(
                generation=generation,
                selection=selection,
                error=e,
                failed=failed,
                time_range=(start_ts, end_ts),
            )

        return RoundResult(
            generation=generation,
            selection=selection,
            result=result,
            failed=failed,
            time_range=(start_ts, end_ts),
        )

    def _drain(self) -> None:
        while True:
            with self._cond:
                if self._state.pending is None:
                    self._state.running = False
                    self._cond.notify_all()
                    return
                generation, selection = self._state.pending
                self._state.pending = None

            try:
                outcome = self.run_round(generation, selection)
            except Exception as e:
                logger.exception("Round %d failed", generation)
                outcome = RoundResult(
                    generation=generation,
                    selection=selection,
                    error=TSAlignError(str(e), context={"generation": generation}),
                )
            self._publish(outcome)

    def _publish(self, outcome: RoundResult) -> bool:
        with self._cond:
            if outcome.generation != self._state.generation:
                self._state.discarded += 1
                logger.info(
                    "Discarding round %d: generation %d is newer",
                    outcome.generation,
                    self._state.generation,
                )
                self._cond.notify_all()
                return False
            self._state.latest = outcome
            self._cond.notify_all()
        if self.on_result is not None:
            try:
                self.on_result(outcome)
            except Exception:
                logger.exception("on_result callback failed for round %d", outcome.generation)
        return True
