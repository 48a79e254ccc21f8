"""Tests for serving/acquisition.py."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from tsalign import Series
from tsalign.serving import FetchOutcome, fetch_round


def _fixed(key: str, *pairs: tuple[int, float]):
    return lambda: Series.from_pairs(key, pairs)


class TestFetchRound:
    """Tests for fetch_round function."""

    def test_outcomes_in_task_order(self) -> None:
        tasks = {
            "b": _fixed("b", (0, 1.0)),
            "a": _fixed("a", (0, 2.0)),
            "c": _fixed("c", (0, 3.0)),
        }
        outcomes = fetch_round(tasks)
        assert list(outcomes) == ["b", "a", "c"]
        assert all(o.ok for o in outcomes.values())

    def test_empty_tasks(self) -> None:
        assert fetch_round({}) == {}

    def test_failure_is_isolated(self) -> None:
        """One raising fetch does not abort the round."""

        def boom() -> Series:
            raise ConnectionError("network down")

        outcomes = fetch_round({"ok": _fixed("ok", (0, 1.0)), "bad": boom})
        assert outcomes["ok"].ok
        assert outcomes["bad"].series is None
        assert outcomes["bad"].error == "ConnectionError: network down"

    def test_none_is_unavailable(self) -> None:
        outcomes = fetch_round({"x": lambda: None}, max_workers=1)
        assert outcomes["x"].error == "unavailable"
        assert not outcomes["x"].ok

    def test_wrong_result_type(self) -> None:
        outcomes = fetch_round({"x": lambda: [(0, 1.0)]})
        assert outcomes["x"].error == "invalid result type"

    def test_empty_series_is_not_an_error(self) -> None:
        outcome = fetch_round({"x": lambda: Series(key="x")})["x"]
        assert outcome.error is None
        assert not outcome.ok

    def test_fetches_run_concurrently(self) -> None:
        """Both fetches must be in flight at once to pass the barrier."""
        barrier = threading.Barrier(2, timeout=5)

        def fetch(key: str):
            def run() -> Series:
                barrier.wait()
                return Series.from_pairs(key, [(0, 1.0)])

            return run

        outcomes = fetch_round({"a": fetch("a"), "b": fetch("b")}, max_workers=2)
        assert [o.error for o in outcomes.values()] == [None, None]

    def test_waits_for_every_fetch(self) -> None:
        """The round returns only after the slowest fetch finished."""
        gate = threading.Event()
        done = []

        def slow() -> Series:
            gate.wait(5)
            done.append("slow")
            return Series.from_pairs("slow", [(0, 1.0)])

        def fast() -> Series:
            gate.set()
            return Series.from_pairs("fast", [(0, 1.0)])

        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = fetch_round({"slow": slow, "fast": fast}, executor=pool)
        assert done == ["slow"]
        assert outcomes["slow"].ok and outcomes["fast"].ok


class TestFetchOutcome:
    """Tests for FetchOutcome."""

    def test_series_or_empty_relabels(self) -> None:
        outcome = FetchOutcome(key="Yes", series=Series.from_pairs("123", [(0, 1.0)]))
        series = outcome.series_or_empty()
        assert series.key == "Yes"
        assert series.to_pairs() == [(0, 1.0)]

    def test_series_or_empty_on_failure(self) -> None:
        series = FetchOutcome(key="Yes", series=None, error="unavailable").series_or_empty()
        assert series.key == "Yes"
        assert series.is_empty
