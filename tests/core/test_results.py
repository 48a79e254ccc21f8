"""Tests for tsalign.core.results and tsalign.core.types."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from tsalign import AlignResult, AxisRange, ENoData, MergedRow, Series, merge


@pytest.fixture
def result(series_a, series_b, btc) -> AlignResult:
    return merge([series_a, series_b], reference=btc, aggregate=True)


class TestTypes:
    def test_series_arrays_read_only(self, series_a) -> None:
        assert series_a.timestamps.tolist() == [0, 1_800_000]
        assert not series_a.values.flags.writeable

    def test_series_from_arrays_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            Series.from_arrays("A", [1, 2], [1.0])

    def test_merged_row_values_immutable(self) -> None:
        row = MergedRow(0, {"A": 1.0})
        with pytest.raises(TypeError):
            row.values["A"] = 2.0  # type: ignore[index]

    def test_row_to_dict_is_sparse(self) -> None:
        assert MergedRow(5, {"A": 1.0}).to_dict() == {"timestamp": 5, "A": 1.0}
        assert MergedRow(5, {"A": 1.0}, sum=1.0).to_dict(sum_key="Total") == {
            "timestamp": 5,
            "A": 1.0,
            "Total": 1.0,
        }

    def test_axis_range(self) -> None:
        assert AxisRange(1.0, 4.0).span == 3.0


class TestAlignResult:
    def test_summary(self, result) -> None:
        assert result.summary() == {
            "rows": 4,
            "series": ["A", "B", "Bitcoin Price"],
            "reference": "Bitcoin Price",
            "range": (77_500.0, 97_500.0),
            "sum": True,
        }

    def test_to_dataframe(self, result) -> None:
        df = result.to_dataframe()
        assert list(df.columns) == ["timestamp", "time", "A", "B", "Bitcoin Price", "Sum"]
        assert df["timestamp"].tolist() == [0, 900_000, 1_800_000, 3_600_000]
        assert df["time"].iloc[1] == pd.Timestamp("1970-01-01 00:15:00", tz="UTC")
        last = df.iloc[-1]
        assert last["A"] == 2.0
        assert math.isnan(last["B"])
        assert last["Sum"] == 2.0

    def test_to_dataframe_empty(self) -> None:
        df = AlignResult(table=(), range=None, keys=("A",)).to_dataframe()
        assert list(df.columns) == ["timestamp", "time", "A"]
        assert df.empty

    def test_to_records(self, result) -> None:
        records = result.to_records()
        assert records[-1] == {"timestamp": 3_600_000, "A": 2.0, "Bitcoin Price": 96_100.0, "Sum": 2.0}

    def test_has_series(self, result) -> None:
        assert result.has_series("A")
        assert result.has_series("Sum")
        assert not result.has_series("C")

    def test_require_data(self, result) -> None:
        assert result.require_data() is result
        with pytest.raises(ENoData):
            AlignResult(table=(), range=None).require_data()

    def test_len_and_empty(self, result) -> None:
        assert len(result) == 4
        assert not result.is_empty
        assert AlignResult(table=(), range=None).is_empty
