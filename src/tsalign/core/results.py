"""Result type for alignment runs.

Holds the merged table and the reference axis range, plus conversions
for charting layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from tsalign.core.errors import ENoData
from tsalign.core.types import AxisRange, MergedTable


@dataclass(frozen=True)
class AlignResult:
    """Merged table plus the optional reference axis range.

    ``keys`` lists every merged series key in input order, including keys
    that never matched a row, so tabular output has a stable column set.
    """

    table: MergedTable
    range: AxisRange | None
    keys: tuple[str, ...] = ()
    reference_key: str | None = None
    sum_key: str | None = None

    def __len__(self) -> int:
        return len(self.table)

    @property
    def is_empty(self) -> bool:
        """True when no row survived filtering (the "no data" state)."""
        return not self.table

    @property
    def timestamps(self) -> list[int]:
        return [row.timestamp for row in self.table]

    def require_data(self) -> AlignResult:
        """Return self, or raise ENoData when the table is empty."""
        if self.is_empty:
            raise ENoData(
                "No rows left after filtering",
                context={"keys": list(self.keys)},
            )
        return self

    def has_series(self, key: str) -> bool:
        """Whether ``key`` has a value in at least one row."""
        if key == self.sum_key:
            return any(row.sum is not None for row in self.table)
        return any(key in row.values for row in self.table)

    def to_records(self) -> list[dict[str, Any]]:
        """Sparse chart points, one dict per row."""
        sum_key = self.sum_key or "Sum"
        return [row.to_dict(sum_key=sum_key) for row in self.table]

    def to_dataframe(self) -> pd.DataFrame:
        """Wide DataFrame: timestamp, time (UTC), one column per key, then the sum.

        Absent values are NaN.
        """
        columns = list(self.keys)
        if self.sum_key is not None:
            columns.append(self.sum_key)

        data: dict[str, Any] = {
            "timestamp": np.array([row.timestamp for row in self.table], dtype=np.int64),
        }
        for key in self.keys:
            data[key] = [row.values.get(key, np.nan) for row in self.table]
        if self.sum_key is not None:
            data[self.sum_key] = [np.nan if row.sum is None else row.sum for row in self.table]

        df = pd.DataFrame(data, columns=["timestamp", *columns])
        if columns:
            df[columns] = df[columns].astype("float64")
        df.insert(1, "time", pd.to_datetime(df["timestamp"], unit="ms", utc=True))
        return df

    def signature(self) -> str:
        """Content hash of the table and range (identical for identical runs)."""
        from tsalign.utils.signature import compute_result_signature

        return compute_result_signature(self)

    def summary(self) -> dict[str, Any]:
        """Human-readable summary of the run."""
        return {
            "rows": len(self.table),
            "series": list(self.keys),
            "reference": self.reference_key,
            "range": None if self.range is None else self.range.as_tuple(),
            "sum": self.sum_key is not None,
        }


__all__ = ["AlignResult"]
