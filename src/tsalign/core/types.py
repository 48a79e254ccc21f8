"""Value types shared by every alignment stage.

All containers are frozen. Stages build new instances instead of
mutating the ones they receive.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any

import numpy as np


@dataclass(frozen=True)
class Sample:
    """One observation: epoch milliseconds and a value."""

    timestamp: int
    value: float


@dataclass(frozen=True)
class Series:
    """Named sequence of samples.

    ``key`` is the stable display identifier used as the column name in
    merged output. Samples are kept in the order given; use
    :func:`tsalign.series.normalize_series` to sort and deduplicate.
    """

    key: str
    samples: tuple[Sample, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.samples, tuple):
            object.__setattr__(self, "samples", tuple(self.samples))

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @cached_property
    def timestamps(self) -> np.ndarray:
        """Read-only int64 array of sample timestamps."""
        arr = np.fromiter((s.timestamp for s in self.samples), dtype=np.int64, count=len(self.samples))
        arr.flags.writeable = False
        return arr

    @cached_property
    def values(self) -> np.ndarray:
        """Read-only float64 array of sample values."""
        arr = np.fromiter((s.value for s in self.samples), dtype=np.float64, count=len(self.samples))
        arr.flags.writeable = False
        return arr

    @classmethod
    def from_pairs(cls, key: str, pairs: Iterable[tuple[Any, Any]]) -> Series:
        """Build a series from ``(timestamp_ms, value)`` pairs."""
        return cls(key=key, samples=tuple(Sample(int(ts), float(v)) for ts, v in pairs))

    @classmethod
    def from_arrays(cls, key: str, timestamps: Iterable[Any], values: Iterable[Any]) -> Series:
        """Build a series from parallel timestamp and value sequences."""
        return cls.from_pairs(key, zip(timestamps, values, strict=True))

    def to_pairs(self) -> list[tuple[int, float]]:
        return [(s.timestamp, s.value) for s in self.samples]


@dataclass(frozen=True)
class MergedRow:
    """One row of the merged table.

    ``values`` is sparse: a series key is present only when that series
    had a sample inside the tolerance window of ``timestamp``. ``sum`` is
    the derived aggregate, ``None`` when not computed or when no
    contributing series is present.
    """

    timestamp: int
    values: Mapping[str, float] = field(default_factory=dict)
    sum: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.values, MappingProxyType):
            object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, key: str) -> float | None:
        return self.values.get(key)

    def to_dict(self, sum_key: str = "Sum") -> dict[str, Any]:
        """Flat chart point: timestamp, present series values, and the sum if set."""
        point: dict[str, Any] = {"timestamp": self.timestamp}
        point.update(self.values)
        if self.sum is not None:
            point[sum_key] = self.sum
        return point


@dataclass(frozen=True)
class AxisRange:
    """Fixed-span axis bounds for the reference series."""

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


MergedTable = tuple[MergedRow, ...]

__all__ = [
    "Sample",
    "Series",
    "MergedRow",
    "MergedTable",
    "AxisRange",
]
