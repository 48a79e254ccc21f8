"""Configuration for series alignment.

One frozen config class holds every knob of the merge pipeline and of
the acquisition layer that feeds it, with sensible defaults.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any

DEFAULT_WINDOW_MS = 30 * 60 * 1000
DEFAULT_RANGE_SPAN = 20_000.0


@dataclass(frozen=True)
class AlignConfig:
    """Configuration for one alignment run.

    Args:
        window_ms: Tolerance window; a sample matches a row only if it lies
            within this many milliseconds of the row timestamp
        aggregate: Whether to add the derived sum to each row
        aggregate_keys: Series keys contributing to the sum. Empty means
            every merged series except the reference
        sum_key: Column label of the sum in tabular output
        range_span: Width of the reference axis below its observed maximum
        merge_reference: Whether the reference series is merged into the
            table as a regular series
        granularity_minutes: Sampling interval requested from sources
        lookback_days: Length of the default time range
        anchor_hour: Hour of day the default time range starts at
        max_workers: Thread pool size for parallel acquisition (None = auto)
    """

    window_ms: int = DEFAULT_WINDOW_MS

    # Aggregation
    aggregate: bool = False
    aggregate_keys: tuple[str, ...] = field(default_factory=tuple)
    sum_key: str = "Sum"

    # Reference axis
    range_span: float = DEFAULT_RANGE_SPAN
    merge_reference: bool = True

    # Acquisition
    granularity_minutes: int = 30
    lookback_days: int = 7
    anchor_hour: int = 12
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.window_ms < 0:
            raise ValueError(f"window_ms must be non-negative, got {self.window_ms}")
        if self.range_span < 0:
            raise ValueError(f"range_span must be non-negative, got {self.range_span}")
        if self.granularity_minutes <= 0:
            raise ValueError(f"granularity_minutes must be positive, got {self.granularity_minutes}")
        if self.lookback_days <= 0:
            raise ValueError(f"lookback_days must be positive, got {self.lookback_days}")
        if not 0 <= self.anchor_hour <= 23:
            raise ValueError(f"anchor_hour must be in [0, 23], got {self.anchor_hour}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if not self.sum_key:
            raise ValueError("sum_key must be a non-empty string")

        object.__setattr__(self, "aggregate_keys", tuple(self.aggregate_keys))

    @classmethod
    def default(cls) -> AlignConfig:
        """30 minute window, no sum, 20,000 unit reference span."""
        return cls()

    @classmethod
    def with_sum(cls, keys: tuple[str, ...] | list[str] = (), **kwargs: Any) -> AlignConfig:
        """Enable the sum aggregate over ``keys`` (all non-reference series if empty)."""
        return cls(aggregate=True, aggregate_keys=tuple(keys), **kwargs)

    @classmethod
    def tight(cls, window_ms: int = 5 * 60 * 1000) -> AlignConfig:
        """Narrow matching window for densely sampled series."""
        return cls(window_ms=window_ms, granularity_minutes=1, lookback_days=1)

    def evolve(self, **changes: Any) -> AlignConfig:
        """Return a copy with ``changes`` applied (validated again)."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["aggregate_keys"] = list(self.aggregate_keys)
        return data
