"""tsalign - Gap-aware alignment of irregular time series for charting.

Merges independently sampled series (prediction-market outcome prices, a
reference asset price) into one table keyed by the union of their sample
timestamps, matching each series within a tolerance window.

Version 1.0.0

Basic usage:
    >>> from tsalign import Series, merge
    >>> yes = Series.from_pairs("Yes", [(0, 41.0), (1_800_000, 43.5)])
    >>> btc = Series.from_pairs("Bitcoin Price", [(900_000, 97_250.0)])
    >>> result = merge([yes], reference=btc, aggregate=True)
    >>> result.to_dataframe()

Advanced usage:
    >>> from tsalign import AlignConfig, AlignOptions, align
    >>> options = AlignOptions(config=AlignConfig.with_sum(["Yes"]), reference=btc)
    >>> result = align([yes], options)
    >>> result.range
    AxisRange(min=77250.0, max=97250.0)

Live charts:
    >>> from tsalign import ChartSession, Selection
    >>> from tsalign.sources import BinanceSource, PolymarketSource
    >>> session = ChartSession(PolymarketSource(), BinanceSource())
    >>> session.request(Selection(series_ids=(token_id,), show_sum=True))
"""

__version__ = "1.0.0"

# Core API
from tsalign.core.config import AlignConfig
from tsalign.core.errors import (
    EInvalidInput,
    ENoData,
    ESourceParse,
    ESourceUnavailable,
    TSAlignError,
)
from tsalign.core.options import AlignOptions
from tsalign.core.results import AlignResult
from tsalign.core.types import AxisRange, MergedRow, MergedTable, Sample, Series

# Main entry points
from tsalign.pipeline import align, merge, run_pipeline

# Stages (granular control)
from tsalign.series import (
    add_sum,
    align_series,
    build_timestamp_union,
    estimate_axis_range,
    filter_rows,
    normalize_series,
)

# Sessions
from tsalign.serving import ChartSession, RoundResult, Selection, fetch_round

__all__ = [
    "__version__",
    # Main entry points
    "align",
    "merge",
    "run_pipeline",
    "AlignConfig",
    "AlignOptions",
    "AlignResult",
    # Data
    "Sample",
    "Series",
    "MergedRow",
    "MergedTable",
    "AxisRange",
    # Stages
    "normalize_series",
    "build_timestamp_union",
    "align_series",
    "add_sum",
    "filter_rows",
    "estimate_axis_range",
    # Sessions
    "ChartSession",
    "Selection",
    "RoundResult",
    "fetch_round",
    # Errors
    "TSAlignError",
    "EInvalidInput",
    "ESourceUnavailable",
    "ESourceParse",
    "ENoData",
]
