"""Core module - value types, configuration, results and errors.

This module provides the foundational types for tsalign, following a
minimalist design philosophy.
"""

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

__all__ = [
    # Config
    "AlignConfig",
    "AlignOptions",
    # Data
    "Sample",
    "Series",
    "MergedRow",
    "MergedTable",
    "AxisRange",
    # Results
    "AlignResult",
    # Errors
    "TSAlignError",
    "EInvalidInput",
    "ESourceUnavailable",
    "ESourceParse",
    "ENoData",
]
