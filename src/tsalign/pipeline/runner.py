"""Pipeline runner - functional composition for series alignment.

Runs the stages in order in one synchronous pass: validate, normalize,
union, align, aggregate, filter; the reference axis range is computed
from the normalized reference alongside.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

from tsalign.core.config import AlignConfig
from tsalign.core.options import AlignOptions
from tsalign.core.results import AlignResult
from tsalign.core.types import Series

logger = logging.getLogger(__name__)


def run_pipeline(series: Sequence[Series], options: AlignOptions) -> AlignResult:
    """Run the merge pipeline.

    This is the core execution engine that composes stages functionally.
    Each stage receives the output of the previous stage.

    Args:
        series: Series to merge
        options: Alignment options (config, reference, time bounds)

    Returns:
        AlignResult with the filtered table and the reference axis range

    Raises:
        EInvalidInput: If the request is structurally invalid
    """
    from tsalign.pipeline.stages import (
        aggregate_stage,
        align_stage,
        filter_stage,
        normalize_stage,
        range_stage,
        union_stage,
        validate_stage,
    )

    start_time = time.perf_counter()

    # Phase 1: Request validation
    plan = validate_stage(series, options)
    plan = normalize_stage(plan)

    # Phase 2: Row grid and matching
    union = union_stage(plan)
    rows = align_stage(union, plan, options)

    # Phase 3: Derived sum, then drop rows without series data
    rows = aggregate_stage(rows, plan, options)
    rows = filter_stage(rows)

    # Phase 4: Reference axis
    axis_range = range_stage(plan, options)

    logger.debug(
        "Aligned %d series into %d rows in %.2f ms",
        len(plan.series),
        len(rows),
        (time.perf_counter() - start_time) * 1000,
    )

    return AlignResult(
        table=rows,
        range=axis_range,
        keys=plan.keys,
        reference_key=plan.reference.key if plan.reference is not None else None,
        sum_key=options.config.sum_key if options.aggregate_enabled else None,
    )


def align(series: Sequence[Series], options: AlignOptions | None = None) -> AlignResult:
    """Merge series into one gap-aware table.

    Args:
        series: Series to merge
        options: Alignment options (defaults: 30 min window, no sum, no reference)

    Returns:
        AlignResult; an empty table is a normal "no data" result
    """
    return run_pipeline(series, options or AlignOptions())


def merge(
    series: Sequence[Series],
    reference: Series | None = None,
    start_ms: int | None = None,
    end_ms: int | None = None,
    **kwargs: Any,
) -> AlignResult:
    """Single-entry-point alignment.

    Args:
        series: Series to merge
        reference: Optional reference series for the axis range
        start_ms: Lower bound for reference samples used in the range
        end_ms: Upper bound for reference samples used in the range
        **kwargs: AlignConfig fields (window_ms, aggregate, aggregate_keys, ...)

    Returns:
        AlignResult

    Examples:
        >>> result = merge([yes, no], reference=btc, aggregate=True)
        >>> result.to_dataframe()
    """
    config = AlignConfig(**kwargs)
    options = AlignOptions(config=config, reference=reference, start_ms=start_ms, end_ms=end_ms)
    return run_pipeline(series, options)
