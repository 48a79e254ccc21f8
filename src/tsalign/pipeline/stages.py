"""Pipeline stage definitions.

Each stage is a pure function that transforms input to output.
Stages are composed in the runner to form the complete pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from tsalign.core.errors import EInvalidInput
from tsalign.core.options import AlignOptions
from tsalign.core.types import AxisRange, MergedRow, Series
from tsalign.series import (
    add_sum,
    align_series,
    build_timestamp_union,
    estimate_axis_range,
    filter_rows,
    normalize_series,
)

logger = logging.getLogger(__name__)

RESERVED_KEYS = frozenset({"timestamp", "time"})


@dataclass(frozen=True)
class PipelineStage:
    """A single pipeline stage.

    Each stage is a named function with clear input/output contracts.
    """

    name: str
    run: Callable[..., Any]


@dataclass(frozen=True)
class MergePlan:
    """Validated request: what to merge and what to sum."""

    series: tuple[Series, ...]
    reference: Series | None
    aggregate_keys: tuple[str, ...]

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(s.key for s in self.series)


# =============================================================================
# Stage Implementations
# =============================================================================


def validate_stage(series: Sequence[Series], options: AlignOptions) -> MergePlan:
    """Reject structurally invalid requests before any computation.

    Resolves which series are merged (the inputs, plus the reference when
    ``merge_reference`` is set and its key is new) and which keys feed the
    sum.
    """
    if isinstance(series, Series) or not isinstance(series, Sequence):
        raise EInvalidInput(
            "series must be a sequence of Series",
            context={"type": type(series).__name__},
        )
    bad = [type(s).__name__ for s in series if not isinstance(s, Series)]
    if bad:
        raise EInvalidInput("series contains non-Series items", context={"types": bad})

    reference = options.reference
    if reference is not None and not isinstance(reference, Series):
        raise EInvalidInput(
            "reference must be a Series or None",
            context={"type": type(reference).__name__},
        )

    if not series and reference is None:
        raise EInvalidInput(
            "Nothing to align: no series and no reference",
            fix_hint="Select at least one series or pass a reference series",
        )

    keys = [s.key for s in series]
    duplicates = sorted({k for k in keys if keys.count(k) > 1})
    if duplicates:
        raise EInvalidInput(
            f"Duplicate series keys: {duplicates}",
            fix_hint="Give every series a distinct key",
        )

    merged = list(series)
    config = options.config
    if reference is not None and config.merge_reference:
        if reference.key in keys:
            if series[keys.index(reference.key)] != reference:
                raise EInvalidInput(
                    f"Reference key '{reference.key}' clashes with a different input series",
                    fix_hint="Rename the reference series or pass the same series object",
                )
        else:
            merged.append(reference)

    merged_keys = [s.key for s in merged]
    reserved = sorted(RESERVED_KEYS.intersection(merged_keys))
    if reserved:
        raise EInvalidInput(f"Series keys {reserved} are reserved column names")

    if config.aggregate:
        if config.sum_key in merged_keys:
            raise EInvalidInput(
                f"Sum key '{config.sum_key}' clashes with a series key",
                fix_hint="Choose another sum_key",
            )
        if config.aggregate_keys:
            unknown = [k for k in config.aggregate_keys if k not in merged_keys]
            if unknown:
                raise EInvalidInput(
                    f"Aggregate keys not present in any input series: {unknown}",
                    context={"series": merged_keys},
                )
            aggregate_keys = tuple(config.aggregate_keys)
        else:
            ref_key = reference.key if reference is not None else None
            aggregate_keys = tuple(k for k in keys if k != ref_key)
    else:
        aggregate_keys = ()

    if options.start_ms is not None and options.end_ms is not None and options.start_ms > options.end_ms:
        raise EInvalidInput(
            "start_ms is after end_ms",
            context={"start_ms": options.start_ms, "end_ms": options.end_ms},
        )

    return MergePlan(series=tuple(merged), reference=reference, aggregate_keys=aggregate_keys)


def normalize_stage(plan: MergePlan) -> MergePlan:
    """Sort and deduplicate every series, the reference included."""
    normalized = tuple(normalize_series(s) for s in plan.series)
    reference = plan.reference
    if reference is not None:
        # Reuse the merged copy when the reference is one of the merged series
        merged = [n for s, n in zip(plan.series, normalized, strict=True) if s == reference]
        reference = merged[0] if merged else normalize_series(reference)
    return MergePlan(series=normalized, reference=reference, aggregate_keys=plan.aggregate_keys)


def union_stage(plan: MergePlan) -> tuple[int, ...]:
    union = build_timestamp_union(plan.series)
    logger.debug("Timestamp union: %d rows from %d series", len(union), len(plan.series))
    return union


def align_stage(union: tuple[int, ...], plan: MergePlan, options: AlignOptions) -> tuple[MergedRow, ...]:
    return align_series(union, plan.series, window_ms=options.window_ms)


def aggregate_stage(
    rows: tuple[MergedRow, ...], plan: MergePlan, options: AlignOptions
) -> tuple[MergedRow, ...]:
    """Add the sum when enabled (skipped otherwise)."""
    if not options.aggregate_enabled:
        return rows
    return add_sum(rows, plan.aggregate_keys)


def filter_stage(rows: tuple[MergedRow, ...]) -> tuple[MergedRow, ...]:
    kept = filter_rows(rows)
    logger.debug("Row filter kept %d of %d rows", len(kept), len(rows))
    return kept


def range_stage(plan: MergePlan, options: AlignOptions) -> AxisRange | None:
    """Reference axis range, computed once per run."""
    return estimate_axis_range(
        plan.reference,
        span=options.config.range_span,
        start_ms=options.start_ms,
        end_ms=options.end_ms,
    )


# =============================================================================
# Stage Registry
# =============================================================================

STAGES = [
    PipelineStage("validate", validate_stage),
    PipelineStage("normalize", normalize_stage),
    PipelineStage("union", union_stage),
    PipelineStage("align", align_stage),
    PipelineStage("aggregate", aggregate_stage),
    PipelineStage("filter", filter_stage),
    PipelineStage("range", range_stage),
]
