"""Utility helpers for tsalign."""

from tsalign.utils.signature import compute_result_signature, compute_signature
from tsalign.utils.temporal import default_time_range, seconds_to_ms

__all__ = [
    "compute_signature",
    "compute_result_signature",
    "default_time_range",
    "seconds_to_ms",
]
