"""Signature helpers for result hashing."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tsalign.core.results import AlignResult
    from tsalign.core.types import MergedRow


def _row_payload(row: MergedRow) -> list[Any]:
    return [row.timestamp, sorted(row.values.items()), row.sum]


def compute_signature(obj: dict[str, Any] | list[Any]) -> str:
    """Compute a hash signature for a JSON-serializable object.

    Args:
        obj: Configuration dict or list payload to hash

    Returns:
        SHA-256 hash string (truncated to 16 chars)

    Examples:
        >>> sig = compute_signature({"window_ms": 1800000})
        >>> len(sig)
        16
    """
    json_str = json.dumps(obj, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(json_str.encode()).hexdigest()[:16]


def compute_result_signature(result: AlignResult) -> str:
    """Hash of table rows, keys and range of an alignment result.

    Float values are hashed through their ``repr`` so identical runs give
    identical signatures.
    """
    payload = {
        "keys": list(result.keys),
        "sum_key": result.sum_key,
        "range": None if result.range is None else [repr(result.range.min), repr(result.range.max)],
        "rows": [
            [ts, [[k, repr(v)] for k, v in values], None if s is None else repr(s)]
            for ts, values, s in (_row_payload(row) for row in result.table)
        ],
    }
    return compute_signature(payload)


__all__ = ["compute_signature", "compute_result_signature"]
