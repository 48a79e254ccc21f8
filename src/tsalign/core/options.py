"""Per-call alignment options."""

from __future__ import annotations

from dataclasses import dataclass, field

from tsalign.core.config import AlignConfig
from tsalign.core.types import Series


@dataclass(frozen=True)
class AlignOptions:
    """Everything ``align()`` needs besides the series themselves.

    ``start_ms``/``end_ms`` bound the reference samples used for the axis
    range; they do not trim the merged table.
    """

    config: AlignConfig = field(default_factory=AlignConfig)
    reference: Series | None = None
    start_ms: int | None = None
    end_ms: int | None = None

    @property
    def window_ms(self) -> int:
        return self.config.window_ms

    @property
    def aggregate_enabled(self) -> bool:
        return self.config.aggregate
