"""Serving layer: parallel acquisition and versioned chart sessions."""

from tsalign.serving.acquisition import FetchOutcome, fetch_round
from tsalign.serving.session import ChartSession, RoundResult, Selection

__all__ = [
    "fetch_round",
    "FetchOutcome",
    "ChartSession",
    "RoundResult",
    "Selection",
]
