"""Series sources: the collaborators that acquire raw series."""

from tsalign.sources.binance import BinanceSource
from tsalign.sources.models import (
    Event,
    Market,
    Outcome,
    decode_list_field,
    extract_price_threshold,
    outcome_type,
)
from tsalign.sources.polymarket import PolymarketSource, extract_event_slug
from tsalign.sources.protocol import ReferenceFetcher, SeriesFetcher

__all__ = [
    "SeriesFetcher",
    "ReferenceFetcher",
    "PolymarketSource",
    "BinanceSource",
    "Event",
    "Market",
    "Outcome",
    "extract_event_slug",
    "extract_price_threshold",
    "outcome_type",
    "decode_list_field",
]
