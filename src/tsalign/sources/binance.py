"""Reference asset price source (Binance spot klines)."""

from __future__ import annotations

import logging
from typing import Any

import requests

from tsalign.core.types import Sample, Series

logger = logging.getLogger(__name__)

BINANCE_KLINES_URL = "https://api.binance.com/api/v3/klines"
DEFAULT_TIMEOUT = 10
MAX_KLINES = 1000


class BinanceSource:
    """Close prices of one symbol, used as the reference series.

    Args:
        symbol: Binance symbol (default BTCUSDT)
        key: Series key of the returned reference series
        session: requests session (or any object with a compatible ``get``)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        symbol: str = "BTCUSDT",
        key: str = "Bitcoin Price",
        session: Any | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        url: str = BINANCE_KLINES_URL,
    ) -> None:
        self.symbol = symbol
        self.key = key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.url = url

    def fetch_reference_series(self, start_ts: int, end_ts: int, granularity: int = 30) -> Series | None:
        """Kline close prices between ``start_ts`` and ``end_ts`` (epoch seconds).

        Returns:
            Series of (open time ms, close price), or None on failure
        """
        params = {
            "symbol": self.symbol,
            "interval": f"{granularity}m",
            "startTime": start_ts * 1000,
            "endTime": end_ts * 1000,
            "limit": MAX_KLINES,
        }
        try:
            resp = self.session.get(self.url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            klines = resp.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Failed to fetch %s price history: %s", self.symbol, e)
            return None

        if not isinstance(klines, list):
            logger.warning("Unexpected klines payload for %s", self.symbol)
            return None

        samples = []
        for kline in klines:
            try:
                samples.append(Sample(int(kline[0]), float(kline[4])))
            except (IndexError, TypeError, ValueError):
                logger.debug("Skipping malformed kline %r", kline)
        logger.debug("Fetched %d %s price points", len(samples), self.symbol)
        return Series(key=self.key, samples=tuple(samples))

    __call__ = fetch_reference_series
