"""Polymarket sources: event metadata (Gamma API) and price history (CLOB API).

Event lookup raises on failure because it runs before any chart exists.
Price history follows the fetcher contract: failures are logged and
reported as None, never raised.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

import requests

from tsalign.core.errors import EInvalidInput, ESourceParse, ESourceUnavailable
from tsalign.core.types import Sample, Series
from tsalign.sources.models import Event

logger = logging.getLogger(__name__)

GAMMA_API_BASE = "https://gamma-api.polymarket.com"
CLOB_API_BASE = "https://clob.polymarket.com"
DEFAULT_TIMEOUT = 10
USER_AGENT = "tsalign/1.0"


def extract_event_slug(url_or_slug: str) -> str | None:
    """Event slug from a polymarket.com URL, or the input if it is already a slug.

    Uses the path segment after ``/event/`` when present, otherwise the
    last non-empty path segment.
    """
    text = (url_or_slug or "").strip()
    if not text:
        return None
    if not text.startswith(("http://", "https://")):
        return text.strip("/") or None

    try:
        parsed = urlparse(text)
    except ValueError:
        return None
    parts = [p for p in parsed.path.split("/") if p]
    if not parts:
        return None
    if "event" in parts:
        index = parts.index("event")
        if index + 1 < len(parts):
            return parts[index + 1]
    return parts[-1]


class PolymarketSource:
    """HTTP client for Polymarket event metadata and outcome price history.

    Args:
        session: requests session (or any object with a compatible ``get``)
        timeout: Request timeout in seconds
        as_percent: Scale prices (0..1) to percentages (0..100)
    """

    def __init__(
        self,
        session: Any | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        as_percent: bool = True,
        gamma_base: str = GAMMA_API_BASE,
        clob_base: str = CLOB_API_BASE,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.as_percent = as_percent
        self.gamma_base = gamma_base.rstrip("/")
        self.clob_base = clob_base.rstrip("/")

    def _get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        resp = self.session.get(
            url,
            params=params,
            timeout=self.timeout,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        )
        resp.raise_for_status()
        return resp

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return self._get(url, params=params).json()

    def fetch_event(self, url_or_slug: str) -> Event:
        """Fetch and parse an event by URL or slug.

        Raises:
            EInvalidInput: If no slug can be extracted
            ESourceUnavailable: If the request fails
            ESourceParse: If the payload is not an event object
        """
        slug = extract_event_slug(url_or_slug)
        if not slug:
            raise EInvalidInput("Invalid URL or slug", context={"input": url_or_slug})

        logger.info("Fetching event %s", slug)
        try:
            resp = self._get(f"{self.gamma_base}/events/slug/{slug}")
        except requests.exceptions.RequestException as e:
            raise ESourceUnavailable(
                f"Failed to fetch event data: {e}",
                context={"slug": slug},
            ) from e
        try:
            payload = resp.json()
        except ValueError as e:
            raise ESourceParse("Event response is not JSON", context={"slug": slug}) from e

        if not isinstance(payload, dict):
            raise ESourceParse(
                "Unexpected event payload",
                context={"slug": slug, "type": type(payload).__name__},
            )
        return Event.from_payload(payload)

    def fetch_series(
        self,
        series_id: str,
        start_ts: int,
        end_ts: int,
        granularity: int = 30,
    ) -> Series | None:
        """Price history of one outcome token.

        Args:
            series_id: CLOB token id
            start_ts: Start, epoch seconds
            end_ts: End, epoch seconds
            granularity: Sample interval in minutes (``fidelity``)

        Returns:
            Series keyed by ``series_id`` with millisecond timestamps, or
            None if the history could not be fetched
        """
        params = {"market": series_id, "startTs": start_ts, "endTs": end_ts, "fidelity": granularity}
        try:
            payload = self._get_json(f"{self.clob_base}/prices-history", params=params)
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Failed to fetch price history for %s: %s", series_id, e)
            return None

        history = payload.get("history") if isinstance(payload, dict) else None
        if not isinstance(history, list):
            logger.warning("Unexpected price history payload for %s", series_id)
            return None

        scale = 100.0 if self.as_percent else 1.0
        samples = []
        for point in history:
            try:
                samples.append(Sample(int(point["t"]) * 1000, float(point.get("p") or 0) * scale))
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed history point %r", point)
        logger.debug("Fetched %d history points for %s", len(samples), series_id)
        return Series(key=series_id, samples=tuple(samples))

    __call__ = fetch_series
