"""Tests for sources/polymarket.py."""

from __future__ import annotations

import pytest
import requests

from tsalign import EInvalidInput, ESourceParse, ESourceUnavailable
from tsalign.sources import PolymarketSource, extract_event_slug


class TestExtractEventSlug:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("https://polymarket.com/event/bitcoin-above-on-october-19", "bitcoin-above-on-october-19"),
            ("https://polymarket.com/event/btc-above/btc-above-78k?tid=1", "btc-above"),
            ("https://polymarket.com/markets/crypto/btc-weekly", "btc-weekly"),
            ("bitcoin-above-on-october-19", "bitcoin-above-on-october-19"),
            ("  /btc-slug/ ", "btc-slug"),
        ],
    )
    def test_extraction(self, text, expected) -> None:
        assert extract_event_slug(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "https://polymarket.com/", "/"])
    def test_nothing_to_extract(self, text) -> None:
        assert extract_event_slug(text) is None


class TestFetchEvent:
    def test_fetches_by_slug(self, fake_session) -> None:
        session = fake_session(
            {
                "/events/slug/btc-above": {
                    "id": 7,
                    "title": "Bitcoin above?",
                    "markets": [
                        {
                            "conditionId": "0x1",
                            "question": "Above $80,000?",
                            "outcomes": '["Yes", "No"]',
                            "outcomePrices": '["0.1", "0.9"]',
                            "clobTokenIds": '["111", "222"]',
                        }
                    ],
                }
            }
        )
        event = PolymarketSource(session=session).fetch_event("https://polymarket.com/event/btc-above")
        assert event.id == "7"
        assert [o.id for o in event.all_outcomes()] == ["111", "222"]
        assert session.calls[0]["url"] == "https://gamma-api.polymarket.com/events/slug/btc-above"
        assert session.calls[0]["timeout"] == 10

    def test_invalid_input(self, fake_session) -> None:
        with pytest.raises(EInvalidInput):
            PolymarketSource(session=fake_session({})).fetch_event("")

    def test_http_error(self, fake_session) -> None:
        with pytest.raises(ESourceUnavailable):
            PolymarketSource(session=fake_session({})).fetch_event("missing")

    def test_connection_error(self, fake_session) -> None:
        session = fake_session({"events": requests.exceptions.ConnectionError("refused")})
        with pytest.raises(ESourceUnavailable, match="refused"):
            PolymarketSource(session=session).fetch_event("btc")

    def test_not_json(self, fake_session, fake_response) -> None:
        session = fake_session({"events": fake_response(json_error=True)})
        with pytest.raises(ESourceParse):
            PolymarketSource(session=session).fetch_event("btc")

    def test_not_an_object(self, fake_session) -> None:
        with pytest.raises(ESourceParse, match="Unexpected"):
            PolymarketSource(session=fake_session({"events": [1, 2]})).fetch_event("btc")


class TestFetchSeries:
    def test_history_scaled_to_percent(self, fake_session) -> None:
        session = fake_session({"prices-history": {"history": [{"t": 1000, "p": 0.42}, {"t": 2800, "p": 0.5}]}})
        series = PolymarketSource(session=session).fetch_series("111", 900, 3000, 30)

        assert series.key == "111"
        assert [s.timestamp for s in series.samples] == [1_000_000, 2_800_000]
        assert [s.value for s in series.samples] == pytest.approx([42.0, 50.0])
        assert session.calls[0]["params"] == {"market": "111", "startTs": 900, "endTs": 3000, "fidelity": 30}

    def test_raw_probabilities(self, fake_session) -> None:
        session = fake_session({"prices-history": {"history": [{"t": 1, "p": 0.25}]}})
        series = PolymarketSource(session=session, as_percent=False)("111", 0, 10, 1)
        assert series.to_pairs() == [(1000, 0.25)]

    def test_malformed_points_skipped(self, fake_session) -> None:
        session = fake_session({"prices-history": {"history": [{"p": 0.5}, {"t": "x"}, {"t": 2, "p": 0.5}]}})
        series = PolymarketSource(session=session).fetch_series("111", 0, 10)
        assert series.to_pairs() == [(2000, 50.0)]

    def test_empty_history(self, fake_session) -> None:
        session = fake_session({"prices-history": {"history": []}})
        series = PolymarketSource(session=session).fetch_series("111", 0, 10)
        assert series is not None and series.is_empty

    @pytest.mark.parametrize(
        "route",
        [
            {},
            {"prices-history": requests.exceptions.Timeout("slow")},
            {"prices-history": {"error": "bad market"}},
            {"prices-history": [1, 2, 3]},
        ],
    )
    def test_failures_return_none(self, fake_session, route) -> None:
        assert PolymarketSource(session=fake_session(route)).fetch_series("111", 0, 10) is None

    def test_not_json_returns_none(self, fake_session, fake_response) -> None:
        session = fake_session({"prices-history": fake_response(json_error=True)})
        assert PolymarketSource(session=session).fetch_series("111", 0, 10) is None
