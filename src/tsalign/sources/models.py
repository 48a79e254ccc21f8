"""Pydantic models for prediction-market event payloads.

The Gamma API encodes list fields of a market (``outcomes``,
``outcomePrices``, ``clobTokenIds``) as JSON strings; the validators
below decode them.
"""

from __future__ import annotations

import json
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

OutcomeType = Literal["yes", "no", "unknown"]

_NUMBER_RE = re.compile(r"\$?([\d,]+)")


class BaseSpec(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


def decode_list_field(value: Any) -> list[Any]:
    """Decode a JSON-string list field; lists pass through, None gives []."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        decoded = json.loads(text)
        if not isinstance(decoded, list):
            raise ValueError(f"expected a JSON list, got {type(decoded).__name__}")
        return decoded
    raise ValueError(f"unsupported list field type: {type(value).__name__}")


def outcome_type(title: str) -> OutcomeType:
    """Classify an outcome title as a yes-side or no-side outcome."""
    lower = title.lower()
    if "yes" in lower or "above" in lower or "higher" in lower:
        return "yes"
    if "no" in lower or "below" in lower or "lower" in lower:
        return "no"
    return "unknown"


def extract_price_threshold(question: str | None, group_item_title: str | None) -> int | None:
    """Price level a market is about, e.g. 78000 for "$78,000".

    The group item title is preferred when it holds a plain number above
    1000; otherwise the first number in the question is used.
    """
    if group_item_title:
        clean = group_item_title.replace(",", "").replace("$", "").strip()
        try:
            price = int(clean)
        except ValueError:
            price = None
        if price is not None and price > 1000:
            return price

    if not question:
        return None
    match = _NUMBER_RE.search(question)
    if match is None:
        return None
    digits = match.group(1).replace(",", "")
    return int(digits) if digits else None


class Outcome(BaseSpec):
    id: str
    title: str
    price: float = 0.0
    type: OutcomeType = "unknown"
    clob_token_id: str | None = None


class RawMarket(BaseSpec):
    """Market as returned inside a Gamma event payload."""

    condition_id: str = Field(default="", alias="conditionId")
    question: str | None = None
    description: str | None = None
    group_item_title: str | None = Field(default=None, alias="groupItemTitle")
    outcomes: Any = None
    outcome_prices: Any = Field(default=None, alias="outcomePrices")
    clob_token_ids: Any = Field(default=None, alias="clobTokenIds")


class Market(BaseSpec):
    id: str
    question: str | None = None
    description: str | None = None
    outcomes: tuple[Outcome, ...] = ()
    price_threshold: int | None = None

    @classmethod
    def from_raw(cls, raw: RawMarket) -> Market:
        return cls(
            id=raw.condition_id,
            question=raw.question,
            description=raw.description,
            outcomes=tuple(parse_outcomes(raw)),
            price_threshold=extract_price_threshold(raw.question, raw.group_item_title),
        )


class Event(BaseSpec):
    id: str
    title: str | None = None
    description: str | None = None
    slug: str | None = None
    markets: tuple[Market, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Event:
        """Build an Event from a raw Gamma ``/events/slug/{slug}`` payload."""
        raw_markets = [RawMarket.model_validate(m) for m in payload.get("markets") or []]
        return cls(
            id=payload.get("id", ""),
            title=payload.get("title"),
            description=payload.get("description"),
            slug=payload.get("slug"),
            markets=tuple(Market.from_raw(m) for m in raw_markets),
        )

    def all_outcomes(self) -> list[Outcome]:
        return [o for m in self.markets for o in m.outcomes]

    def find_outcome(self, outcome_id: str) -> Outcome | None:
        for outcome in self.all_outcomes():
            if outcome.id == outcome_id:
                return outcome
        return None


def parse_outcomes(raw: RawMarket) -> list[Outcome]:
    """Outcomes of one market, keyed by CLOB token id.

    Falls back to a Yes/No pair at price 0.5 when the encoded fields are
    malformed.
    """
    try:
        names = decode_list_field(raw.outcomes)
        prices = decode_list_field(raw.outcome_prices)
        token_ids = decode_list_field(raw.clob_token_ids)
        outcomes = []
        for index, name in enumerate(names):
            token_id = str(token_ids[index]) if index < len(token_ids) else f"{raw.condition_id}_{index}"
            price = float(prices[index]) if index < len(prices) and prices[index] is not None else 0.0
            outcomes.append(
                Outcome(
                    id=token_id,
                    title=str(name),
                    price=price,
                    type=outcome_type(str(name)),
                    clob_token_id=token_id,
                )
            )
        return outcomes
    except (ValueError, TypeError):
        return [
            Outcome(id=f"{raw.condition_id}_0", title="YES", price=0.5, type="yes"),
            Outcome(id=f"{raw.condition_id}_1", title="NO", price=0.5, type="no"),
        ]
