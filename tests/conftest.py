"""Shared fixtures for tsalign tests."""

from __future__ import annotations

from typing import Any

import pytest
import requests

from tsalign import Series


class FakeResponse:
    def __init__(self, payload: Any = None, status: int = 200, json_error: bool = False) -> None:
        self.payload = payload
        self.status_code = status
        self.json_error = json_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self) -> Any:
        if self.json_error:
            raise ValueError("No JSON object could be decoded")
        return self.payload


class FakeSession:
    """Records GET calls and replays canned responses by URL substring."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, params: dict[str, Any] | None = None, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, "params": params, **kwargs})
        for fragment, response in self.routes.items():
            if fragment in url:
                if isinstance(response, Exception):
                    raise response
                if isinstance(response, FakeResponse):
                    return response
                return FakeResponse(response)
        return FakeResponse(None, status=404)


@pytest.fixture
def fake_session():
    """Factory: fake_session({"url-fragment": payload | FakeResponse | Exception})."""
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def series_a() -> Series:
    return Series.from_pairs("A", [(0, 1.0), (1_800_000, 2.0)])


@pytest.fixture
def series_b() -> Series:
    return Series.from_pairs("B", [(900_000, 5.0)])


@pytest.fixture
def btc() -> Series:
    return Series.from_pairs(
        "Bitcoin Price",
        [(0, 95_000.0), (1_800_000, 97_500.0), (3_600_000, 96_100.0)],
    )
