"""Tests for tsalign.core.config and tsalign.core.options."""

from __future__ import annotations

import dataclasses

import pytest

from tsalign import AlignConfig, AlignOptions
from tsalign.core.config import DEFAULT_RANGE_SPAN, DEFAULT_WINDOW_MS


class TestAlignConfig:
    def test_defaults(self) -> None:
        config = AlignConfig()
        assert config.window_ms == DEFAULT_WINDOW_MS == 1_800_000
        assert config.range_span == DEFAULT_RANGE_SPAN == 20_000.0
        assert config.aggregate is False
        assert config.sum_key == "Sum"
        assert config.merge_reference is True
        assert (config.granularity_minutes, config.lookback_days, config.anchor_hour) == (30, 7, 12)

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            AlignConfig().window_ms = 1  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"window_ms": -1}, "window_ms"),
            ({"range_span": -0.5}, "range_span"),
            ({"granularity_minutes": 0}, "granularity_minutes"),
            ({"lookback_days": 0}, "lookback_days"),
            ({"anchor_hour": 24}, "anchor_hour"),
            ({"max_workers": 0}, "max_workers"),
            ({"sum_key": ""}, "sum_key"),
        ],
    )
    def test_validation(self, kwargs, match) -> None:
        with pytest.raises(ValueError, match=match):
            AlignConfig(**kwargs)

    def test_zero_window_allowed(self) -> None:
        assert AlignConfig(window_ms=0).window_ms == 0

    def test_aggregate_keys_coerced_to_tuple(self) -> None:
        assert AlignConfig(aggregate_keys=["Yes", "No"]).aggregate_keys == ("Yes", "No")

    def test_presets(self) -> None:
        assert AlignConfig.default() == AlignConfig()
        summed = AlignConfig.with_sum(["Yes"], window_ms=60_000)
        assert summed.aggregate and summed.aggregate_keys == ("Yes",)
        assert summed.window_ms == 60_000
        tight = AlignConfig.tight()
        assert tight.window_ms == 300_000
        assert tight.granularity_minutes == 1

    def test_evolve_revalidates(self) -> None:
        config = AlignConfig()
        assert config.evolve(aggregate=True).aggregate
        assert config.aggregate is False
        with pytest.raises(ValueError):
            config.evolve(window_ms=-5)

    def test_to_dict(self) -> None:
        data = AlignConfig(aggregate_keys=("Yes",)).to_dict()
        assert data["aggregate_keys"] == ["Yes"]
        assert data["window_ms"] == 1_800_000


class TestAlignOptions:
    def test_defaults(self) -> None:
        options = AlignOptions()
        assert options.window_ms == 1_800_000
        assert options.aggregate_enabled is False
        assert options.reference is None

    def test_reads_config(self) -> None:
        options = AlignOptions(config=AlignConfig(window_ms=5, aggregate=True))
        assert options.window_ms == 5
        assert options.aggregate_enabled
