"""Tests for indicator lookup and DataFrame dispatch in indicators.registry."""

from __future__ import annotations

import pandas as pd
import pytest

from indicators import core, sequential
from indicators.errors import IndicatorError
from indicators.registry import INDICATOR_REGISTRY, compute_indicator, get_indicator
from indicators.results import Bands, ZigzagResult


class TestGetIndicator:
    def test_known_name(self) -> None:
        spec = get_indicator("rsi")
        assert spec.func is core.rsi
        assert spec.inputs == ("close",)

    def test_sequential_indicators_registered(self) -> None:
        for name in ("adx", "psar", "zigzag", "stoch_rsi", "obv", "wilder_smooth"):
            assert name in INDICATOR_REGISTRY
        assert get_indicator("zigzag").uses_time

    def test_names_match_functions(self) -> None:
        for name, spec in INDICATOR_REGISTRY.items():
            assert spec.func.__name__ == name

    def test_unknown_name_lists_available(self) -> None:
        with pytest.raises(IndicatorError, match="Available:.*rsi"):
            get_indicator("not_an_indicator")


class TestComputeIndicator:
    def test_explicit_params(self, isolated_config, sample_ohlcv_df: pd.DataFrame) -> None:
        result = compute_indicator(sample_ohlcv_df, "sma", {"window": 5})
        pd.testing.assert_series_equal(result, core.sma(sample_ohlcv_df["close"], 5))

    def test_config_defaults_applied(self, isolated_config, sample_ohlcv_df: pd.DataFrame) -> None:
        isolated_config({"indicators": {"defaults": {"rsi": {"window": 7}}}})
        result = compute_indicator(sample_ohlcv_df, "rsi")
        pd.testing.assert_series_equal(result, core.rsi(sample_ohlcv_df["close"], 7))

    def test_params_override_config(self, isolated_config, sample_ohlcv_df: pd.DataFrame) -> None:
        isolated_config({"indicators": {"defaults": {"bb": {"window": 10, "mult": 3.0}}}})
        result = compute_indicator(sample_ohlcv_df, "bb", {"mult": 1.0})
        expected = core.bb(sample_ohlcv_df["close"], 10, 1.0)
        assert isinstance(result, Bands)
        pd.testing.assert_series_equal(result.upper, expected.upper)

    def test_function_defaults_without_config(
        self, isolated_config, sample_ohlcv_df: pd.DataFrame
    ) -> None:
        result = compute_indicator(sample_ohlcv_df, "psar")
        expected = sequential.psar(sample_ohlcv_df["high"], sample_ohlcv_df["low"])
        pd.testing.assert_series_equal(result, expected)

    def test_zigzag_uses_timestamp_column(
        self, isolated_config, sample_ohlcv_df: pd.DataFrame
    ) -> None:
        result = compute_indicator(sample_ohlcv_df, "zigzag", {"percent": 20.0})
        assert isinstance(result, ZigzagResult)
        timestamps = set(sample_ohlcv_df["timestamp"])
        assert all(t in timestamps for t in result.time)

    def test_zigzag_without_timestamp_uses_positions(
        self, isolated_config, sample_ohlcv_df: pd.DataFrame
    ) -> None:
        df = sample_ohlcv_df.drop(columns=["timestamp"])
        result = compute_indicator(df, "zigzag", {"percent": 20.0})
        assert all(isinstance(t, int) for t in result.time)

    def test_missing_columns(self, isolated_config) -> None:
        df = pd.DataFrame({"close": [1.0, 2.0, 3.0]})
        with pytest.raises(IndicatorError, match="missing required columns"):
            compute_indicator(df, "atr", {"window": 2})

    def test_unknown_parameter(self, isolated_config, sample_ohlcv_df: pd.DataFrame) -> None:
        with pytest.raises(IndicatorError, match="Invalid parameters"):
            compute_indicator(sample_ohlcv_df, "sma", {"window": 5, "period": 5})

    def test_required_parameter_unset(
        self, isolated_config, sample_ohlcv_df: pd.DataFrame
    ) -> None:
        """sma has no default window, so an empty config leaves it unbound."""
        with pytest.raises(IndicatorError, match="Invalid parameters"):
            compute_indicator(sample_ohlcv_df, "sma")

    def test_indicator_errors_propagate(
        self, isolated_config, sample_ohlcv_df: pd.DataFrame
    ) -> None:
        with pytest.raises(IndicatorError):
            compute_indicator(sample_ohlcv_df, "sma", {"window": 0})
