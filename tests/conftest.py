"""Shared test fixtures for the indicator library.

Provides reusable OHLCV DataFrames and an isolated configuration used
across all test modules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import numpy as np
import pandas as pd
import pytest
import yaml

from app import config


@pytest.fixture()
def sample_ohlcv_df() -> pd.DataFrame:
    """A 100-row OHLCV DataFrame with realistic daily price data.

    The series starts at $100 and follows a random walk with moderate
    volatility.  Volume oscillates around 1 000 000 shares.
    """
    rng = np.random.default_rng(42)
    n = 100

    # Build a realistic close series via cumulative log-returns.
    log_returns = rng.normal(loc=0.0005, scale=0.015, size=n)
    close = 100.0 * np.exp(np.cumsum(log_returns))

    # Derive OHLC from close with small intraday ranges.
    high = close * (1.0 + rng.uniform(0.001, 0.02, size=n))
    low = close * (1.0 - rng.uniform(0.001, 0.02, size=n))
    open_ = low + rng.uniform(0.3, 0.7, size=n) * (high - low)
    volume = rng.integers(500_000, 2_000_000, size=n).astype(float)

    timestamps = pd.date_range("2024-01-01", periods=n, freq="D")

    return pd.DataFrame(
        {
            "timestamp": timestamps,
            "open": open_,
            "high": high,
            "low": low,
            "close": close,
            "volume": volume,
        }
    )


@pytest.fixture()
def small_ohlcv_df() -> pd.DataFrame:
    """A 20-row OHLCV DataFrame for simple / edge-case tests.

    Prices follow a gentle uptrend from $50 to $60 with deterministic
    values so that hand-calculated expected results are straightforward.
    """
    n = 20
    close = np.linspace(50.0, 60.0, n)
    high = close + 1.0
    low = close - 1.0
    open_ = close - 0.5
    volume = np.full(n, 1_000_000.0)

    timestamps = pd.date_range("2024-06-01", periods=n, freq="D")

    return pd.DataFrame(
        {
            "timestamp": timestamps,
            "open": open_,
            "high": high,
            "low": low,
            "close": close,
            "volume": volume,
        }
    )


@pytest.fixture()
def isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Point the config loader at a throwaway YAML file.

    Returns a callable that writes the given dict as the config file and
    reloads it.  Environment overrides are cleared and the cached config is
    restored after the test.
    """
    for env_var in (*config._ENV_OVERRIDES, config._CONFIG_PATH_ENV):
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(config, "_instance", None)

    def _write(data: dict[str, Any]) -> dict[str, Any]:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(data))
        monkeypatch.setenv(config._CONFIG_PATH_ENV, str(path))
        return config.load_config(reload=True)

    _write({})
    return _write
