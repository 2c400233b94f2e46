"""Indicator registry.

Look up indicators by name via :func:`get_indicator`, or compute one straight
from an OHLCV DataFrame with :func:`compute_indicator`, which fills in the
default parameters configured under ``indicators.defaults.<name>``.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from app.config import indicator_defaults
from indicators import core, sequential
from indicators.errors import IndicatorError

logger = logging.getLogger(__name__)

_HLC = ("high", "low", "close")
_HLCV = ("high", "low", "close", "volume")


@dataclass(frozen=True)
class IndicatorSpec:
    """A registered indicator.

    Attributes:
        name:      Registry key.
        func:      The indicator function.
        inputs:    OHLCV column names passed positionally, in order.
        uses_time: Whether the function takes a ``time=`` sequence, filled
                   from a ``timestamp`` column when the frame has one.
    """

    name: str
    func: Callable[..., Any]
    inputs: tuple[str, ...]
    uses_time: bool = False


def _spec(func: Callable[..., Any], inputs: tuple[str, ...], **kwargs: Any) -> IndicatorSpec:
    return IndicatorSpec(name=func.__name__, func=func, inputs=inputs, **kwargs)


INDICATOR_REGISTRY: dict[str, IndicatorSpec] = {
    spec.name: spec
    for spec in (
        # Moving averages / dispersion
        _spec(core.sma, ("close",)),
        _spec(core.wma, ("close",)),
        _spec(core.ema, ("close",)),
        _spec(core.dema, ("close",)),
        _spec(core.tema, ("close",)),
        _spec(core.stdev, ("close",)),
        _spec(core.madev, ("close",)),
        _spec(core.expdev, ("close",)),
        _spec(sequential.wilder_smooth, ("close",)),
        # Volatility / bands
        _spec(core.typical_price, _HLC),
        _spec(core.true_range, _HLC),
        _spec(core.atr, _HLC),
        _spec(core.bb, ("close",)),
        _spec(core.bbp, ("close",)),
        _spec(core.ebb, ("close",)),
        _spec(core.keltner, _HLC),
        # Momentum
        _spec(core.macd, ("close",)),
        _spec(core.rsi, ("close",)),
        _spec(core.stoch, _HLC),
        _spec(core.williams, _HLC),
        _spec(core.cci, _HLC),
        _spec(core.roc, ("close",)),
        _spec(core.kst, ("close",)),
        _spec(sequential.stoch_rsi, ("close",)),
        # Trend
        _spec(sequential.adx, _HLC),
        _spec(sequential.psar, ("high", "low")),
        _spec(sequential.zigzag, ("high", "low"), uses_time=True),
        _spec(core.vi, _HLC),
        # Volume
        _spec(core.adl, _HLCV),
        _spec(core.cho, _HLCV),
        _spec(core.fi, ("close", "volume")),
        _spec(core.mfi, _HLCV),
        _spec(core.vwap, _HLCV),
        _spec(core.vbp, ("close", "volume")),
        _spec(sequential.obv, ("close", "volume")),
    )
}


def get_indicator(name: str) -> IndicatorSpec:
    """Return the registered indicator called *name*.

    Raises:
        IndicatorError: If no indicator is registered under *name*.
    """
    spec = INDICATOR_REGISTRY.get(name)
    if spec is None:
        available = ", ".join(sorted(INDICATOR_REGISTRY))
        raise IndicatorError(f"Unknown indicator '{name}'. Available: {available}")
    return spec


def compute_indicator(
    df: pd.DataFrame, name: str, params: dict[str, Any] | None = None
) -> Any:
    """Compute indicator *name* over the OHLCV columns of *df*.

    Configured defaults for the indicator are applied first; explicit
    *params* override them.

    Args:
        df:     DataFrame with the columns the indicator needs.
        name:   Registry key (e.g. ``"rsi"``).
        params: Keyword parameter overrides.

    Returns:
        Whatever the indicator returns: a Series or a result record.

    Raises:
        IndicatorError: For unknown names, missing columns, or parameters
            the indicator does not accept (or required ones left unset).
    """
    spec = get_indicator(name)

    missing = [col for col in spec.inputs if col not in df.columns]
    if missing:
        raise IndicatorError(f"DataFrame is missing required columns for {name}: {missing}")

    kwargs = {**indicator_defaults(name), **(params or {})}
    if spec.uses_time and "time" not in kwargs and "timestamp" in df.columns:
        kwargs["time"] = df["timestamp"]

    columns = [df[col] for col in spec.inputs]
    try:
        inspect.signature(spec.func).bind(*columns, **kwargs)
    except TypeError as exc:
        raise IndicatorError(f"Invalid parameters for {name}: {exc}") from exc

    logger.debug(
        "Computing %s over %d bars with %s",
        name,
        len(df),
        {k: v for k, v in kwargs.items() if k != "time"},
    )
    return spec.func(*columns, **kwargs)
