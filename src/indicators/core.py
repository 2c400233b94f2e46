"""Composite technical indicators built from the series engines.

Every function accepts pandas Series (or any 1-D numeric sequence) and
returns a Series of the same length as its primary input, or a result record
from :mod:`indicators.results` for multi-output indicators.  NaN marks values
that are not computable yet; outputs are never shortened.

Parallel inputs (high/low/close/volume) are matched by position and must be
of equal length.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from indicators._validation import align, as_series, check_window
from indicators.engines import exponential, pointwise, rolling
from indicators.errors import InvalidParameterError
from indicators.results import Bands, LineSignal, Macd, VolumeProfile, Vortex
from indicators.stats import mad, sd

_FIB_LEVELS = (0.0, 0.236, 0.382, 0.5, 0.618, 0.786, 1.0)

# Seed for the loss average so a loss-free start never divides 0 by 0.
_RSI_LOSS_SEED = 1e-14


# ---------------------------------------------------------------------------
# Trend / Moving Averages
# ---------------------------------------------------------------------------


def sma(series: Any, window: int) -> pd.Series:
    """Simple Moving Average.

    Args:
        series: Price or value series.
        window: Lookback window length.

    Returns:
        A Series of the rolling arithmetic mean.  The first ``window - 1``
        values will be NaN.
    """
    series = as_series(series)
    window = check_window(window)
    return series.rolling(window=window, min_periods=window).mean()


def wma(series: Any, window: int) -> pd.Series:
    """Linearly Weighted Moving Average.

    The oldest value in the window has weight 1 and the newest weight
    ``window``.

    Returns:
        A Series whose first ``window - 1`` values are NaN.
    """
    series = as_series(series)
    window = check_window(window)
    weights = np.arange(1, window + 1, dtype="float64")
    total = weights.sum()
    return series.rolling(window=window, min_periods=window).apply(
        lambda x: np.dot(x, weights) / total, raw=True
    )


def ema(series: Any, window: int, start: float | None = None) -> pd.Series:
    """Exponential Moving Average with ``alpha = 2 / (window + 1)``.

    Seeded with the mean of the first *window* values (or *start*), so the
    output is defined at every index.

    Args:
        series: Price or value series.
        window: Span for the exponential weighting.  Must be shorter than
                the series unless *start* is given.
        start:  Optional explicit seed.
    """
    return exponential(series, window, start)


def dema(close: Any, window: int = 20) -> pd.Series:
    """Double Exponential Moving Average, ``2 * EMA - EMA(EMA)``."""
    ema1 = ema(close, window)
    return pointwise(lambda a, b: 2 * a - b, ema1, ema(ema1, window))


def tema(close: Any, window: int = 20) -> pd.Series:
    """Triple Exponential Moving Average, ``3 e1 - 3 e2 + e3``."""
    ema1 = ema(close, window)
    ema2 = ema(ema1, window)
    return pointwise(lambda a, b, c: 3 * a - 3 * b + c, ema1, ema2, ema(ema2, window))


# ---------------------------------------------------------------------------
# Dispersion
# ---------------------------------------------------------------------------


def stdev(series: Any, window: int) -> pd.Series:
    """Rolling population standard deviation over truncating windows.

    Windows at the start are shorter than *window*, so index 0 is always 0.
    """
    return rolling(sd, series, window)


def madev(series: Any, window: int) -> pd.Series:
    """Rolling mean absolute deviation over truncating windows."""
    return rolling(mad, series, window)


def expdev(series: Any, window: int) -> pd.Series:
    """Exponential deviation: ``sqrt(EMA((s - EMA(s))^2))``."""
    series = as_series(series)
    squared = pointwise(lambda a, b: (a - b) * (a - b), series, ema(series, window))
    return np.sqrt(ema(squared, window))


# ---------------------------------------------------------------------------
# Price transforms / Volatility
# ---------------------------------------------------------------------------


def typical_price(high: Any, low: Any, close: Any) -> pd.Series:
    """Typical price, ``(high + low + close) / 3``."""
    return pointwise(lambda a, b, c: (a + b + c) / 3, high, low, close)


def true_range(high: Any, low: Any, close: Any) -> pd.Series:
    """True Range for a single period.

    TR = max(high - low,  |high - prev_close|,  |low - prev_close|)

    The first bar has no previous close, so its TR is ``high - low``.
    """
    high, low, close = align(high, low, close, names=("high", "low", "close"))
    prev_close = close.shift(1)

    tr1 = high - low
    tr2 = (high - prev_close).abs()
    tr3 = (low - prev_close).abs()

    return pd.concat([tr1, tr2, tr3], axis=1).max(axis=1)


def atr(high: Any, low: Any, close: Any, window: int = 14) -> pd.Series:
    """Average True Range.

    Wilder's smoothing expressed as an EMA of span ``2 * window - 1``.
    """
    window = check_window(window)
    return ema(true_range(high, low, close), 2 * window - 1)


def bb(close: Any, window: int = 20, mult: float = 2.0) -> Bands:
    """Bollinger Bands: SMA plus/minus *mult* rolling standard deviations."""
    middle = sma(close, window)
    dev = stdev(close, window)
    upper = pointwise(lambda a, b: a + b * mult, middle, dev)
    lower = pointwise(lambda a, b: a - b * mult, middle, dev)
    return Bands(lower=lower, middle=middle, upper=upper)


def bbp(close: Any, window: int = 20, mult: float = 2.0) -> pd.Series:
    """Bollinger %B: 0 at the lower band, 1 at the upper band."""
    band = bb(close, window, mult)
    return pointwise(lambda p, u, l: (p - l) / (u - l), close, band.upper, band.lower)


def ebb(close: Any, window: int = 20, mult: float = 2.0) -> Bands:
    """Exponential Bollinger Bands: EMA plus/minus *mult* exponential deviations."""
    middle = ema(close, window)
    dev = expdev(close, window)
    upper = pointwise(lambda a, b: a + b * mult, middle, dev)
    lower = pointwise(lambda a, b: a - b * mult, middle, dev)
    return Bands(lower=lower, middle=middle, upper=upper)


def keltner(
    high: Any, low: Any, close: Any, window: int = 20, mult: float = 2.0
) -> Bands:
    """Keltner Channel: EMA of close plus/minus *mult* ATR."""
    middle = ema(close, window)
    band = atr(high, low, close, window)
    upper = pointwise(lambda a, b: a + mult * b, middle, band)
    lower = pointwise(lambda a, b: a - mult * b, middle, band)
    return Bands(lower=lower, middle=middle, upper=upper)


# ---------------------------------------------------------------------------
# Momentum
# ---------------------------------------------------------------------------


def macd(close: Any, short: int = 12, long: int = 26, signal: int = 9) -> Macd:
    """Moving Average Convergence Divergence.

    Args:
        close:  Price series.
        short:  Fast EMA window.
        long:   Slow EMA window.
        signal: Signal line EMA window.

    Returns:
        :class:`Macd` with ``line`` (fast - slow), ``signal`` and ``hist``.
    """
    line = pointwise(lambda a, b: a - b, ema(close, short), ema(close, long))
    signal_line = ema(line, signal)
    hist = pointwise(lambda a, b: a - b, line, signal_line)
    return Macd(line=line, signal=signal_line, hist=hist)


def rsi(close: Any, window: int = 14) -> pd.Series:
    """Relative Strength Index.

    Gains and losses are averaged with Wilder's smoothing (an EMA of span
    ``2 * window - 1``).  The loss average is seeded with a tiny positive
    value, so the result is always within [0, 100] and defined everywhere.
    """
    close = as_series(close, "close")
    window = check_window(window)

    delta = close.diff()
    gains = delta.where(delta >= 0, 0.0)
    losses = (-delta).where(delta < 0, 0.0)
    gains.iloc[0] = 0.0
    losses.iloc[0] = _RSI_LOSS_SEED

    return pointwise(
        lambda a, b: 100 - 100 / (1 + a / b),
        ema(gains, 2 * window - 1),
        ema(losses, 2 * window - 1),
    )


def stoch(
    high: Any,
    low: Any,
    close: Any,
    window: int = 14,
    signal: int = 3,
    smooth: int = 1,
) -> LineSignal:
    """Stochastic Oscillator (%K line and %D signal).

    ``K = 100 * (close - lowest low) / (highest high - lowest low)`` over a
    truncating window, optionally smoothed by an SMA of *smooth* bars.
    """
    high, low, close = align(high, low, close, names=("high", "low", "close"))
    lowest = rolling(np.min, low, window)
    highest = rolling(np.max, high, window)
    k = pointwise(lambda h, l, c: 100 * (c - l) / (h - l), highest, lowest, close)
    if smooth > 1:
        k = sma(k, smooth)
    return LineSignal(line=k, signal=sma(k, signal))


def williams(high: Any, low: Any, close: Any, window: int = 14) -> pd.Series:
    """Williams %R, in [-100, 0]."""
    return pointwise(lambda x: x - 100, stoch(high, low, close, window, 1, 1).line)


def cci(
    high: Any, low: Any, close: Any, window: int = 20, mult: float = 0.015
) -> pd.Series:
    """Commodity Channel Index.

    ``(tp - SMA(tp)) / (mult * MAD(tp))``.  The deviation at index 0 is forced
    to infinity, so the first value is 0 or NaN rather than a division by a
    single-sample zero deviation.
    """
    tp = typical_price(high, low, close)
    tpsma = sma(tp, window)
    tpmad = madev(tp, window)
    tpmad.iloc[0] = np.inf
    return pointwise(lambda a, b, c: (a - b) / (c * mult), tp, tpsma, tpmad)


def roc(close: Any, window: int = 12) -> pd.Series:
    """Rate of Change in percent.  The first *window* values are NaN."""
    close = as_series(close, "close")
    window = check_window(window)
    previous = close.shift(window)
    return 100.0 * (close - previous) / previous


def kst(
    close: Any,
    w1: int = 10,
    w2: int = 15,
    w3: int = 20,
    w4: int = 30,
    s1: int = 10,
    s2: int = 10,
    s3: int = 10,
    s4: int = 15,
    sig: int = 9,
) -> LineSignal:
    """Know Sure Thing: weighted sum of four smoothed rates of change."""
    rcma1 = sma(roc(close, w1), s1)
    rcma2 = sma(roc(close, w2), s2)
    rcma3 = sma(roc(close, w3), s3)
    rcma4 = sma(roc(close, w4), s4)
    line = pointwise(lambda a, b, c, d: a + b * 2 + c * 3 + d * 4, rcma1, rcma2, rcma3, rcma4)
    return LineSignal(line=line, signal=sma(line, sig))


# ---------------------------------------------------------------------------
# Volume
# ---------------------------------------------------------------------------


def adl(high: Any, low: Any, close: Any, volume: Any) -> pd.Series:
    """Accumulation/Distribution Line.

    A bar with ``high == low`` has an undefined money-flow multiplier; the
    resulting NaN/inf carries through the cumulative sum.
    """
    high, low, close, volume = align(
        high, low, close, volume, names=("high", "low", "close", "volume")
    )
    with np.errstate(divide="ignore", invalid="ignore"):
        flow = volume * (2 * close - low - high) / (high - low)
    return flow.cumsum(skipna=False)


def cho(
    high: Any, low: Any, close: Any, volume: Any, short: int = 3, long: int = 10
) -> pd.Series:
    """Chaikin Oscillator: fast EMA minus slow EMA of the A/D line."""
    line = adl(high, low, close, volume)
    return pointwise(lambda s, l: s - l, ema(line, short), ema(line, long))


def fi(close: Any, volume: Any, window: int = 13) -> pd.Series:
    """Force Index: EMA of price change times volume (change is 0 on bar 0)."""
    delta = rolling(lambda s: s[-1] - s[0], close, 2)
    return ema(pointwise(lambda a, b: a * b, delta, volume), window)


def mfi(high: Any, low: Any, close: Any, volume: Any, window: int = 14) -> pd.Series:
    """Money Flow Index.

    Positive and negative raw money flow are summed over truncating windows;
    the first value is NaN (no flow on either side).
    """
    high, low, close, volume = align(
        high, low, close, volume, names=("high", "low", "close", "volume")
    )
    tp = typical_price(high, low, close)
    diff = tp.diff()
    raw_flow = tp * volume

    positive = raw_flow.where(diff >= 0, 0.0)
    negative = raw_flow.where(diff < 0, 0.0)
    positive_sum = rolling(np.sum, positive, window)
    negative_sum = rolling(np.sum, negative, window)
    return pointwise(lambda a, b: 100 - 100 / (1 + a / b), positive_sum, negative_sum)


def vi(high: Any, low: Any, close: Any, window: int = 14) -> Vortex:
    """Vortex Indicator (+VI / -VI)."""
    high, low, close = align(high, low, close, names=("high", "low", "close"))
    plus_vm = (high - low.shift(1)).abs()
    minus_vm = (high.shift(1) - low).abs()
    plus_vm.iloc[0] = minus_vm.iloc[0] = (high.iloc[0] - low.iloc[0]) / 2

    plus_sum = rolling(np.sum, plus_vm, window)
    minus_sum = rolling(np.sum, minus_vm, window)
    tr_sum = rolling(np.sum, true_range(high, low, close), window)
    return Vortex(
        plus=pointwise(lambda a, b: a / b, plus_sum, tr_sum),
        minus=pointwise(lambda a, b: a / b, minus_sum, tr_sum),
    )


def vwap(high: Any, low: Any, close: Any, volume: Any) -> pd.Series:
    """Volume Weighted Average Price, cumulative from the first bar."""
    high, low, close, volume = align(
        high, low, close, volume, names=("high", "low", "close", "volume")
    )
    tp = typical_price(high, low, close)
    return pointwise(lambda a, b: a / b, (tp * volume).cumsum(), volume.cumsum())


def vbp(
    close: Any,
    volume: Any,
    zones: int = 12,
    left: int = 0,
    right: int | None = None,
) -> VolumeProfile:
    """Volume By Price over bars ``[left, right)``.

    Each bar's volume is added to the zone its close falls into; zone
    volumes are returned as a share of the total.  When every close in the
    range is equal the zone mapping divides by zero and all shares are NaN.

    Raises:
        InvalidParameterError: If *zones* < 1 or the bar range is empty or
            out of bounds.
    """
    close, volume = align(close, volume, names=("close", "volume"))
    zones = check_window(zones, "zones")
    right = len(close) if right is None else right
    if not 0 <= left < right <= len(close):
        raise InvalidParameterError(
            f"bar range [{left}, {right}) is empty or outside [0, {len(close)})"
        )

    closes = close.to_numpy()[left:right]
    volumes = volume.to_numpy()[left:right]
    total = volumes.sum()
    bottom, top = float(closes.min()), float(closes.max())

    with np.errstate(divide="ignore", invalid="ignore"):
        position = (closes - bottom) / (top - bottom) * (zones - 1)
        if not np.isfinite(position).all():
            return VolumeProfile(bottom=bottom, top=top, volumes=[float("nan")] * zones)
        histogram = np.bincount(np.floor(position).astype(int), weights=volumes, minlength=zones)
        shares = histogram / total

    return VolumeProfile(bottom=bottom, top=top, volumes=[float(x) for x in shares])


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


def fibonacci_retracement(pivot1: float, pivot2: float) -> dict[float, float]:
    """Fibonacci retracement levels between two pivot prices.

    Returns:
        Mapping of retracement ratio to price, from the high (ratio 0) down
        to the low (ratio 1).
    """
    high = max(pivot1, pivot2)
    low = min(pivot1, pivot2)
    span = high - low
    return {level: high - span * level for level in _FIB_LEVELS}


def regression(x: float, point1: tuple[float, float], point2: tuple[float, float]) -> float:
    """Value at *x* of the line through two ``(x, y)`` points.

    Raises:
        InvalidParameterError: If both points share an x-coordinate.
    """
    if point2[0] == point1[0]:
        raise InvalidParameterError("regression points must have distinct x values")
    slope = (point2[1] - point1[1]) / (point2[0] - point1[0])
    intercept = point1[1] - slope * point1[0]
    return slope * x + intercept
