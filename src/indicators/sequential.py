"""Sequential state indicators.

These indicators carry state from bar to bar: each output depends on the
previous one, not just on a window of raw inputs.  Every one of them is
written as a pure ``*_step(state, ...) -> (state, output)`` function over a
frozen state record and driven across the series by
:func:`indicators.engines.scan`, so a single transition can be tested on its
own.

State never outlives one call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from functools import partial
from typing import Any

import numpy as np
import pandas as pd

from indicators._validation import align, as_series, check_window
from indicators.core import ema, rsi, sma, true_range
from indicators.engines import pointwise, rolling, scan
from indicators.errors import InvalidParameterError, LengthMismatchError
from indicators.results import DirectionalIndex, LineSignal, Pivot, ZigzagResult


# ---------------------------------------------------------------------------
# Wilder smoothing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WilderState:
    """Progress of a Wilder smoothing run.

    Attributes:
        window: Smoothing window.
        seen:   Number of values consumed so far.
        total:  Running sum used to seed the filter.
        value:  Last smoothed value (NaN until seeded).
    """

    window: int
    seen: int = 0
    total: float = 0.0
    value: float = math.nan


def wilder_step(state: WilderState, value: float) -> tuple[WilderState, float]:
    """Consume one value.

    The very first value is skipped, values ``1 .. window`` are summed to seed
    the filter, and from then on ``out = prev * (1 - 1 / window) + value``.
    """
    seen = state.seen + 1
    if state.seen == 0:
        return replace(state, seen=seen), math.nan
    if state.seen <= state.window:
        total = state.total + value
        if state.seen == state.window:
            return replace(state, seen=seen, total=total, value=total), total
        return replace(state, seen=seen, total=total), math.nan

    smoothed = state.value * (1 - 1 / state.window) + value
    return replace(state, seen=seen, value=smoothed), smoothed


def wilder_smooth(series: Any, window: int) -> pd.Series:
    """Wilder's smoothing, seeded with a plain sum.

    Returns:
        NaN for indices ``[0, window)``; index ``window`` holds
        ``sum(series[1 .. window])`` and later indices follow the recursion.
        The values are sums, not means: divide consistently.
    """
    series = as_series(series)
    window = check_window(window)
    outputs, _ = scan(wilder_step, WilderState(window=window), series.to_numpy())
    return pd.Series(outputs, index=series.index, dtype="float64")


# ---------------------------------------------------------------------------
# Average Directional Index
# ---------------------------------------------------------------------------


def adx(high: Any, low: Any, close: Any, window: int = 14) -> DirectionalIndex:
    """Average Directional Index with +DI / -DI.

    Directional movement and true range are Wilder-smoothed sums; the ADX
    line is an EMA of span ``2 * window - 1`` over DX starting at the first
    defined DX value.

    Args:
        high:   High price series.
        low:    Low price series.
        close:  Close price series.
        window: Smoothing window (default 14).

    Returns:
        :class:`DirectionalIndex`.  ``dip``/``dim`` are NaN for the first
        *window* bars, as is ``adx``.  With fewer than ``3 * window`` bars
        there is not enough DX history to seed the ADX line, which is then
        NaN throughout.
    """
    high, low, close = align(high, low, close, names=("high", "low", "close"))
    window = check_window(window)

    up_move = high.diff()
    down_move = -low.diff()
    plus_dm = up_move.where(up_move > down_move, 0.0).clip(lower=0.0)
    minus_dm = down_move.where(down_move > up_move, 0.0).clip(lower=0.0)

    smoothed_tr = wilder_smooth(true_range(high, low, close), window)
    dip = pointwise(lambda a, b: 100 * a / b, wilder_smooth(plus_dm, window), smoothed_tr)
    dim = pointwise(lambda a, b: 100 * a / b, wilder_smooth(minus_dm, window), smoothed_tr)
    dx = pointwise(lambda a, b: 100 * abs(a - b) / (a + b), dip, dim)

    adx_line = pd.Series(np.nan, index=high.index)
    history = dx.iloc[window:]
    if len(history) > 2 * window - 1:
        adx_line.iloc[window:] = ema(history, 2 * window - 1).to_numpy()
    return DirectionalIndex(dip=dip, dim=dim, adx=adx_line)


# ---------------------------------------------------------------------------
# Parabolic SAR
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PsarState:
    """Parabolic SAR state after one bar.

    Attributes:
        rising:      Current trend direction.
        factor:      Acceleration factor.
        extreme:     Extreme point of the current trend.
        sar:         SAR value emitted for the bar.
        prior_highs: Highs of the two previous bars, oldest first.
        prior_lows:  Lows of the two previous bars, oldest first.
    """

    rising: bool
    factor: float
    extreme: float
    sar: float
    prior_highs: tuple[float, float]
    prior_lows: tuple[float, float]


def psar_seed(
    highs: tuple[float, float], lows: tuple[float, float], step_factor: float
) -> PsarState:
    """Initial state from the first two bars (trend starts rising)."""
    return PsarState(
        rising=True,
        factor=step_factor,
        extreme=max(highs),
        sar=min(lows),
        prior_highs=(highs[0], highs[1]),
        prior_lows=(lows[0], lows[1]),
    )


def psar_step(
    state: PsarState,
    high: float,
    low: float,
    *,
    step_factor: float,
    max_factor: float,
) -> tuple[PsarState, float]:
    """Advance the SAR by one bar.

    1. Move the SAR toward the extreme point by the acceleration factor.
    2. A new extreme in the trend direction raises the factor (capped at
       *max_factor*) and becomes the extreme point.
    3. Price crossing the SAR against the trend reverses it: the factor is
       reset and the SAR restarts from the lowest low (now rising) or highest
       high (now falling) of the last three bars.
    """
    rising = state.rising
    factor = state.factor
    extreme = state.extreme
    sar = state.sar + factor * (extreme - state.sar)

    if (rising and high > extreme) or (not rising and low < extreme):
        factor = min(factor + step_factor, max_factor)
        extreme = high if rising else low

    if (rising and low < sar) or (not rising and high > sar):
        rising = not rising
        factor = step_factor
        sar = min(*state.prior_lows, low) if rising else max(*state.prior_highs, high)

    new_state = PsarState(
        rising=rising,
        factor=factor,
        extreme=extreme,
        sar=sar,
        prior_highs=(state.prior_highs[1], high),
        prior_lows=(state.prior_lows[1], low),
    )
    return new_state, sar


def psar(
    high: Any, low: Any, step_factor: float = 0.02, max_factor: float = 0.2
) -> pd.Series:
    """Parabolic Stop And Reverse.

    Args:
        high:        High price series.
        low:         Low price series.
        step_factor: Acceleration increment, also the starting factor.
        max_factor:  Cap on the acceleration factor.

    Returns:
        One SAR value per bar.  Bar 0 is ``low[0]`` and bar 1
        ``min(low[0], low[1])``.

    Raises:
        InvalidParameterError: For fewer than two bars or bad factors.
    """
    high, low = align(high, low, names=("high", "low"))
    if len(high) < 2:
        raise InvalidParameterError(f"psar needs at least 2 bars, got {len(high)}")
    if step_factor <= 0 or max_factor < step_factor:
        raise InvalidParameterError(
            f"need 0 < step_factor <= max_factor (got {step_factor}, {max_factor})"
        )

    highs = high.to_numpy()
    lows = low.to_numpy()
    state = psar_seed((highs[0], highs[1]), (lows[0], lows[1]), step_factor)
    step = partial(psar_step, step_factor=step_factor, max_factor=max_factor)
    outputs, _ = scan(step, state, highs[2:], lows[2:])

    return pd.Series([lows[0], state.sar, *outputs], index=high.index, dtype="float64")


# ---------------------------------------------------------------------------
# Zigzag
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ZigzagState:
    """Zigzag swing tracker.

    Attributes:
        rising:       Direction of the swing in progress.
        highest:      Highest high of the current (or last) up swing.
        lowest:       Lowest low of the current (or last) down swing.
        extreme_time: Time of the extreme the next pivot will report.
    """

    rising: bool
    highest: float
    lowest: float
    extreme_time: Any


def zigzag_step(
    state: ZigzagState, time: Any, high: float, low: float, *, percent: float
) -> tuple[ZigzagState, Pivot | None]:
    """Consume one bar, returning a :class:`Pivot` when the swing reverses.

    A swing reverses once price retraces more than *percent* of the range
    between the running highest high and lowest low.  On a reversal the
    reversal bar becomes the new swing's extreme, so its *time* is what the
    next pivot reports unless a further extreme replaces it.
    """
    retrace = (state.highest - state.lowest) * percent / 100

    if state.rising:
        if high > state.highest:
            return replace(state, highest=high, extreme_time=time), None
        if low < state.highest - retrace:
            pivot = Pivot(time=state.extreme_time, price=float(state.highest), kind="high")
            return replace(state, rising=False, lowest=low, extreme_time=time), pivot
        return state, None

    if low < state.lowest:
        return replace(state, lowest=low, extreme_time=time), None
    if high > state.lowest + retrace:
        pivot = Pivot(time=state.extreme_time, price=float(state.lowest), kind="low")
        return replace(state, rising=True, highest=high, extreme_time=time), pivot
    return state, None


def zigzag(high: Any, low: Any, percent: float = 5.0, time: Any = None) -> ZigzagResult:
    """Zigzag swing points.

    Args:
        high:    High price series.
        low:     Low price series.
        percent: Retracement, in percent of the current swing range, that
                 confirms a reversal.  Must be in ``(0, 100]``.
        time:    Optional sequence of bar times; defaults to the index of
                 *high*.

    Returns:
        :class:`ZigzagResult` holding only the confirmed pivots, alternating
        between swing lows and swing highs.
    """
    high, low = align(high, low, names=("high", "low"))
    if not 0 < percent <= 100:
        raise InvalidParameterError(f"percent must be in (0, 100], got {percent}")

    times = list(high.index) if time is None else list(time)
    if len(times) != len(high):
        raise LengthMismatchError(
            f"time has {len(times)} entries but prices have {len(high)}"
        )

    highs = high.to_numpy()
    lows = low.to_numpy()
    state = ZigzagState(rising=False, highest=highs[0], lowest=lows[0], extreme_time=times[0])
    step = partial(zigzag_step, percent=percent)
    outputs, _ = scan(step, state, times[1:], highs[1:], lows[1:])

    return ZigzagResult(pivots=tuple(p for p in outputs if p is not None))


# ---------------------------------------------------------------------------
# Stochastic RSI
# ---------------------------------------------------------------------------


def stoch_rsi(close: Any, window: int = 14, signal: int = 3, smooth: int = 1) -> LineSignal:
    """Stochastic RSI.

    RSI normalised to its own rolling range:
    ``K = (rsi - min) / (max - min)`` over a truncating window, with
    ``K[0] = 0`` since a one-sample window has no range.  A flat RSI window
    elsewhere yields NaN, which is left in place.

    Args:
        close:  Close price series.
        window: RSI window, also the normalisation window.
        signal: SMA window of the signal line.
        smooth: Optional SMA smoothing of K (applied when > 1).

    Returns:
        :class:`LineSignal` with K in ``line``.
    """
    rsi_values = rsi(close, window)
    lowest = rolling(np.min, rsi_values, window)
    highest = rolling(np.max, rsi_values, window)

    k = pointwise(lambda r, lo, hi: (r - lo) / (hi - lo), rsi_values, lowest, highest)
    k.iloc[0] = 0.0
    if smooth > 1:
        k = sma(k, smooth)
    return LineSignal(line=k, signal=sma(k, signal))


# ---------------------------------------------------------------------------
# On-Balance Volume
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ObvState:
    """Running On-Balance Volume and the close it was last updated with."""

    close: float
    total: float = 0.0


def obv_step(state: ObvState, close: float, volume: float) -> tuple[ObvState, float]:
    """Add or subtract *volume* by the direction of the close-to-close move."""
    total = state.total + np.sign(close - state.close) * volume
    return ObvState(close=close, total=total), total


def obv(close: Any, volume: Any, signal: int = 20) -> LineSignal:
    """On-Balance Volume with an SMA signal line.

    ``obv[0] = 0`` and ``obv[i] = obv[i-1] + sign(close[i] - close[i-1]) *
    volume[i]``.
    """
    close, volume = align(close, volume, names=("close", "volume"))
    closes = close.to_numpy()
    state = ObvState(close=closes[0])
    outputs, _ = scan(obv_step, state, closes[1:], volume.to_numpy()[1:])

    line = pd.Series([0.0, *outputs], index=close.index, dtype="float64")
    return LineSignal(line=line, signal=sma(line, signal))
