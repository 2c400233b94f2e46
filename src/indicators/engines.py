"""Series transformation engines.

Four building blocks every indicator in this package is assembled from:

* :func:`pointwise` -- elementwise combination of parallel series.
* :func:`rolling` -- a reducer applied to each growing-then-sliding window.
* :func:`exponential` -- the EMA recursion with a mean (or explicit) seed.
* :func:`scan` -- drives a ``step(state, *values) -> (state, output)``
  function left to right; the sequential indicators are written this way.

All engines return a new Series with the index of the (first) input and
never mutate their arguments.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

import numpy as np
import pandas as pd

from indicators._validation import align, as_series, check_window
from indicators.errors import InvalidParameterError, LengthMismatchError

StateT = TypeVar("StateT")


def _collect(values: list[Any], index: pd.Index) -> pd.Series:
    """Wrap reducer output, keeping record-valued results as object dtype."""
    result = pd.Series(values, index=index)
    if result.dtype == object:
        return result
    return result.astype("float64")


# ---------------------------------------------------------------------------
# Pointwise
# ---------------------------------------------------------------------------


def pointwise(operation: Callable[..., Any], *series: Any) -> pd.Series:
    """Apply *operation* elementwise across parallel series.

    ``out[i] = operation(s1[i], ..., sN[i])``.  Values are passed as numpy
    float64 scalars, so division by zero inside *operation* yields inf/NaN
    instead of raising.

    Args:
        operation: Callable taking one positional argument per series.
        *series:   One or more equal-length series.

    Returns:
        A Series the length of the inputs, indexed like the first one.

    Raises:
        LengthMismatchError: If the series differ in length.
    """
    if not series:
        raise InvalidParameterError("pointwise needs at least one series")
    aligned = align(*series)
    columns = [s.to_numpy() for s in aligned]

    with np.errstate(all="ignore"):
        values = [operation(*row) for row in zip(*columns)]
    return _collect(values, aligned[0].index)


# ---------------------------------------------------------------------------
# Rolling window
# ---------------------------------------------------------------------------


def rolling(operation: Callable[[np.ndarray], Any], series: Any, window: int) -> pd.Series:
    """Apply *operation* to every trailing window of *series*.

    ``out[i] = operation(series[max(0, i + 1 - window) .. i])``.  Windows at
    the start are shorter than *window* and are passed truncated rather than
    skipped; reducers that need a full window must return NaN themselves.

    Args:
        operation: Reducer receiving a 1-D numpy array.  May return a scalar
                   or a record (dict, tuple); records give an object Series.
        series:    Input series.
        window:    Window length (>= 1).
    """
    series = as_series(series)
    window = check_window(window)
    values = series.to_numpy()

    with np.errstate(all="ignore"):
        result = [
            operation(values[max(0, i + 1 - window): i + 1])
            for i in range(len(values))
        ]
    return _collect(result, series.index)


# ---------------------------------------------------------------------------
# Exponential recursion
# ---------------------------------------------------------------------------


def exponential(series: Any, window: int, start: float | None = None) -> pd.Series:
    """Exponential recursion with weight ``2 / (window + 1)``.

    ``out[0]`` is *start* when given, otherwise the mean of the first
    *window* values; afterwards ``out[i] = s[i] * w + (1 - w) * out[i - 1]``.
    Unlike :func:`rolling` there is no warm-up gap.  A NaN input (or a NaN
    seed) makes that output and every later one NaN.

    Args:
        series: Input series.
        window: Span of the smoothing (>= 1).
        start:  Optional seed for the first output.

    Raises:
        InvalidParameterError: If no seed is given and *window* is not
            shorter than the series.
    """
    series = as_series(series)
    window = check_window(window)

    if start is None:
        if window >= len(series):
            raise InvalidParameterError(
                f"window ({window}) must be shorter than the series ({len(series)}) "
                "to seed the recursion; pass start= explicitly"
            )
        seed = float(series.iloc[:window].mean(skipna=False))
    else:
        seed = float(start)

    weight = 2.0 / (window + 1)

    def step(previous: float, value: float) -> tuple[float, float]:
        current = value * weight + (1 - weight) * previous
        return current, current

    outputs, _ = scan(step, seed, series.to_numpy()[1:])
    return pd.Series([seed, *outputs], index=series.index, dtype="float64")


# ---------------------------------------------------------------------------
# Sequential scan
# ---------------------------------------------------------------------------


def scan(
    step: Callable[..., tuple[StateT, Any]],
    state: StateT,
    *columns: Sequence[Any],
) -> tuple[list[Any], StateT]:
    """Drive *step* over parallel columns, threading state left to right.

    ``step(state, *row) -> (state, output)`` is called once per row.

    Returns:
        The list of outputs (one per row) and the final state.

    Raises:
        LengthMismatchError: If the columns differ in length.
    """
    lengths = {len(c) for c in columns}
    if len(lengths) > 1:
        raise LengthMismatchError(f"scan columns must have equal length (got {sorted(lengths)})")

    outputs: list[Any] = []
    with np.errstate(all="ignore"):
        for row in zip(*columns):
            state, output = step(state, *row)
            outputs.append(output)
    return outputs, state
