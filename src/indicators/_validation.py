"""Input coercion and precondition checks shared by every indicator."""

from __future__ import annotations

from typing import Any, Iterable

import numpy as np
import pandas as pd

from indicators.errors import InvalidParameterError, LengthMismatchError


def as_series(values: Any, name: str = "series") -> pd.Series:
    """Coerce *values* to a non-empty float64 Series.

    pandas Series keep their index; any other 1-D array-like gets a
    ``RangeIndex``.

    Raises:
        InvalidParameterError: If *values* is empty, not one-dimensional, or
            not numeric.
    """
    try:
        if isinstance(values, pd.Series):
            series = values.astype("float64")
        else:
            series = pd.Series(np.asarray(values, dtype="float64"))
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be a 1-D numeric sequence") from exc

    if series.empty:
        raise InvalidParameterError(f"{name} must not be empty")
    return series


def align(*values: Any, names: Iterable[str] | None = None) -> list[pd.Series]:
    """Coerce parallel inputs and check they share one length.

    Series after the first are re-indexed positionally onto the first
    series' index, so pandas arithmetic between them never aligns on labels.

    Raises:
        LengthMismatchError: If the inputs differ in length.
    """
    labels = list(names) if names is not None else [f"series[{i}]" for i in range(len(values))]
    series = [as_series(v, label) for v, label in zip(values, labels)]
    if not series:
        raise InvalidParameterError("at least one series is required")

    lengths = {label: len(s) for label, s in zip(labels, series)}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{label}={n}" for label, n in lengths.items())
        raise LengthMismatchError(f"parallel series must have equal length ({detail})")

    index = series[0].index
    return [series[0]] + [pd.Series(s.to_numpy(), index=index) for s in series[1:]]


def check_window(window: Any, name: str = "window") -> int:
    """Return *window* as an int, rejecting non-integers and values below 1."""
    if isinstance(window, bool) or not isinstance(window, (int, np.integer)):
        raise InvalidParameterError(f"{name} must be an integer, got {window!r}")
    if window < 1:
        raise InvalidParameterError(f"{name} must be >= 1, got {window}")
    return int(window)
