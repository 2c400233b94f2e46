"""Statistics primitives: scalar reductions over one or two sequences.

These are the reducers handed to :func:`indicators.engines.rolling`, so they
accept plain ``numpy`` arrays as well as lists and Series and always return a
Python float.  Population (not sample) moments are used throughout.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from indicators.errors import LengthMismatchError


def _values(series: Any) -> np.ndarray:
    return np.asarray(series, dtype="float64")


def _pair(f: Any, g: Any) -> tuple[np.ndarray, np.ndarray]:
    a, b = _values(f), _values(g)
    if a.shape != b.shape:
        raise LengthMismatchError(
            f"sequences must have equal length (got {a.size} and {b.size})"
        )
    return a, b


def mean(series: Any) -> float:
    """Arithmetic mean.  NaN for an empty sequence."""
    values = _values(series)
    if values.size == 0:
        return float("nan")
    return float(values.mean())


def variance(series: Any) -> float:
    """Population variance, the mean squared deviation from the mean (two-pass)."""
    values = _values(series)
    if values.size == 0:
        return float("nan")
    return float(values.var())


def sd(series: Any) -> float:
    """Population standard deviation."""
    return float(np.sqrt(variance(series)))


def cov(f: Any, g: Any) -> float:
    """Population covariance, ``E[fg] - E[f]E[g]``."""
    a, b = _pair(f, g)
    if a.size == 0:
        return float("nan")
    return float(np.mean((a - a.mean()) * (b - b.mean())))


def cor(f: Any, g: Any) -> float:
    """Pearson correlation coefficient.

    Constant inputs give a zero denominator; the resulting NaN/inf is
    returned as-is.
    """
    a, b = _pair(f, g)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(cov(a, b)) / np.sqrt(np.float64(variance(a)) * variance(b)))


def mae(f: Any, g: Any) -> float:
    """Mean absolute error between two equal-length sequences."""
    a, b = _pair(f, g)
    return mean(np.abs(a - b))


def mad(series: Any) -> float:
    """Mean absolute deviation around the mean."""
    values = _values(series)
    return mae(values, np.full(values.shape, mean(values)))
