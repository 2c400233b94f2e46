"""Result records for multi-output indicators.

Each indicator family has its own frozen dataclass so the meaning of every
field is fixed by the type.  All Series fields share the index of the primary
input series.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple

import pandas as pd


@dataclass(frozen=True)
class Bands:
    """Envelope around a centre line (Bollinger, exponential Bollinger, Keltner)."""

    lower: pd.Series
    middle: pd.Series
    upper: pd.Series


@dataclass(frozen=True)
class LineSignal:
    """An oscillator line with its moving-average signal line."""

    line: pd.Series
    signal: pd.Series


@dataclass(frozen=True)
class Macd:
    """MACD line, its signal line and the histogram ``line - signal``."""

    line: pd.Series
    signal: pd.Series
    hist: pd.Series


@dataclass(frozen=True)
class DirectionalIndex:
    """Average Directional Index with its +DI (``dip``) and -DI (``dim``) lines."""

    dip: pd.Series
    dim: pd.Series
    adx: pd.Series


@dataclass(frozen=True)
class Vortex:
    """Vortex indicator lines."""

    plus: pd.Series
    minus: pd.Series


@dataclass(frozen=True)
class VolumeProfile:
    """Volume-by-price histogram.

    Attributes:
        bottom:  Lowest close in the profiled range.
        top:     Highest close in the profiled range.
        volumes: Share of total volume per price zone, ``bottom`` to ``top``.
    """

    bottom: float
    top: float
    volumes: list[float]


class Pivot(NamedTuple):
    """A Zigzag swing point."""

    time: Any
    price: float
    kind: str  # "high" or "low"


@dataclass(frozen=True)
class ZigzagResult:
    """Sparse list of alternating swing highs and lows.

    Unlike every other indicator the length is data dependent: one entry per
    detected reversal, not one per input bar.
    """

    pivots: tuple[Pivot, ...]

    def __len__(self) -> int:
        return len(self.pivots)

    @property
    def time(self) -> list[Any]:
        return [p.time for p in self.pivots]

    @property
    def price(self) -> list[float]:
        return [p.price for p in self.pivots]

    def to_series(self) -> pd.Series:
        """Pivot prices indexed by pivot time."""
        return pd.Series(self.price, index=pd.Index(self.time), dtype="float64", name="zigzag")
