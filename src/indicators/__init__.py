"""Technical indicators over time-ordered numeric series.

Pure functions built on numpy and pandas -- no external TA library
dependencies.  The series engines live in :mod:`indicators.engines`, the
stateful indicators in :mod:`indicators.sequential` and the composite
recipes in :mod:`indicators.core`.  Import individual functions or use the
module-level ``__all__`` for a convenient wildcard import.
"""

from indicators.core import (
    adl,
    atr,
    bb,
    bbp,
    cci,
    cho,
    dema,
    ebb,
    ema,
    expdev,
    fi,
    fibonacci_retracement,
    keltner,
    kst,
    macd,
    madev,
    mfi,
    regression,
    roc,
    rsi,
    sma,
    stdev,
    stoch,
    tema,
    true_range,
    typical_price,
    vbp,
    vi,
    vwap,
    williams,
    wma,
)
from indicators.engines import exponential, pointwise, rolling, scan
from indicators.errors import IndicatorError, InvalidParameterError, LengthMismatchError
from indicators.registry import INDICATOR_REGISTRY, compute_indicator, get_indicator
from indicators.results import (
    Bands,
    DirectionalIndex,
    LineSignal,
    Macd,
    Pivot,
    VolumeProfile,
    Vortex,
    ZigzagResult,
)
from indicators.sequential import adx, obv, psar, stoch_rsi, wilder_smooth, zigzag

__all__ = [
    "INDICATOR_REGISTRY",
    "Bands",
    "DirectionalIndex",
    "IndicatorError",
    "InvalidParameterError",
    "LengthMismatchError",
    "LineSignal",
    "Macd",
    "Pivot",
    "VolumeProfile",
    "Vortex",
    "ZigzagResult",
    "adl",
    "adx",
    "atr",
    "bb",
    "bbp",
    "cci",
    "cho",
    "compute_indicator",
    "dema",
    "ebb",
    "ema",
    "expdev",
    "exponential",
    "fi",
    "fibonacci_retracement",
    "get_indicator",
    "keltner",
    "kst",
    "macd",
    "madev",
    "mfi",
    "obv",
    "pointwise",
    "psar",
    "regression",
    "roc",
    "rolling",
    "rsi",
    "scan",
    "sma",
    "stdev",
    "stoch",
    "stoch_rsi",
    "tema",
    "true_range",
    "typical_price",
    "vbp",
    "vi",
    "vwap",
    "wilder_smooth",
    "williams",
    "wma",
    "zigzag",
]
