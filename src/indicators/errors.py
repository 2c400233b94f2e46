"""Exceptions raised by the indicator library.

All errors derive from :class:`ValueError` so callers that already guard
against bad arguments keep working.  Insufficient history is *not* an
error: it shows up as leading NaN values in the returned series.
"""

from __future__ import annotations


class IndicatorError(ValueError):
    """Base class for indicator input problems."""


class InvalidParameterError(IndicatorError):
    """Raised when a numeric parameter or an input series is unusable.

    Examples: a window below 1, an empty series, a PSAR run on fewer than
    two bars, or a Zigzag percent outside ``(0, 100]``.
    """


class LengthMismatchError(IndicatorError):
    """Raised when parallel series passed to one call differ in length."""
