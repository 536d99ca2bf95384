"""Indicator error hierarchy.

All engine exceptions inherit from IndicatorError so callers can catch
bad input at one boundary. Flat windows and zero denominators are not
errors: they come back as inf/NaN values.
"""

from __future__ import annotations


class IndicatorError(Exception):
    """Base exception for all indicator errors."""


class InsufficientDataError(IndicatorError):
    """Input series is shorter than the indicator's warm-up.

    Raised before any value is computed.
    """

    def __init__(self, indicator: str, required: int, actual: int) -> None:
        self.indicator = indicator
        self.required = required
        self.actual = actual
        super().__init__(
            f"{indicator} needs at least {required} bars, got {actual}"
        )


class SeriesLengthMismatchError(IndicatorError):
    """Parallel series passed to one call differ in length."""

    def __init__(self, indicator: str, lengths: dict[str, int]) -> None:
        self.indicator = indicator
        self.lengths = lengths
        detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
        super().__init__(f"{indicator} series lengths differ: {detail}")
