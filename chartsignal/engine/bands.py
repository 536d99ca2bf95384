"""Composite indicators built from windowed aggregates: Basis, Stoch, Bands.

Stoch and Bands divide by the width of a range. A perfectly flat window
has zero width and yields inf or NaN; that value is returned as is and
callers filter non-finite values before use.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from chartsignal.engine.series import (
    IndicatorSequence,
    as_series,
    index_range,
    require_aligned,
)
from chartsignal.engine.windowed import (
    check_window,
    rolling_max,
    rolling_mean,
    rolling_min,
)

_HUNDRED = np.float32(100.0)
_TWO = np.float32(2.0)


def basis(
    high: npt.ArrayLike, low: npt.ArrayLike, length: int = 10
) -> IndicatorSequence:
    """Midpoint of the highest high and lowest low of each window."""
    h, lo = as_series(high), as_series(low)
    require_aligned("Basis", high=h, low=lo)
    check_window("Basis", h, length)

    def compute() -> npt.NDArray[np.float32]:
        return (rolling_max(h, length) + rolling_min(lo, length)) / _TWO

    return IndicatorSequence(len(h) - length + 1, compute)


def stoch(
    close: npt.ArrayLike,
    high: npt.ArrayLike,
    low: npt.ArrayLike,
    length: int = 10,
) -> IndicatorSequence:
    """Position of the close inside the window's high/low range, 0-100."""
    c, h, lo = as_series(close), as_series(high), as_series(low)
    require_aligned("Stoch", close=c, high=h, low=lo)
    check_window("Stoch", c, length)
    count = len(c) - length + 1

    def compute() -> npt.NDArray[np.float32]:
        highest = rolling_max(h, length)
        lowest = rolling_min(lo, length)
        return (c[:count] - lowest) / (highest - lowest) * _HUNDRED

    return IndicatorSequence(count, compute)


def bands(
    close: npt.ArrayLike, length: int = 10, mult: float = 2.0
) -> IndicatorSequence:
    """Position of the close inside its Bollinger bands, 0-100.

    Bands are the window SMA plus/minus mult population standard
    deviations of the window around that SMA.
    """
    c = as_series(close)
    check_window("Bands", c, length)
    count = len(c) - length + 1
    m = np.float32(mult)
    n = np.float32(length)

    def compute() -> npt.NDArray[np.float32]:
        means = rolling_mean(c, length)

        def percent(i: int) -> float:
            mean = means[i]
            dev = np.sqrt((np.square(c[i : i + length] - mean) / n).sum())
            upper = mean + m * dev
            lower = mean - m * dev
            return (c[i] - lower) / (upper - lower) * _HUNDRED

        return index_range(count, percent)

    return IndicatorSequence(count, compute)
