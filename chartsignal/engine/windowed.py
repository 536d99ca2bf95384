"""Sliding-window aggregates: Higher, Lower, SMA, WMA.

Window i covers series[i : i + length], i.e. bar i and the length-1 bars
older than it. No window depends on another, so all of these walk
NEW_TO_OLD. Output length is len(series) - length + 1.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import numpy.typing as npt

from chartsignal.engine.series import (
    IndicatorSequence,
    as_series,
    check_length,
    index_range,
    require_bars,
)

Array = npt.NDArray[np.float32]


def check_window(indicator: str, series: Array, length: int) -> None:
    """Validate length and require at least one full window."""
    check_length(length)
    require_bars(indicator, series, length)


def rolling(
    series: Array, length: int, reduce: Callable[[Array], float]
) -> Array:
    """Apply reduce to every full window, newest window first."""
    return index_range(
        len(series) - length + 1,
        lambda i: reduce(series[i : i + length]),
    )


def rolling_max(series: Array, length: int) -> Array:
    return rolling(series, length, np.max)


def rolling_min(series: Array, length: int) -> Array:
    return rolling(series, length, np.min)


def rolling_mean(series: Array, length: int) -> Array:
    divisor = np.float32(length)
    return rolling(series, length, lambda w: w.sum(dtype=np.float32) / divisor)


def rolling_weighted_mean(series: Array, length: int) -> Array:
    # Offset 0 is the newest bar of the window and carries the largest weight
    weights = np.array(
        [(length - x) * length for x in range(length)], dtype=np.float32
    )

    def weighted(window: Array) -> float:
        return (window * weights).sum(dtype=np.float32) / weights.sum(
            dtype=np.float32
        )

    return rolling(series, length, weighted)


def higher(high: npt.ArrayLike, length: int = 10) -> IndicatorSequence:
    """Highest high of each window."""
    series = as_series(high)
    check_window("Higher", series, length)
    return IndicatorSequence(
        len(series) - length + 1, lambda: rolling_max(series, length)
    )


def lower(low: npt.ArrayLike, length: int = 10) -> IndicatorSequence:
    """Lowest low of each window."""
    series = as_series(low)
    check_window("Lower", series, length)
    return IndicatorSequence(
        len(series) - length + 1, lambda: rolling_min(series, length)
    )


def sma(close: npt.ArrayLike, length: int = 10) -> IndicatorSequence:
    """Simple moving average.

    Example (newest-first): sma([5, 4, 3, 2, 1], 3) -> [4.0, 3.0, 2.0].
    """
    series = as_series(close)
    check_window("SMA", series, length)
    return IndicatorSequence(
        len(series) - length + 1, lambda: rolling_mean(series, length)
    )


def wma(close: npt.ArrayLike, length: int = 10) -> IndicatorSequence:
    """Weighted moving average with linearly decaying weights.

    The bar at offset x from the newest end of a window weighs
    (length - x) * length; each window is normalized by its weight sum.
    """
    series = as_series(close)
    check_window("WMA", series, length)
    return IndicatorSequence(
        len(series) - length + 1, lambda: rolling_weighted_mean(series, length)
    )
