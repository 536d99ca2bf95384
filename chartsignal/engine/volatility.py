"""True range and average true range."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from chartsignal.engine.series import (
    IndicatorSequence,
    as_series,
    check_length,
    index_range,
    require_aligned,
    require_bars,
)
from chartsignal.engine.smoothing import required_bars, rma_multiplier, smooth

Array = npt.NDArray[np.float32]


def true_ranges(close: Array, high: Array, low: Array) -> Array:
    """True range of every bar that has an older bar to compare against."""

    def bar_range(i: int) -> float:
        prev_close = close[i + 1]
        return max(
            high[i] - low[i],
            abs(high[i] - prev_close),
            abs(low[i] - prev_close),
        )

    return index_range(len(close) - 1, bar_range)


def average_true_ranges(close: Array, high: Array, low: Array, length: int) -> Array:
    return smooth(true_ranges(close, high, low), length, rma_multiplier(length))


def _validated(
    indicator: str,
    close: npt.ArrayLike,
    high: npt.ArrayLike,
    low: npt.ArrayLike,
) -> tuple[Array, Array, Array]:
    c, h, lo = as_series(close), as_series(high), as_series(low)
    require_aligned(indicator, close=c, high=h, low=lo)
    require_bars(indicator, c, 2)
    return c, h, lo


def true_range(
    close: npt.ArrayLike, high: npt.ArrayLike, low: npt.ArrayLike
) -> IndicatorSequence:
    """Per-bar true range against the previous (older) close.

    Output length is len(close) - 1.
    """
    c, h, lo = _validated("TR", close, high, low)
    return IndicatorSequence(len(c) - 1, lambda: true_ranges(c, h, lo))


def atr(
    close: npt.ArrayLike,
    high: npt.ArrayLike,
    low: npt.ArrayLike,
    length: int = 10,
) -> IndicatorSequence:
    """RMA of the true range. Needs 3 * length + 1 bars; returns len - length."""
    check_length(length)
    c, h, lo = _validated("ATR", close, high, low)
    require_bars("ATR", c, required_bars(length) + 1)
    return IndicatorSequence(
        len(c) - length, lambda: average_true_ranges(c, h, lo, length)
    )
