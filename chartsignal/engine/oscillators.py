"""Relative Strength Index."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from chartsignal.engine.series import (
    IndicatorSequence,
    Walk,
    as_series,
    check_length,
    index_range,
    require_bars,
)
from chartsignal.engine.smoothing import required_bars, rma_multiplier, smooth

_ZERO = np.float32(0.0)
_ONE = np.float32(1.0)
_HUNDRED = np.float32(100.0)


def rsi(close: npt.ArrayLike, length: int = 14) -> IndicatorSequence:
    """RSI from RMA-smoothed gains and losses.

    Each bar is compared with the bar one index older. The differenced
    series is one bar shorter than close and must itself satisfy the RMA
    warm-up, so at least 3 * length + 1 closes are required. Output length
    is len(close) - length.

    A window with no losses gives RSI 100; a window with no movement at all
    gives NaN.
    """
    c = as_series(close)
    check_length(length)
    require_bars("RSI", c, 2)
    require_bars("RSI", c, required_bars(length) + 1)
    mult = rma_multiplier(length)
    diffs = len(c) - 1

    def compute() -> npt.NDArray[np.float32]:
        up = index_range(
            diffs, lambda i: np.maximum(_ZERO, c[i] - c[i + 1]), Walk.OLD_TO_NEW
        )
        down = index_range(
            diffs, lambda i: np.maximum(_ZERO, c[i + 1] - c[i]), Walk.OLD_TO_NEW
        )
        strength = smooth(up, length, mult) / smooth(down, length, mult)
        return _HUNDRED - _HUNDRED / (_ONE + strength)

    return IndicatorSequence(len(c) - length, compute)
