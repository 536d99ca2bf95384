"""Seeded recurrences: EMA and RMA.

Both need len(close) >= 3 * length so the seed SMA is taken over data
that is well clear of the newest bars. The seed is the SMA of the oldest
window and sits at index len - length; the recurrence then folds toward
index 0:

    value = mult * close[i] + (1 - mult) * value

with mult = 2 / (length + 1) for EMA and 1 / length for RMA.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import numpy.typing as npt

from chartsignal.engine.series import (
    IndicatorSequence,
    as_series,
    check_length,
    fold_old_to_new,
    require_bars,
)
from chartsignal.engine.windowed import rolling_mean

Array = npt.NDArray[np.float32]

WARMUP_FACTOR = 3


def required_bars(length: int) -> int:
    """Bars a seeded recurrence of this length needs."""
    return WARMUP_FACTOR * length


def smooth(series: Array, length: int, mult: np.float32) -> Array:
    """Run the seeded recurrence over series. Caller validates the length."""
    count = len(series) - length + 1
    seed = np.float32(rolling_mean(series[count - 1 :], length)[0])
    keep = np.float32(1.0) - mult

    def step(i: int, value: np.float32) -> np.float32:
        return mult * series[i] + keep * value

    return np.array(fold_old_to_new(count, seed, step), dtype=np.float32)


def _seeded(
    indicator: str,
    close: npt.ArrayLike,
    length: int,
    multiplier: Callable[[int], np.float32],
) -> IndicatorSequence:
    series = as_series(close)
    check_length(length)
    require_bars(indicator, series, required_bars(length))
    mult = multiplier(length)
    return IndicatorSequence(
        len(series) - length + 1, lambda: smooth(series, length, mult)
    )


def ema_multiplier(length: int) -> np.float32:
    return np.float32(2.0) / np.float32(length + 1)


def rma_multiplier(length: int) -> np.float32:
    return np.float32(1.0) / np.float32(length)


def ema(close: npt.ArrayLike, length: int = 10) -> IndicatorSequence:
    """Exponential moving average seeded with the oldest window's SMA."""
    return _seeded("EMA", close, length, ema_multiplier)


def rma(close: npt.ArrayLike, length: int = 10) -> IndicatorSequence:
    """Wilder's running moving average seeded with the oldest window's SMA."""
    return _seeded("RMA", close, length, rma_multiplier)
