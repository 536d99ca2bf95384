"""Supertrend: ATR trailing stop with hysteresis.

The trail is folded from the oldest ATR slot toward index 0. Each bar only
looks at the bar one index older (its predecessor in the walk):

- candidate lines sit mult * ATR above and below the bar midpoint,
  floored at 0;
- the upper line only moves down, unless the previous close broke above
  it, in which case it resets to the candidate; the lower line mirrors it;
- the emitted value follows the upper line while price stays below it and
  switches to the lower line on a close above it, and vice versa.

Which line is being followed is carried as a TrendSide tag instead of
being inferred by comparing floats.

The oldest slot has no predecessor. Its lines are 0, it emits exactly 0
and counts as following the upper line, so the first real bar starts
either on its upper line or, above it, on its lower line. The oldest
emitted value is therefore never a signal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
import numpy.typing as npt

from chartsignal.engine.series import (
    IndicatorSequence,
    as_series,
    check_length,
    fold_old_to_new,
    require_aligned,
    require_bars,
)
from chartsignal.engine.smoothing import required_bars
from chartsignal.engine.volatility import average_true_ranges

Array = npt.NDArray[np.float32]

_ZERO = np.float32(0.0)
_TWO = np.float32(2.0)


class TrendSide(str, Enum):
    """Line the trend value is following."""

    UPPER = "upper"  # downtrend, upper line is the stop
    LOWER = "lower"  # uptrend, lower line is the stop


@dataclass(frozen=True)
class TrendPoint:
    """Supertrend state of one bar.

    side is None once no line can be followed (a NaN close or line);
    value is 0 in that case.
    """

    upper: float
    lower: float
    value: float
    side: TrendSide | None


SEED = TrendPoint(upper=0.0, lower=0.0, value=0.0, side=TrendSide.UPPER)


def _follow(
    prev_side: TrendSide | None, close: float, upper: float, lower: float
) -> tuple[TrendSide | None, float]:
    if prev_side is TrendSide.UPPER:
        if close <= upper:
            return TrendSide.UPPER, upper
        if close >= upper:
            return TrendSide.LOWER, lower
    elif prev_side is TrendSide.LOWER:
        if close >= lower:
            return TrendSide.LOWER, lower
        if close <= lower:
            return TrendSide.UPPER, upper
    return None, 0.0


def trail(
    close: Array, high: Array, low: Array, length: int, mult: float
) -> list[TrendPoint]:
    """Fold the trail over every ATR slot. Caller validates the inputs."""
    atrs = average_true_ranges(close, high, low, length)
    m = np.float32(mult)

    def step(i: int, prev: TrendPoint) -> TrendPoint:
        mid = (high[i] + low[i]) / _TWO
        band = m * atrs[i]
        up = float(np.maximum(_ZERO, mid + band))
        dn = float(np.maximum(_ZERO, mid - band))
        prev_close = float(close[i + 1])

        upper = up if up < prev.upper or prev_close > prev.upper else prev.upper
        lower = dn if dn > prev.lower or prev_close < prev.lower else prev.lower

        side, value = _follow(prev.side, float(close[i]), upper, lower)
        return TrendPoint(upper=upper, lower=lower, value=value, side=side)

    return fold_old_to_new(len(atrs), SEED, step)


def _validated(
    close: npt.ArrayLike, high: npt.ArrayLike, low: npt.ArrayLike, length: int
) -> tuple[Array, Array, Array]:
    check_length(length)
    c, h, lo = as_series(close), as_series(high), as_series(low)
    require_aligned("Supertrend", close=c, high=h, low=lo)
    require_bars("Supertrend", c, required_bars(length) + 1)
    return c, h, lo


def supertrend_trail(
    close: npt.ArrayLike,
    high: npt.ArrayLike,
    low: npt.ArrayLike,
    length: int = 10,
    mult: float = 3.0,
) -> list[TrendPoint]:
    """Full per-bar Supertrend state, newest-first, aligned with ATR."""
    c, h, lo = _validated(close, high, low, length)
    with np.errstate(invalid="ignore", over="ignore"):
        return trail(c, h, lo, length, mult)


def supertrend(
    close: npt.ArrayLike,
    high: npt.ArrayLike,
    low: npt.ArrayLike,
    length: int = 10,
    mult: float = 3.0,
) -> IndicatorSequence:
    """Supertrend values, newest-first. Output length is len(close) - length.

    The last element (oldest bar) is always 0.
    """
    c, h, lo = _validated(close, high, low, length)

    def compute() -> Array:
        points = trail(c, h, lo, length, mult)
        return np.array([p.value for p in points], dtype=np.float32)

    return IndicatorSequence(len(c) - length, compute)
