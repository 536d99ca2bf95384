"""Engine layer: indicator computation over newest-first price series."""

from chartsignal.engine.bands import bands, basis, stoch
from chartsignal.engine.errors import (
    IndicatorError,
    InsufficientDataError,
    SeriesLengthMismatchError,
)
from chartsignal.engine.oscillators import rsi
from chartsignal.engine.series import (
    IndicatorSequence,
    Walk,
    fold_old_to_new,
    index_range,
)
from chartsignal.engine.smoothing import ema, rma
from chartsignal.engine.supertrend import (
    TrendPoint,
    TrendSide,
    supertrend,
    supertrend_trail,
)
from chartsignal.engine.volatility import atr, true_range
from chartsignal.engine.windowed import higher, lower, sma, wma

__all__ = [
    "IndicatorError",
    "IndicatorSequence",
    "InsufficientDataError",
    "SeriesLengthMismatchError",
    "TrendPoint",
    "TrendSide",
    "Walk",
    "atr",
    "bands",
    "basis",
    "ema",
    "fold_old_to_new",
    "higher",
    "index_range",
    "lower",
    "rma",
    "rsi",
    "sma",
    "stoch",
    "supertrend",
    "supertrend_trail",
    "true_range",
    "wma",
]
