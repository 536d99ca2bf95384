"""Screener value objects.

Bar carries exchange prices as Decimal; Chart holds newest-first float32
arrays ready for the engine. Decimal -> float conversion happens in
Chart.from_bars, nowhere else.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

import numpy as np
import numpy.typing as npt

Array = npt.NDArray[np.float32]

# Exchange kline row layout (oldest row first)
_OPEN, _HIGH, _LOW, _CLOSE, _VOLUME, _TRADES, _TAKER = 1, 2, 3, 4, 5, 8, 9


class ChartFormatError(Exception):
    """Raw chart data could not be turned into price series."""


@dataclass(frozen=True)
class Bar:
    """OHLCV bar (candlestick) data."""

    symbol: str
    timestamp: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal


def _frozen(values: Any, name: str) -> Array:
    try:
        array = np.array(values, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise ChartFormatError(f"{name}: {e}") from e
    if array.ndim != 1:
        raise ChartFormatError(f"{name} must be 1-D, got shape {array.shape}")
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class Chart:
    """Parallel price series for one instrument, index 0 = newest bar.

    All series share one length. trades and taker (taker buy volume) are
    only present when the source provides them.
    """

    open: Array
    high: Array
    low: Array
    close: Array
    volume: Array
    trades: Array | None = field(default=None)
    taker: Array | None = field(default=None)

    def __post_init__(self) -> None:
        lengths: dict[str, int] = {}
        for name in ("open", "high", "low", "close", "volume", "trades", "taker"):
            values = getattr(self, name)
            if values is None:
                continue
            array = _frozen(values, name)
            object.__setattr__(self, name, array)
            lengths[name] = len(array)
        if len(set(lengths.values())) > 1:
            detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
            raise ChartFormatError(f"Chart series lengths differ: {detail}")

    def __len__(self) -> int:
        return len(self.close)

    @classmethod
    def from_klines(cls, rows: Sequence[Sequence[Any]]) -> Chart:
        """Build a chart from exchange kline rows, oldest row first.

        Row fields: [open_time, open, high, low, close, volume, close_time,
        quote_volume, trades, taker_base_volume, ...]. Prices may be
        numbers or numeric strings. Rows are reversed so index 0 is newest.
        """
        if len(rows) == 0:
            raise ChartFormatError("No kline rows")
        newest_first = list(reversed(rows))
        try:
            columns = {
                name: [float(row[index]) for row in newest_first]
                for name, index in (
                    ("open", _OPEN),
                    ("high", _HIGH),
                    ("low", _LOW),
                    ("close", _CLOSE),
                    ("volume", _VOLUME),
                )
            }
            if all(len(row) > _TAKER for row in newest_first):
                columns["trades"] = [float(row[_TRADES]) for row in newest_first]
                columns["taker"] = [float(row[_TAKER]) for row in newest_first]
        except (IndexError, TypeError, ValueError) as e:
            raise ChartFormatError(f"Malformed kline row: {e}") from e
        return cls(**columns)

    @classmethod
    def from_bars(cls, bars: Sequence[Bar]) -> Chart:
        """Build a chart from bars of one symbol, in any order."""
        if len(bars) == 0:
            raise ChartFormatError("No bars")
        symbols = {bar.symbol for bar in bars}
        if len(symbols) > 1:
            raise ChartFormatError(f"Bars span several symbols: {sorted(symbols)}")
        newest_first = sorted(bars, key=lambda b: b.timestamp, reverse=True)
        return cls(
            open=[float(b.open) for b in newest_first],
            high=[float(b.high) for b in newest_first],
            low=[float(b.low) for b in newest_first],
            close=[float(b.close) for b in newest_first],
            volume=[float(b.volume) for b in newest_first],
        )


@dataclass(frozen=True)
class Snapshot:
    """Latest indicator readings for one pair.

    sma is the percent distance of the latest close from its SMA;
    negative means the price sits below its average.
    """

    pair: str
    price: float
    rsi: float
    sma: float
    locked: bool = False


@dataclass(frozen=True)
class Selection:
    """Pairs holding open orders and pairs picked to buy."""

    locked: tuple[str, ...] = ()
    buy: tuple[str, ...] = ()
