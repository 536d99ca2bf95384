"""Snapshot, ranking and buy selection.

Pure functions. Pairs are ranked by how far their latest close sits below
its SMA; the most discounted unlocked pairs fill the free trade slots.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

from chartsignal.config import IndicatorConfig
from chartsignal.engine import rsi, sma
from chartsignal.screener.types import Chart, Selection, Snapshot


def sma_deviation(close: float, average: float) -> float:
    """Percent distance of close from average. Zero average gives inf/NaN."""
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.float32(close) / np.float32(average)
        return float(ratio * np.float32(100.0) - np.float32(100.0))


def take_snapshot(
    pair: str,
    chart: Chart,
    locked: bool = False,
    config: IndicatorConfig | None = None,
) -> Snapshot:
    """Read the latest RSI and SMA deviation of a chart.

    Raises:
        IndicatorError: If the chart is too short for either indicator.
    """
    cfg = config or IndicatorConfig()
    close = chart.close
    rsi_seq = rsi(close, cfg.rsi_length)
    sma_seq = sma(close, cfg.sma_length)
    price = float(close[0])
    return Snapshot(
        pair=pair,
        price=price,
        rsi=rsi_seq.latest(),
        sma=sma_deviation(price, sma_seq.latest()),
        locked=locked,
    )


def _is_usable(snapshot: Snapshot) -> bool:
    return math.isfinite(snapshot.sma) and math.isfinite(snapshot.rsi)


def rank(snapshots: Iterable[Snapshot]) -> list[Snapshot]:
    """Sort by SMA deviation, lowest first. Non-finite readings go last."""
    return sorted(
        snapshots,
        key=lambda s: (0, s.sma) if math.isfinite(s.sma) else (1, 0.0),
    )


def select(ranked: Sequence[Snapshot], max_trades: int) -> Selection:
    """Pick pairs to buy from a ranking.

    Locked pairs (open orders) count against max_trades. The remaining
    slots go to the best-ranked unlocked pairs with finite readings.
    """
    if max_trades < 1:
        raise ValueError(f"max_trades must be >= 1, got {max_trades}")
    locked = tuple(s.pair for s in ranked if s.locked)
    free = max_trades - len(locked)
    if free <= 0:
        return Selection(locked=locked)
    candidates = [s.pair for s in ranked if not s.locked and _is_usable(s)]
    return Selection(locked=locked, buy=tuple(candidates[:free]))
