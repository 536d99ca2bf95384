"""Screener layer: per-pair snapshots, ranking and buy selection."""

from chartsignal.screener.ranking import rank, select, sma_deviation, take_snapshot
from chartsignal.screener.scanner import ScanResult, Screener
from chartsignal.screener.types import Bar, Chart, ChartFormatError, Selection, Snapshot

__all__ = [
    "Bar",
    "Chart",
    "ChartFormatError",
    "ScanResult",
    "Screener",
    "Selection",
    "Snapshot",
    "rank",
    "select",
    "sma_deviation",
    "take_snapshot",
]
