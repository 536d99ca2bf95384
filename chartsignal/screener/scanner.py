"""Concurrent screener pass over a set of charts.

Charts are evaluated in a ThreadPoolExecutor, one task per pair. Each task
only reads its own chart, so no locking is needed. Missing charts (the
exchange returned nothing) are skipped; indicator errors propagate.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from dataclasses import dataclass
from uuid import uuid4

import structlog

from chartsignal.config import AppConfig
from chartsignal.screener.ranking import rank, select, take_snapshot
from chartsignal.screener.types import Chart, Selection, Snapshot
from chartsignal.utils.logging import reset_scan_id, set_scan_id

log = structlog.get_logger()


@dataclass(frozen=True)
class ScanResult:
    """Ranked snapshots plus the resulting selection."""

    scan_id: str
    ranked: tuple[Snapshot, ...]
    selection: Selection
    skipped: tuple[str, ...] = ()


class Screener:
    """Ranks pairs by SMA deviation and picks the ones to buy."""

    def __init__(self, config: AppConfig) -> None:
        self._indicators = config.indicators
        self._screener = config.screener

    def scan(
        self,
        charts: Mapping[str, Chart | None],
        open_pairs: Collection[str] = frozenset(),
    ) -> ScanResult:
        """Snapshot every chart, rank them and select buys.

        Raises:
            IndicatorError: If any chart is too short for the configured
                indicators.
        """
        scan_id = uuid4().hex[:12]
        token = set_scan_id(scan_id)
        try:
            return self._scan(scan_id, charts, open_pairs)
        finally:
            reset_scan_id(token)

    def _scan(
        self,
        scan_id: str,
        charts: Mapping[str, Chart | None],
        open_pairs: Collection[str],
    ) -> ScanResult:
        log.info("scan_started", pairs=len(charts), open_pairs=len(open_pairs))

        present = {pair: chart for pair, chart in charts.items() if chart is not None}
        skipped = tuple(pair for pair in charts if pair not in present)
        for pair in skipped:
            log.warning("chart_missing", pair=pair)

        snapshots: list[Snapshot] = []
        if present:
            workers = min(len(present), self._screener.max_workers)
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # One context copy per task so the scan ID reaches the workers
                futures = [
                    executor.submit(
                        copy_context().run,
                        take_snapshot,
                        pair,
                        chart,
                        pair in open_pairs,
                        self._indicators,
                    )
                    for pair, chart in present.items()
                ]
                snapshots = [future.result() for future in futures]

        ranked = rank(snapshots)
        selection = select(ranked, self._screener.max_trades)
        log.info(
            "scan_complete",
            ranked=len(ranked),
            skipped=len(skipped),
            locked=list(selection.locked),
            buy=list(selection.buy),
        )
        return ScanResult(
            scan_id=scan_id,
            ranked=tuple(ranked),
            selection=selection,
            skipped=skipped,
        )
