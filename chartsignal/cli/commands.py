"""Click CLI commands for chartsignal."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from chartsignal.config import AppConfig, IndicatorConfig
from chartsignal.engine import (
    IndicatorError,
    IndicatorSequence,
    atr,
    bands,
    basis,
    ema,
    higher,
    lower,
    rma,
    rsi,
    sma,
    stoch,
    supertrend,
    true_range,
    wma,
)
from chartsignal.screener import Chart, ChartFormatError, Screener
from chartsignal.screener.scanner import ScanResult
from chartsignal.utils.logging import setup_logging

_Indicator = Callable[[Chart, int, float], IndicatorSequence]

INDICATORS: dict[str, _Indicator] = {
    "higher": lambda c, n, m: higher(c.high, n),
    "lower": lambda c, n, m: lower(c.low, n),
    "sma": lambda c, n, m: sma(c.close, n),
    "wma": lambda c, n, m: wma(c.close, n),
    "basis": lambda c, n, m: basis(c.high, c.low, n),
    "stoch": lambda c, n, m: stoch(c.close, c.high, c.low, n),
    "bands": lambda c, n, m: bands(c.close, n, m),
    "ema": lambda c, n, m: ema(c.close, n),
    "rma": lambda c, n, m: rma(c.close, n),
    "rsi": lambda c, n, m: rsi(c.close, n),
    "tr": lambda c, n, m: true_range(c.close, c.high, c.low),
    "atr": lambda c, n, m: atr(c.close, c.high, c.low, n),
    "supertrend": lambda c, n, m: supertrend(c.close, c.high, c.low, n, m),
}


def _defaults(name: str, ind: IndicatorConfig) -> tuple[int, float]:
    """Configured (length, mult) for an indicator; 10 where none is set."""
    if name == "rsi":
        return ind.rsi_length, 0.0
    if name == "sma":
        return ind.sma_length, 0.0
    if name == "bands":
        return ind.bands_length, ind.bands_mult
    if name == "supertrend":
        return ind.supertrend_length, ind.supertrend_mult
    return 10, 0.0


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Cannot read {path}: {e}") from e


def _load_config() -> AppConfig:
    try:
        return AppConfig()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


@click.group()
def cli() -> None:
    """Chartsignal: technical indicators and pair screening."""


@cli.command()
@click.argument("name", type=click.Choice(sorted(INDICATORS), case_sensitive=False))
@click.argument(
    "chart_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--length", type=int, default=None, help="Window length.")
@click.option(
    "--mult", type=float, default=None, help="Band multiplier (bands, supertrend)."
)
@click.option(
    "--places", type=click.IntRange(0, 10), default=4, help="Decimal places."
)
def indicator(
    name: str,
    chart_file: Path,
    length: int | None,
    mult: float | None,
    places: int,
) -> None:
    """Print an indicator for a chart file, newest bar first.

    CHART_FILE is a JSON list of exchange kline rows, oldest row first.
    """
    name = name.lower()
    default_length, default_mult = _defaults(name, _load_config().indicators)
    try:
        chart = Chart.from_klines(_load_json(chart_file))
        values = INDICATORS[name](
            chart,
            length if length is not None else default_length,
            mult if mult is not None else default_mult,
        )
        lines = [f"{i:>4}  {value:.{places}f}" for i, value in enumerate(values)]
    except (ChartFormatError, IndicatorError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{name.upper()} ({len(values)} values, newest first)")
    for line in lines:
        click.echo(line)


@cli.command()
@click.argument(
    "charts_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--open",
    "open_pairs",
    default="",
    help="Comma-separated pairs with open orders (e.g. BTCBUSD,ETHBUSD).",
)
@click.option("--max-trades", type=click.IntRange(min=1), default=None)
def scan(charts_file: Path, open_pairs: str, max_trades: int | None) -> None:
    """Rank pairs by SMA deviation and pick the ones to buy.

    CHARTS_FILE is a JSON object mapping pair -> kline rows (or null).
    """
    config = _load_config()
    if max_trades is not None:
        config = config.model_copy(
            update={
                "screener": config.screener.model_copy(
                    update={"max_trades": max_trades}
                )
            }
        )
    setup_logging(level=config.log_level, log_format=config.log_format)

    raw = _load_json(charts_file)
    if not isinstance(raw, dict):
        raise click.ClickException("Charts file must map pair -> kline rows")

    try:
        charts = {
            str(pair).upper(): None if rows is None else Chart.from_klines(rows)
            for pair, rows in raw.items()
        }
        result = Screener(config).scan(
            charts,
            {p.strip().upper() for p in open_pairs.split(",") if p.strip()},
        )
    except (ChartFormatError, IndicatorError) as e:
        raise click.ClickException(str(e)) from e

    _print_scan(result, config)


def _print_scan(result: ScanResult, config: AppConfig) -> None:
    """Print the ranking table. Buys in green, locked pairs in red."""
    ind = config.indicators
    click.echo(
        click.style(
            f"{'PAIR':<12}{'PRICE':>14}{'RSI':>10}{'SMA':>10}", fg="yellow"
        )
    )
    for snap in result.ranked:
        row = f"{snap.pair:<12}{snap.price:>14.4f}{snap.rsi:>10.2f}{snap.sma:>10.2f}"
        if snap.pair in result.selection.buy:
            row = click.style(row, fg="green")
        elif snap.locked:
            row = click.style(row, fg="red")
        click.echo(row)

    click.echo(
        f"\nRSI({ind.rsi_length})  SMA({ind.sma_length})  "
        f"Trades: {config.screener.max_trades}"
    )
    click.echo(f"Locked: {', '.join(result.selection.locked) or '-'}")
    click.echo(f"Buy:    {', '.join(result.selection.buy) or '-'}")
    if result.skipped:
        click.echo(f"No chart: {', '.join(result.skipped)}")


@cli.command()
def config() -> None:
    """Show current configuration."""
    cfg = _load_config()

    click.echo("=== Chartsignal Configuration ===\n")

    click.echo(f"Log Level:    {cfg.log_level}")
    click.echo(f"Log Format:   {cfg.log_format}")
    click.echo("")

    click.echo("[Indicators]")
    click.echo(f"  RSI Length:         {cfg.indicators.rsi_length}")
    click.echo(f"  SMA Length:         {cfg.indicators.sma_length}")
    click.echo(
        f"  Supertrend:         {cfg.indicators.supertrend_length} "
        f"x {cfg.indicators.supertrend_mult}"
    )
    click.echo(
        f"  Bands:              {cfg.indicators.bands_length} "
        f"x {cfg.indicators.bands_mult}"
    )
    click.echo("")

    click.echo("[Screener]")
    click.echo(f"  Max Trades:         {cfg.screener.max_trades}")
    click.echo(f"  Max Workers:        {cfg.screener.max_workers}")
    click.echo(f"  Interval:           {cfg.screener.interval}")
    click.echo(f"  Chart Limit:        {cfg.screener.chart_limit}")
    click.echo("")

    click.echo(f"Watchlist:    {', '.join(cfg.watchlist)}")
