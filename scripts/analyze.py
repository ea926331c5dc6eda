#!/usr/bin/env python3
"""Price chart analyzer - moving averages, swing points, levels and trend lines.

Usage:
    python scripts/analyze.py                              # Analyze AAPL once
    python scripts/analyze.py --symbol MSFT --days 730     # Longer history
    python scripts/analyze.py --strategy range_scan        # Simple range-scan levels
    python scripts/analyze.py --source chart               # Chart JSON API instead of yfinance
    python scripts/analyze.py --watch --interval 60        # Refresh every minute
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path and load environment
sys.path.insert(0, str(Path(__file__).parent.parent))
load_dotenv(Path(__file__).parent.parent / ".env")

from src.adapters.data_feeds.factory import create_data_feed
from src.application.queries.analyze_symbol import SymbolAnalysis, SymbolAnalyzer
from src.application.queries.chart_data import round_price, summarize
from src.application.workflows.refresh_loop import AnalysisSession, RefreshLoop
from src.domain.models.enums import ResolverStrategy
from src.infrastructure.config import get_settings
from src.infrastructure.logging import configure_logging


def print_header(title: str):
    """Print a section header."""
    print()
    print("=" * 70)
    print(f" {title}")
    print("=" * 70)


def show_analysis(analysis: SymbolAnalysis, swing_limit: int = 5):
    """Print one analysis cycle."""
    if not analysis.succeeded:
        print_header(f"{analysis.symbol} - ERROR")
        print(f"  {analysis.error}")
        return

    result = analysis.result
    summary = summarize(result)

    print_header(f"{summary.symbol} - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    sign = "+" if summary.is_up else ""
    print(
        f"  Price: ${round_price(summary.current_price)}  "
        f"{sign}${round_price(summary.change)} ({sign}{round_price(summary.change_percent)}%)"
    )
    print(f"  Last updated: {summary.last_date}  ({len(result.series)} points)")

    print_header("MOVING AVERAGES")
    for period, value in summary.latest_averages.items():
        shown = f"${round_price(value)}" if value is not None else "N/A"
        print(f"  {period:>4}-day MA  {shown}")

    print_header("SUPPORT / RESISTANCE")
    if not result.levels:
        print("  (no levels near price)")
    for level in result.levels:
        print(
            f"  {level.kind.value:<11} ${round_price(level.price):>10}  "
            f"strength {round_price(level.strength):>6}  "
            f"{level.source.value:<15} {level.date}"
        )

    print_header("TREND LINES")
    if not result.trend_lines:
        print("  (no confirmed trend lines)")
    for segment in result.trend_lines:
        start = round_price(segment.value_at(segment.start_index))
        end = round_price(segment.value_at(segment.end_index))
        print(
            f"  {segment.kind.value:<11} slope {segment.slope:+.4f}/day  "
            f"[{segment.start_index}..{segment.end_index}]  ${start} -> ${end}"
        )

    print_header("RECENT SWING POINTS")
    swings = sorted(
        result.swings.highs[-swing_limit:] + result.swings.lows[-swing_limit:],
        key=lambda sp: sp.index,
    )
    if not swings:
        print("  (series too short)")
    for point in swings:
        print(f"  {point.date}  {point.kind.value:<5} ${round_price(point.price)}")


async def main(
    symbol: str,
    days: int | None = None,
    strategy: str | None = None,
    source: str | None = None,
    watch: bool = False,
    interval: float | None = None,
    cycles: int | None = None,
) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    config = settings.analysis_config()
    if strategy:
        config = config.model_copy(update={"level_strategy": ResolverStrategy(strategy)})

    analyzer = SymbolAnalyzer(
        data_feed=create_data_feed(settings, source=source),
        config=config,
        days=days or settings.history_days,
    )
    session = AnalysisSession(analyzer, symbol, on_update=show_analysis)

    if not watch:
        analysis = await session.refresh()
        return 0 if analysis is not None and analysis.succeeded else 1

    loop = RefreshLoop(session, interval_seconds=interval or settings.refresh_interval_seconds)
    result = await loop.start(max_cycles=cycles)
    return 0 if not result.errors else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Price chart technical analysis")
    parser.add_argument("--symbol", default="AAPL", help="Ticker to analyze")
    parser.add_argument("--days", type=int, help="Calendar days of history")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ResolverStrategy],
        help="Support/resistance strategy",
    )
    parser.add_argument("--source", choices=["yahoo", "chart"], help="Quote source")
    parser.add_argument("--watch", action="store_true", help="Keep refreshing")
    parser.add_argument("--interval", type=float, help="Seconds between refreshes")
    parser.add_argument("--cycles", type=int, help="Stop after N refreshes (with --watch)")
    args = parser.parse_args()

    try:
        sys.exit(
            asyncio.run(
                main(
                    args.symbol,
                    days=args.days,
                    strategy=args.strategy,
                    source=args.source,
                    watch=args.watch,
                    interval=args.interval,
                    cycles=args.cycles,
                )
            )
        )
    except KeyboardInterrupt:
        sys.exit(0)
