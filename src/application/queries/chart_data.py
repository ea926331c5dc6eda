"""Chart-facing views of an AnalysisResult.

Display rounding happens here and nowhere upstream, so the engine output
stays exactly reproducible.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from src.domain.models.analysis import AnalysisResult
from src.domain.rules import DISPLAY_PRECISION
from src.domain.services.moving_average import latest_value


def round_price(value: Decimal | None) -> Decimal | None:
    """Round to display precision (2 dp, half up); None stays None."""
    if value is None:
        return None
    return value.quantize(DISPLAY_PRECISION, rounding=ROUND_HALF_UP)


def ma_key(period: int) -> str:
    """Column name for a moving average (e.g., 'ma20')."""
    return f"ma{period}"


@dataclass
class PriceSummary:
    """Headline numbers for the latest observation."""

    symbol: str
    current_price: Decimal | None = None
    last_date: date | None = None
    change: Decimal = Decimal("0")
    change_percent: Decimal = Decimal("0")
    latest_averages: dict[int, Decimal | None] = field(default_factory=dict)

    @property
    def is_up(self) -> bool:
        return self.change >= 0


def build_chart_rows(
    result: AnalysisResult,
    visible_periods: Iterable[int] | None = None,
) -> list[dict[str, Any]]:
    """Build one row per observation with price and MA columns.

    Args:
        result: Analysis output
        visible_periods: MA periods to include (all computed periods if None)

    Returns:
        List of dicts with 'date' (ISO string), 'price', 'volume' and one
        'maN' column per visible period; absent MA values are None
    """
    if visible_periods is None:
        periods = sorted(result.moving_averages)
    else:
        periods = [p for p in sorted(set(visible_periods)) if p in result.moving_averages]

    rows: list[dict[str, Any]] = []
    for i, point in enumerate(result.series.points):
        row: dict[str, Any] = {
            "date": point.date.isoformat(),
            "price": round_price(point.price),
            "volume": point.volume,
        }
        for period in periods:
            row[ma_key(period)] = round_price(result.moving_averages[period][i])
        rows.append(row)
    return rows


def summarize(result: AnalysisResult) -> PriceSummary:
    """Summarize the latest price, its daily change and the latest MAs.

    Change is measured against the previous observation and is zero when
    there is only one point.
    """
    series = result.series
    summary = PriceSummary(
        symbol=series.symbol,
        current_price=series.current_price,
        last_date=series.last_date,
        latest_averages={
            period: latest_value(values) for period, values in result.moving_averages.items()
        },
    )

    if len(series) >= 2:
        current = series[-1].price
        previous = series[-2].price
        summary.change = current - previous
        summary.change_percent = summary.change / previous * 100

    return summary
