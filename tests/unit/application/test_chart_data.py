"""Unit tests for chart-facing views."""

from datetime import date, timedelta
from decimal import Decimal

from src.application.pipeline import run_analysis
from src.application.queries.chart_data import (
    build_chart_rows,
    ma_key,
    round_price,
    summarize,
)
from src.domain.models.analysis import AnalysisConfig
from src.domain.models.market import PricePoint, Series


def make_series(prices, start: date = date(2026, 1, 1)) -> Series:
    """Create a test series with one point per calendar day."""
    return Series(
        symbol="TEST",
        points=tuple(
            PricePoint(date=start + timedelta(days=i), price=Decimal(str(p)), volume=100 + i)
            for i, p in enumerate(prices)
        ),
    )


class TestRoundPrice:
    """Tests for display rounding."""

    def test_half_up(self):
        """Test two-decimal half-up rounding."""
        assert round_price(Decimal("100.125")) == Decimal("100.13")
        assert round_price(Decimal("100.124")) == Decimal("100.12")

    def test_none_passthrough(self):
        """Test missing values stay missing."""
        assert round_price(None) is None

    def test_ma_key(self):
        """Test MA column naming."""
        assert ma_key(20) == "ma20"


class TestBuildChartRows:
    """Tests for chart row building."""

    def test_rows_aligned_with_series(self):
        """Test one row per observation with MA columns."""
        result = run_analysis(make_series([1, 2, 3, 4]), AnalysisConfig(ma_periods=(2, 3)))

        rows = build_chart_rows(result)

        assert len(rows) == 4
        assert rows[0] == {
            "date": "2026-01-01",
            "price": Decimal("1.00"),
            "volume": 100,
            "ma2": None,
            "ma3": None,
        }
        assert rows[3]["ma2"] == Decimal("3.50")
        assert rows[3]["ma3"] == Decimal("3.00")

    def test_visible_periods_filter(self):
        """Test hidden MAs are left out of the rows."""
        result = run_analysis(make_series([1, 2, 3]), AnalysisConfig(ma_periods=(2, 3)))

        rows = build_chart_rows(result, visible_periods=[3, 99])

        assert "ma2" not in rows[0]
        assert "ma99" not in rows[0]
        assert rows[2]["ma3"] == Decimal("2.00")

    def test_ma_rounded_for_display(self):
        """Test MA values are rounded to two decimals."""
        result = run_analysis(make_series([1, 1, 2]), AnalysisConfig(ma_periods=(3,)))

        rows = build_chart_rows(result)

        assert rows[2]["ma3"] == Decimal("1.33")
        # The engine keeps full precision
        assert result.moving_averages[3][2] == Decimal(4) / 3


class TestSummarize:
    """Tests for the price summary."""

    def test_change_against_previous_point(self):
        """Test change and percent change use the prior observation."""
        result = run_analysis(make_series([100, 102, 99]), AnalysisConfig(ma_periods=(2,)))

        summary = summarize(result)

        assert summary.symbol == "TEST"
        assert summary.current_price == Decimal("99")
        assert summary.last_date == date(2026, 1, 3)
        assert summary.change == Decimal("-3")
        assert round_price(summary.change_percent) == Decimal("-2.94")
        assert summary.is_up is False
        assert summary.latest_averages == {2: Decimal("100.5")}

    def test_single_point_has_no_change(self):
        """Test a lone observation reports zero change."""
        summary = summarize(run_analysis(make_series([100])))

        assert summary.change == Decimal("0")
        assert summary.change_percent == Decimal("0")
        assert summary.is_up is True
