"""Unit tests for the analysis pipeline."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from src.application.pipeline import run_analysis
from src.domain.models.analysis import AnalysisConfig
from src.domain.models.enums import LevelKind
from src.domain.models.market import PricePoint, Series


def make_series(prices, symbol: str = "TEST", start: date = date(2026, 1, 1)) -> Series:
    """Create a test series with one point per calendar day."""
    return Series(
        symbol=symbol,
        points=tuple(
            PricePoint(date=start + timedelta(days=i), price=Decimal(str(p)), volume=1000)
            for i, p in enumerate(prices)
        ),
    )


@pytest.fixture
def narrow_config():
    """Config with short windows suited to tiny series."""
    return AnalysisConfig(ma_periods=(3,), swing_window=1, level_swing_window=1)


class TestRunAnalysis:
    """Tests for run_analysis."""

    def test_full_pass(self, zigzag_prices, narrow_config):
        """Test every stage runs over the same series."""
        series = make_series(zigzag_prices)

        result = run_analysis(series, narrow_config)

        assert result.series is series
        assert result.symbol == "TEST"

        ma3 = result.moving_averages[3]
        assert len(ma3) == len(series)
        assert ma3[:2] == (None, None)
        assert ma3[2] == Decimal("320") / 3

        assert [sp.index for sp in result.swings.lows] == [1, 3, 5]
        assert [sp.index for sp in result.swings.highs] == [2, 4]

        # Rising lows near price, strongest (most recent) first
        assert [lv.price for lv in result.levels] == [
            Decimal("108"),
            Decimal("104"),
            Decimal("100"),
        ]
        assert result.resistances == []
        assert len(result.supports) == 3

        assert [seg.kind for seg in result.trend_lines] == [LevelKind.SUPPORT]

    def test_idempotent(self, zigzag_prices, narrow_config):
        """Test the same input yields identical output."""
        series = make_series(zigzag_prices)

        first = run_analysis(series, narrow_config)
        second = run_analysis(series, narrow_config)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_single_point(self):
        """Test a single observation yields empty outputs, not errors."""
        result = run_analysis(make_series([100]))

        assert all(values == (None,) for values in result.moving_averages.values())
        assert result.swings.is_empty
        assert result.levels == ()
        assert result.trend_lines == ()

    def test_default_periods(self):
        """Test default MA periods are computed."""
        result = run_analysis(make_series(range(100, 130)))
        assert sorted(result.moving_averages) == [20, 50, 200]
        assert result.moving_averages[20][-1] == Decimal(sum(range(110, 130))) / 20
        assert result.moving_averages[50][-1] is None

    def test_ma_level_periods_computed(self):
        """Test MA level periods are added to the computed averages."""
        config = AnalysisConfig(ma_periods=(20,), include_ma_levels=True, ma_level_periods=(5,))

        result = run_analysis(make_series(range(100, 130)), config)

        assert sorted(result.moving_averages) == [5, 20]

    def test_generation_recorded(self, narrow_config):
        """Test the request generation is carried on the result."""
        result = run_analysis(make_series([100, 101, 102]), narrow_config, generation=7)
        assert result.generation == 7
        assert result.config is narrow_config
