"""Unit tests for moving average calculations."""

import random
from decimal import Decimal

import pytest

from src.domain.services.moving_average import (
    compute_ma,
    compute_moving_averages,
    latest_value,
)


def to_decimals(values) -> list[Decimal]:
    return [Decimal(str(v)) for v in values]


class TestComputeMA:
    """Tests for simple moving average."""

    def test_basic_average(self):
        """Test 3-period MA over 1..5."""
        result = compute_ma(to_decimals([1, 2, 3, 4, 5]), 3)
        assert result == [None, None, Decimal("2"), Decimal("3"), Decimal("4")]

    def test_output_aligned_with_input(self):
        """Test output has the same length as the input."""
        prices = to_decimals(range(1, 31))
        assert len(compute_ma(prices, 20)) == 30

    def test_period_longer_than_series(self):
        """Test all values are None when history is insufficient."""
        assert compute_ma(to_decimals([1, 2, 3]), 5) == [None, None, None]

    def test_period_one_is_identity(self):
        """Test a 1-period MA equals the prices."""
        prices = to_decimals([10, 11.5, 9])
        assert compute_ma(prices, 1) == prices

    def test_empty_prices(self):
        """Test empty input yields empty output."""
        assert compute_ma([], 20) == []

    @pytest.mark.parametrize("period", [0, -3])
    def test_non_positive_period_raises(self, period):
        """Test invalid period is rejected."""
        with pytest.raises(ValueError, match="Period must be positive"):
            compute_ma(to_decimals([1, 2, 3]), period)

    def test_matches_naive_mean(self):
        """Test running sum agrees with a direct mean of each window."""
        rng = random.Random(42)
        prices = [Decimal(rng.randint(5000, 15000)) / 100 for _ in range(120)]
        period = 20

        result = compute_ma(prices, period)

        for i, value in enumerate(result):
            if i < period - 1:
                assert value is None
            else:
                window = prices[i - period + 1 : i + 1]
                assert value == sum(window) / period

    def test_no_rounding(self):
        """Test values keep full precision."""
        result = compute_ma(to_decimals([1, 1, 2]), 3)
        assert result[-1] == Decimal(4) / 3


class TestComputeMovingAverages:
    """Tests for multi-period calculation."""

    def test_keyed_by_period(self):
        """Test one series per period in ascending order."""
        prices = to_decimals(range(1, 11))
        result = compute_moving_averages(prices, [5, 2])

        assert list(result) == [2, 5]
        assert result[2][1] == Decimal("1.5")
        assert result[5][4] == Decimal("3")

    def test_duplicate_periods_collapse(self):
        """Test repeated periods produce one entry."""
        result = compute_moving_averages(to_decimals([1, 2, 3]), [2, 2])
        assert list(result) == [2]


class TestLatestValue:
    """Tests for latest MA value lookup."""

    def test_latest(self):
        """Test the last value is returned."""
        assert latest_value([None, Decimal("2"), Decimal("3")]) == Decimal("3")

    def test_insufficient_history(self):
        """Test None when the last value is undefined."""
        assert latest_value([None, None]) is None

    def test_empty(self):
        """Test None for empty input."""
        assert latest_value([]) is None
