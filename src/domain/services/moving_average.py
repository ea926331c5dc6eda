"""Simple moving average calculations.

The average is trailing (causal): the value at index i only uses
prices[i - period + 1 .. i]. The first period - 1 positions have no value
and are never back-filled. No rounding happens here; display precision is
applied at the chart boundary.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal


def compute_ma(
    prices: Sequence[Decimal],
    period: int,
) -> list[Decimal | None]:
    """Calculate a simple moving average aligned with the input.

    Uses a running sum: add the entering price, subtract the one leaving
    the window.

    Args:
        prices: Prices, oldest first
        period: Window length

    Returns:
        List the same length as prices; None where history is insufficient

    Raises:
        ValueError: If period is not positive
    """
    if period <= 0:
        raise ValueError(f"Period must be positive, got {period}")

    result: list[Decimal | None] = []
    window_sum = Decimal("0")

    for i, price in enumerate(prices):
        window_sum += price
        if i >= period:
            window_sum -= prices[i - period]

        if i < period - 1:
            result.append(None)
        else:
            result.append(window_sum / period)

    return result


def compute_moving_averages(
    prices: Sequence[Decimal],
    periods: Iterable[int],
) -> dict[int, list[Decimal | None]]:
    """Calculate one moving average per period.

    Args:
        prices: Prices, oldest first
        periods: Window lengths (duplicates collapse)

    Returns:
        Dict keyed by period, in ascending period order
    """
    return {period: compute_ma(prices, period) for period in sorted(set(periods))}


def latest_value(values: Sequence[Decimal | None]) -> Decimal | None:
    """Most recent MA value, None when the series is too short."""
    return values[-1] if values else None
