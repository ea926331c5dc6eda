"""Swing point detection.

A position i is a swing high when its price is >= every price within
`window` positions on either side, and a swing low when it is <= every
such price. Comparisons are non-strict, so each member of a flat plateau
at the extreme qualifies. The first and last `window` positions lack a
full neighbourhood and are never evaluated.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from src.domain.models.analysis import SwingPoint, SwingPoints
from src.domain.models.enums import SwingKind
from src.domain.models.market import Series


def is_swing_high(prices: Sequence[Decimal], i: int, window: int) -> bool:
    """Check whether prices[i] dominates its symmetric neighbourhood."""
    price = prices[i]
    return all(
        price >= prices[j]
        for j in range(i - window, i + window + 1)
        if j != i
    )


def is_swing_low(prices: Sequence[Decimal], i: int, window: int) -> bool:
    """Check whether prices[i] is the floor of its symmetric neighbourhood."""
    price = prices[i]
    return all(
        price <= prices[j]
        for j in range(i - window, i + window + 1)
        if j != i
    )


def find_swing_points_in_prices(
    prices: Sequence[Decimal],
    dates: Sequence[date],
    window: int,
    offset: int = 0,
) -> SwingPoints:
    """Detect swing highs and lows in a price slice.

    Args:
        prices: Prices, oldest first
        dates: Dates aligned with prices
        window: Neighbours required on each side
        offset: Added to every reported index (slice start in the full series)

    Returns:
        SwingPoints with highs and lows in ascending index order

    Raises:
        ValueError: If window is not positive or inputs are misaligned
    """
    if window <= 0:
        raise ValueError(f"Window must be positive, got {window}")
    if len(prices) != len(dates):
        raise ValueError(f"Got {len(prices)} prices but {len(dates)} dates")

    highs: list[SwingPoint] = []
    lows: list[SwingPoint] = []

    # Empty range when len(prices) <= 2 * window
    for i in range(window, len(prices) - window):
        if is_swing_high(prices, i, window):
            highs.append(
                SwingPoint(index=i + offset, date=dates[i], price=prices[i], kind=SwingKind.HIGH)
            )
        if is_swing_low(prices, i, window):
            lows.append(
                SwingPoint(index=i + offset, date=dates[i], price=prices[i], kind=SwingKind.LOW)
            )

    return SwingPoints(highs=tuple(highs), lows=tuple(lows))


def find_swing_points(
    series: Series,
    window: int,
    max_points: int | None = None,
) -> SwingPoints:
    """Detect swing highs and lows over a full series.

    Args:
        series: Normalized price series
        window: Neighbours required on each side
        max_points: Keep only the most recent K points of each kind

    Returns:
        SwingPoints in chronological order (empty for short series)
    """
    swings = find_swing_points_in_prices(series.prices, series.dates, window)
    if max_points is None:
        return swings
    return recent_swing_points(swings, max_points)


def recent_swing_points(swings: SwingPoints, count: int) -> SwingPoints:
    """Keep the most recent `count` highs and lows."""
    if count <= 0:
        return SwingPoints()
    return SwingPoints(highs=swings.highs[-count:], lows=swings.lows[-count:])
