"""Trend line construction from recent swing points.

Only confirmed structures are drawn:
- Support: line through recent swing lows, kept if rising (slope > 0)
- Resistance: line through recent swing highs, kept if falling (slope < 0)

Each line runs from the earliest chosen point to the last index of the
series (extrapolated forward).
"""

from collections.abc import Sequence
from decimal import Decimal

from src.domain.models.analysis import SwingPoint, SwingPoints, TrendSegment
from src.domain.models.enums import LevelKind
from src.domain.rules import TREND_POINTS


def line_through(first: SwingPoint, last: SwingPoint) -> tuple[Decimal, Decimal]:
    """Slope and intercept of the line through two swing points.

    slope = (p2 - p1) / (i2 - i1)
    intercept = p1 - slope * i1

    Raises:
        ValueError: If both points share an index
    """
    if first.index == last.index:
        raise ValueError(f"Points share index {first.index}")
    slope = (last.price - first.price) / (last.index - first.index)
    intercept = first.price - slope * first.index
    return slope, intercept


def _fit_segment(
    points: Sequence[SwingPoint],
    kind: LevelKind,
    series_length: int,
    count: int,
) -> TrendSegment | None:
    recent = list(points[-count:])
    if len(recent) < 2:
        return None

    first, last = recent[0], recent[-1]
    slope, intercept = line_through(first, last)

    if kind == LevelKind.SUPPORT and slope <= 0:
        return None
    if kind == LevelKind.RESISTANCE and slope >= 0:
        return None

    return TrendSegment(
        kind=kind,
        slope=slope,
        intercept=intercept,
        start_index=first.index,
        end_index=max(series_length - 1, last.index),
    )


def build_trend_lines(
    swings: SwingPoints,
    series_length: int,
    points: int = TREND_POINTS,
) -> tuple[TrendSegment, ...]:
    """Build ascending support and descending resistance lines.

    Args:
        swings: Swing highs/lows in chronological order
        series_length: Length of the full series (extension endpoint)
        points: Most recent swing points considered per line

    Returns:
        Zero to two segments, support first
    """
    if points < 2:
        raise ValueError(f"Need at least 2 points per line, got {points}")

    segments: list[TrendSegment] = []

    support = _fit_segment(swings.lows, LevelKind.SUPPORT, series_length, points)
    if support:
        segments.append(support)

    resistance = _fit_segment(swings.highs, LevelKind.RESISTANCE, series_length, points)
    if resistance:
        segments.append(resistance)

    return tuple(segments)
