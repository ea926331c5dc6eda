"""Series normalization - raw quotes to an ordered, gap-free Series.

Quote sources report non-trading gaps and partial bars as missing
entries. Those entries are dropped entirely (never zero-filled) and
timestamps are collapsed to calendar days so later comparisons on dates
are exact.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from src.domain.models.market import PricePoint, QuotePayload, RawNumber, RawTimestamp, Series


class EmptySeriesError(ValueError):
    """Raised when no usable price points remain after normalization."""

    def __init__(self, symbol: str, reason: str = "no valid price data"):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"{symbol}: {reason}")


def to_calendar_date(value: RawTimestamp) -> date | None:
    """Normalize a timestamp to a timezone-naive calendar date.

    Epoch seconds are interpreted in UTC. Aware datetimes are converted to
    UTC before truncation; naive datetimes are truncated as-is.

    Args:
        value: Epoch seconds, datetime, date or ISO-8601 string

    Returns:
        Calendar date, or None if the value is missing or unparseable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def to_decimal(value: RawNumber) -> Decimal | None:
    """Convert a raw number to Decimal, None for gaps and NaN/inf."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # Same conversion the feeds use: round away float noise first
        return Decimal(str(round(value, 6)))
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _to_volume(value: RawNumber) -> int | None:
    amount = to_decimal(value)
    if amount is None or amount < 0:
        return None
    return int(amount)


def _at(values: list[RawNumber] | None, index: int) -> RawNumber:
    return values[index] if values is not None else None


def build_series(symbol: str, candidates: Iterable[PricePoint | None]) -> Series:
    """Order candidate points by date into a Series.

    Missing candidates are skipped. When two points share a date the later
    one in input order wins.

    Raises:
        EmptySeriesError: If no points remain
    """
    by_date: dict[date, PricePoint] = {}
    for point in candidates:
        if point is not None:
            by_date[point.date] = point

    if not by_date:
        raise EmptySeriesError(symbol)

    return Series(
        symbol=symbol,
        points=tuple(by_date[d] for d in sorted(by_date)),
    )


def make_point(
    timestamp: RawTimestamp,
    price: RawNumber,
    volume: RawNumber = None,
    high: RawNumber = None,
    low: RawNumber = None,
) -> PricePoint | None:
    """Build one PricePoint, or None if the entry has no usable price/date."""
    day = to_calendar_date(timestamp)
    close = to_decimal(price)
    if day is None or close is None or close <= 0:
        return None
    return PricePoint(
        date=day,
        price=close,
        volume=_to_volume(volume),
        high=to_decimal(high),
        low=to_decimal(low),
    )


def normalize_quotes(payload: QuotePayload) -> Series:
    """Normalize a parallel-array quote payload into a Series.

    Args:
        payload: Raw quotes (timestamps, closes, optional highs/lows/volumes)

    Returns:
        Series ordered by date with every element priced

    Raises:
        EmptySeriesError: If zero usable points remain
    """
    candidates = (
        make_point(
            timestamp,
            payload.closes[i],
            volume=_at(payload.volumes, i),
            high=_at(payload.highs, i),
            low=_at(payload.lows, i),
        )
        for i, timestamp in enumerate(payload.timestamps)
    )
    return build_series(payload.symbol, candidates)


def normalize_records(symbol: str, records: Iterable[Mapping[str, Any]]) -> Series:
    """Normalize a pre-joined list of quote records into a Series.

    Each record carries `date` (or `timestamp`), `price` (or `close`) and
    optionally `volume`, `high` and `low`.

    Raises:
        EmptySeriesError: If zero usable points remain
    """
    candidates = (
        make_point(
            record.get("date", record.get("timestamp")),
            record.get("price", record.get("close")),
            volume=record.get("volume"),
            high=record.get("high"),
            low=record.get("low"),
        )
        for record in records
    )
    return build_series(symbol, candidates)
