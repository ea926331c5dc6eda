"""Market data domain models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

# Raw numbers as they arrive from a quote source; None marks a gap
RawNumber = float | int | Decimal | None
RawTimestamp = int | float | datetime | date | str | None


class PricePoint(BaseModel):
    """One daily observation - immutable value object."""

    model_config = {"frozen": True}

    date: date
    price: Decimal = Field(..., gt=0)
    volume: int | None = Field(default=None, ge=0)
    high: Decimal | None = None
    low: Decimal | None = None


class Series(BaseModel):
    """Ordered, gap-free daily price series for one symbol.

    Position in `points` doubles as the time coordinate for slope math.
    """

    model_config = {"frozen": True}

    symbol: str
    points: tuple[PricePoint, ...] = ()

    @field_validator("points")
    @classmethod
    def dates_strictly_ascending(cls, v: tuple[PricePoint, ...]) -> tuple[PricePoint, ...]:
        """Validate dates are unique and ascending."""
        for prev, curr in zip(v, v[1:]):
            if curr.date <= prev.date:
                raise ValueError(
                    f"dates must be strictly ascending: {prev.date} then {curr.date}"
                )
        return v

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index: int) -> PricePoint:
        return self.points[index]

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def prices(self) -> list[Decimal]:
        """Closing prices, oldest first."""
        return [p.price for p in self.points]

    @property
    def volumes(self) -> list[int | None]:
        return [p.volume for p in self.points]

    @property
    def dates(self) -> list[date]:
        return [p.date for p in self.points]

    @property
    def current_price(self) -> Decimal | None:
        """Most recent price, None for an empty series."""
        return self.points[-1].price if self.points else None

    @property
    def last_date(self) -> date | None:
        return self.points[-1].date if self.points else None


class QuotePayload(BaseModel):
    """Raw quote data for a symbol as parallel arrays.

    Any entry may be None (non-trading gaps, partial bars). Optional arrays,
    when present, must line up with `timestamps`.
    """

    model_config = {"frozen": True}

    symbol: str
    timestamps: list[RawTimestamp]
    closes: list[RawNumber]
    highs: list[RawNumber] | None = None
    lows: list[RawNumber] | None = None
    volumes: list[RawNumber] | None = None
    source: str | None = None

    @model_validator(mode="after")
    def arrays_aligned(self) -> "QuotePayload":
        """Validate all arrays have the same length."""
        expected = len(self.timestamps)
        for name in ("closes", "highs", "lows", "volumes"):
            values = getattr(self, name)
            if values is not None and len(values) != expected:
                raise ValueError(
                    f"{name} has {len(values)} entries, expected {expected}"
                )
        return self

    def __len__(self) -> int:
        return len(self.timestamps)
