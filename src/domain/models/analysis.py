"""Derived technical analysis models.

Everything here is recomputed from a Series on every analysis cycle and
never patched in place.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.domain import rules
from src.domain.models.enums import LevelKind, LevelSource, ResolverStrategy, SwingKind
from src.domain.models.market import Series


class SwingPoint(BaseModel):
    """Local price extremum within a symmetric window."""

    model_config = {"frozen": True}

    index: int = Field(..., ge=0)
    date: date
    price: Decimal
    kind: SwingKind


class SwingPoints(BaseModel):
    """Swing highs and lows, each in chronological order."""

    model_config = {"frozen": True}

    highs: tuple[SwingPoint, ...] = ()
    lows: tuple[SwingPoint, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.highs and not self.lows


class Level(BaseModel):
    """Horizontal support or resistance price.

    Strength is a ranking signal (touches, volume, recency), not a
    probability.
    """

    model_config = {"frozen": True}

    price: Decimal
    date: date
    kind: LevelKind
    strength: Decimal = Field(default=rules.BASE_STRENGTH, ge=0)
    source: LevelSource = LevelSource.SWING


class TrendSegment(BaseModel):
    """Line price = slope * index + intercept, valid on [start_index, end_index]."""

    model_config = {"frozen": True}

    kind: LevelKind
    slope: Decimal
    intercept: Decimal
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)

    def value_at(self, index: int) -> Decimal:
        """Price on the line at a series index."""
        return self.slope * index + self.intercept


class AnalysisConfig(BaseModel):
    """Tunables consumed by the analysis pipeline."""

    model_config = {"frozen": True}

    # Moving averages
    ma_periods: tuple[int, ...] = rules.MA_PERIODS

    # Swing detection for display and trend lines
    swing_window: int = Field(default=rules.SWING_WINDOW, gt=0)
    max_swing_points: int | None = Field(default=None, gt=0)

    # Support / resistance
    level_strategy: ResolverStrategy = ResolverStrategy.SWING_SCORED
    range_window: int = Field(default=rules.RANGE_WINDOW, gt=0)
    range_margin_pct: Decimal = Field(default=rules.RANGE_MARGIN_PCT, ge=0)
    scan_window: int = Field(default=rules.SCAN_WINDOW, gt=0)
    level_swing_window: int = Field(default=rules.LEVEL_SWING_WINDOW, gt=0)
    proximity_pct: Decimal = Field(default=rules.PROXIMITY_PCT, ge=0)
    dedup_tolerance_pct: Decimal = Field(default=rules.DEDUP_TOLERANCE_PCT, ge=0)
    touch_tolerance_pct: Decimal = Field(default=rules.TOUCH_TOLERANCE_PCT, ge=0)
    volume_multiplier: Decimal = Field(default=rules.VOLUME_MULTIPLIER, ge=0)
    volume_bonus: Decimal = Field(default=rules.VOLUME_BONUS, ge=0)
    recency_weight: Decimal = Field(default=rules.RECENCY_WEIGHT, ge=0)
    max_levels_per_side: int = Field(default=rules.MAX_LEVELS_PER_SIDE, gt=0)

    # Moving averages reported as levels
    include_ma_levels: bool = False
    ma_level_periods: tuple[int, ...] = rules.MA_LEVEL_PERIODS
    ma_level_band_pct: Decimal = Field(default=rules.MA_LEVEL_BAND_PCT, ge=0)

    # Trend lines
    trend_points: int = Field(default=rules.TREND_POINTS, ge=2)

    @field_validator("ma_periods", "ma_level_periods")
    @classmethod
    def periods_positive(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        """Validate every period is a positive integer."""
        if any(p <= 0 for p in v):
            raise ValueError(f"periods must be positive, got {v}")
        return v


class AnalysisResult(BaseModel):
    """Output of one pipeline pass over one Series.

    Indicators, swings, levels and trend lines always come from the same
    `series`; a refresh replaces the whole value.
    """

    model_config = {"frozen": True}

    series: Series
    config: AnalysisConfig
    moving_averages: dict[int, tuple[Decimal | None, ...]] = Field(default_factory=dict)
    swings: SwingPoints = Field(default_factory=SwingPoints)
    levels: tuple[Level, ...] = ()
    trend_lines: tuple[TrendSegment, ...] = ()
    generation: int = 0

    @property
    def symbol(self) -> str:
        return self.series.symbol

    @property
    def supports(self) -> list[Level]:
        return [lv for lv in self.levels if lv.kind == LevelKind.SUPPORT]

    @property
    def resistances(self) -> list[Level]:
        return [lv for lv in self.levels if lv.kind == LevelKind.RESISTANCE]
