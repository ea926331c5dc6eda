"""Environment configuration using pydantic-settings."""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain import rules
from src.domain.models.analysis import AnalysisConfig
from src.domain.models.enums import ResolverStrategy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Data source
    data_source: str = Field(
        default="yahoo",
        alias="DATA_SOURCE",
        description="Quote source: 'yahoo' (yfinance) or 'chart' (chart JSON API)",
    )
    history_days: int = Field(default=rules.HISTORY_DAYS, alias="HISTORY_DAYS")

    # Yahoo Finance
    yahoo_auto_adjust: bool = Field(default=True, alias="YAHOO_AUTO_ADJUST")

    # Chart API
    chart_api_url: str = Field(
        default="https://query1.finance.yahoo.com/v8/finance/chart",
        alias="CHART_API_URL",
    )
    chart_request_timeout: float = Field(default=10.0, alias="CHART_REQUEST_TIMEOUT")

    # Analysis - moving averages & swings
    ma_periods: list[int] = Field(
        default=list(rules.MA_PERIODS), alias="ANALYSIS_MA_PERIODS"
    )
    swing_window: int = Field(default=rules.SWING_WINDOW, alias="ANALYSIS_SWING_WINDOW")
    max_swing_points: int | None = Field(default=None, alias="ANALYSIS_MAX_SWING_POINTS")

    # Analysis - support/resistance
    level_strategy: ResolverStrategy = Field(
        default=ResolverStrategy.SWING_SCORED, alias="ANALYSIS_LEVEL_STRATEGY"
    )
    range_window: int = Field(default=rules.RANGE_WINDOW, alias="ANALYSIS_RANGE_WINDOW")
    range_margin_pct: Decimal = Field(
        default=rules.RANGE_MARGIN_PCT, alias="ANALYSIS_RANGE_MARGIN_PCT"
    )
    scan_window: int = Field(default=rules.SCAN_WINDOW, alias="ANALYSIS_SCAN_WINDOW")
    level_swing_window: int = Field(
        default=rules.LEVEL_SWING_WINDOW, alias="ANALYSIS_LEVEL_SWING_WINDOW"
    )
    proximity_pct: Decimal = Field(default=rules.PROXIMITY_PCT, alias="ANALYSIS_PROXIMITY_PCT")
    dedup_tolerance_pct: Decimal = Field(
        default=rules.DEDUP_TOLERANCE_PCT, alias="ANALYSIS_DEDUP_TOLERANCE_PCT"
    )
    touch_tolerance_pct: Decimal = Field(
        default=rules.TOUCH_TOLERANCE_PCT, alias="ANALYSIS_TOUCH_TOLERANCE_PCT"
    )
    volume_multiplier: Decimal = Field(
        default=rules.VOLUME_MULTIPLIER, alias="ANALYSIS_VOLUME_MULTIPLIER"
    )
    volume_bonus: Decimal = Field(default=rules.VOLUME_BONUS, alias="ANALYSIS_VOLUME_BONUS")
    recency_weight: Decimal = Field(
        default=rules.RECENCY_WEIGHT, alias="ANALYSIS_RECENCY_WEIGHT"
    )
    max_levels_per_side: int = Field(
        default=rules.MAX_LEVELS_PER_SIDE, alias="ANALYSIS_MAX_LEVELS_PER_SIDE"
    )
    include_ma_levels: bool = Field(default=False, alias="ANALYSIS_INCLUDE_MA_LEVELS")
    ma_level_periods: list[int] = Field(
        default=list(rules.MA_LEVEL_PERIODS), alias="ANALYSIS_MA_LEVEL_PERIODS"
    )
    ma_level_band_pct: Decimal = Field(
        default=rules.MA_LEVEL_BAND_PCT, alias="ANALYSIS_MA_LEVEL_BAND_PCT"
    )
    trend_points: int = Field(default=rules.TREND_POINTS, alias="ANALYSIS_TREND_POINTS")

    # Refresh
    refresh_interval_seconds: float = Field(
        default=rules.REFRESH_INTERVAL_SECONDS, alias="REFRESH_INTERVAL_SECONDS"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    def analysis_config(self) -> AnalysisConfig:
        """Build the domain analysis config from these settings."""
        return AnalysisConfig(
            ma_periods=tuple(self.ma_periods),
            swing_window=self.swing_window,
            max_swing_points=self.max_swing_points,
            level_strategy=self.level_strategy,
            range_window=self.range_window,
            range_margin_pct=self.range_margin_pct,
            scan_window=self.scan_window,
            level_swing_window=self.level_swing_window,
            proximity_pct=self.proximity_pct,
            dedup_tolerance_pct=self.dedup_tolerance_pct,
            touch_tolerance_pct=self.touch_tolerance_pct,
            volume_multiplier=self.volume_multiplier,
            volume_bonus=self.volume_bonus,
            recency_weight=self.recency_weight,
            max_levels_per_side=self.max_levels_per_side,
            include_ma_levels=self.include_ma_levels,
            ma_level_periods=tuple(self.ma_level_periods),
            ma_level_band_pct=self.ma_level_band_pct,
            trend_points=self.trend_points,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
