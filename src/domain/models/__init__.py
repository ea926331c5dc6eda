"""Domain models for the price chart analyzer."""

from src.domain.models.analysis import (
    AnalysisConfig,
    AnalysisResult,
    Level,
    SwingPoint,
    SwingPoints,
    TrendSegment,
)
from src.domain.models.enums import LevelKind, LevelSource, ResolverStrategy, SwingKind
from src.domain.models.market import PricePoint, QuotePayload, Series

__all__ = [
    # Enums
    "SwingKind",
    "LevelKind",
    "LevelSource",
    "ResolverStrategy",
    # Market data
    "PricePoint",
    "Series",
    "QuotePayload",
    # Analysis
    "SwingPoint",
    "SwingPoints",
    "Level",
    "TrendSegment",
    "AnalysisConfig",
    "AnalysisResult",
]
