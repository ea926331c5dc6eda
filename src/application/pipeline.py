"""Analysis pipeline - one pass from Series to AnalysisResult.

Stages run in a fixed order over the same Series:

1. Moving averages for every configured period
2. Swing points (display and trend lines)
3. Support/resistance levels
4. Trend lines

The result is a single immutable value; nothing is carried over from a
previous pass.
"""

from src.domain.models.analysis import AnalysisConfig, AnalysisResult
from src.domain.models.market import Series
from src.domain.services.levels import SupportResistanceResolver
from src.domain.services.moving_average import compute_moving_averages
from src.domain.services.swings import find_swing_points
from src.domain.services.trendlines import build_trend_lines


def run_analysis(
    series: Series,
    config: AnalysisConfig | None = None,
    generation: int = 0,
) -> AnalysisResult:
    """Run the full analysis pipeline over a series.

    Degenerate input (short or single-point series) yields empty or
    absent outputs rather than errors.

    Args:
        series: Normalized price series
        config: Analysis tunables (defaults if omitted)
        generation: Request generation that produced the series

    Returns:
        AnalysisResult with indicators, swings, levels and trend lines
    """
    config = config or AnalysisConfig()
    prices = series.prices

    periods = set(config.ma_periods)
    if config.include_ma_levels:
        periods |= set(config.ma_level_periods)
    moving_averages = {
        period: tuple(values)
        for period, values in compute_moving_averages(prices, periods).items()
    }

    swings = find_swing_points(series, config.swing_window, config.max_swing_points)
    levels = SupportResistanceResolver(config).resolve(series, moving_averages)
    trend_lines = build_trend_lines(swings, len(series), config.trend_points)

    return AnalysisResult(
        series=series,
        config=config,
        moving_averages=moving_averages,
        swings=swings,
        levels=levels,
        trend_lines=trend_lines,
        generation=generation,
    )
