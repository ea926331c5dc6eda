"""Symbol analysis use case.

This is an application layer use case that coordinates the data feed,
the normalizer and the analysis pipeline for one ticker.
"""

from dataclasses import dataclass, field
from datetime import datetime

from src.application.pipeline import run_analysis
from src.domain.interfaces.data_feed import DataFeed, QuoteFetchError
from src.domain.models.analysis import AnalysisConfig, AnalysisResult
from src.domain.rules import HISTORY_DAYS
from src.domain.services.normalizer import EmptySeriesError, normalize_quotes
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SymbolAnalysis:
    """Result of analyzing a single symbol.

    Exactly one of `result` and `error` is set: a failed cycle never
    carries a partial result.
    """

    symbol: str
    result: AnalysisResult | None = None
    error: str | None = None
    generation: int = 0
    analyzed_at: datetime = field(default_factory=datetime.now)

    @property
    def succeeded(self) -> bool:
        """Check if the analysis produced a result."""
        return self.result is not None and self.error is None


def describe_failure(symbol: str, exc: Exception) -> str:
    """Plain-language message for a failed analysis cycle."""
    if isinstance(exc, QuoteFetchError) and exc.invalid_symbol:
        return (
            f'"{symbol}" is not a valid stock symbol. '
            "Please try a different symbol like AAPL, MSFT, or GOOGL."
        )
    if isinstance(exc, QuoteFetchError):
        return f"Unable to fetch stock data for {symbol}: {exc.reason}"
    if isinstance(exc, EmptySeriesError):
        return f"No valid price data found for {symbol}."
    return f"Analysis failed for {symbol}: {exc}"


class SymbolAnalyzer:
    """Fetches, normalizes and analyzes one symbol per call.

    Coordinates:
    - Data feed for raw quotes
    - Normalizer for the Series
    - Pipeline for indicators, swings, levels and trend lines
    """

    def __init__(
        self,
        data_feed: DataFeed,
        config: AnalysisConfig | None = None,
        days: int = HISTORY_DAYS,
    ) -> None:
        """Initialize the analyzer.

        Args:
            data_feed: Source of raw quotes
            config: Analysis tunables (defaults if omitted)
            days: Calendar days of history to request
        """
        self._data_feed = data_feed
        self._config = config or AnalysisConfig()
        self._days = days

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    async def analyze(self, symbol: str, generation: int = 0) -> SymbolAnalysis:
        """Run one full analysis cycle for a symbol.

        Input errors (unknown symbol, empty payload, zero usable points)
        stop the cycle before the pipeline and are reported as a message.

        Args:
            symbol: Ticker to analyze
            generation: Request generation tag for the result

        Returns:
            SymbolAnalysis with either a result or an error message
        """
        symbol = symbol.strip().upper()
        if not symbol:
            return SymbolAnalysis(
                symbol=symbol,
                error="Please enter a stock symbol.",
                generation=generation,
            )

        try:
            payload = await self._data_feed.get_quotes(symbol, days=self._days)
            series = normalize_quotes(payload)
            result = run_analysis(series, self._config, generation=generation)
        except (QuoteFetchError, EmptySeriesError, ValueError) as e:
            logger.warning(
                "analysis.failed",
                symbol=symbol,
                source=self._data_feed.source_name,
                error=str(e),
            )
            return SymbolAnalysis(
                symbol=symbol,
                error=describe_failure(symbol, e),
                generation=generation,
            )

        logger.info(
            "analysis.completed",
            symbol=symbol,
            points=len(series),
            levels=len(result.levels),
            trend_lines=len(result.trend_lines),
            generation=generation,
        )
        return SymbolAnalysis(symbol=symbol, result=result, generation=generation)
