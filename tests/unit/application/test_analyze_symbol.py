"""Unit tests for the symbol analysis use case."""

from unittest.mock import AsyncMock

import httpx
import pytest

from src.adapters.data_feeds.chart_feed import YahooChartFeed
from src.application.queries.analyze_symbol import (
    SymbolAnalysis,
    SymbolAnalyzer,
    describe_failure,
)
from src.domain.interfaces.data_feed import QuoteFetchError
from src.domain.models.analysis import AnalysisConfig
from src.domain.models.market import QuotePayload
from src.domain.services.normalizer import EmptySeriesError

# 2024-01-02 14:30 UTC
START_EPOCH = 1704205800
DAY = 86400


def make_payload(symbol: str = "AAPL", closes=None) -> QuotePayload:
    """Create a test payload with one entry per day."""
    closes = closes if closes is not None else [100.0 + (i % 5) for i in range(40)]
    return QuotePayload(
        symbol=symbol,
        timestamps=[START_EPOCH + i * DAY for i in range(len(closes))],
        closes=closes,
        volumes=[1000] * len(closes),
    )


@pytest.fixture
def mock_data_feed():
    """Create mock data feed."""
    feed = AsyncMock()
    feed.source_name = "mock"
    feed.get_quotes.return_value = make_payload()
    return feed


@pytest.fixture
def analyzer(mock_data_feed):
    """Create analyzer with a short MA period."""
    return SymbolAnalyzer(
        data_feed=mock_data_feed,
        config=AnalysisConfig(ma_periods=(5,)),
        days=90,
    )


class TestSymbolAnalysis:
    """Tests for SymbolAnalysis dataclass."""

    def test_failed_analysis(self):
        """A result-less analysis has not succeeded."""
        analysis = SymbolAnalysis(symbol="AAPL", error="boom")
        assert analysis.succeeded is False


class TestDescribeFailure:
    """Tests for user-facing error messages."""

    def test_invalid_symbol(self):
        """Invalid symbols suggest alternatives."""
        exc = QuoteFetchError("XXXX", "not found", invalid_symbol=True)
        message = describe_failure("XXXX", exc)
        assert message == (
            '"XXXX" is not a valid stock symbol. '
            "Please try a different symbol like AAPL, MSFT, or GOOGL."
        )

    def test_fetch_failure(self):
        """Transport failures carry the reason."""
        exc = QuoteFetchError("AAPL", "HTTP error! status: 500")
        assert describe_failure("AAPL", exc) == (
            "Unable to fetch stock data for AAPL: HTTP error! status: 500"
        )

    def test_empty_series(self):
        """Zero usable points has its own message."""
        assert describe_failure("AAPL", EmptySeriesError("AAPL")) == (
            "No valid price data found for AAPL."
        )

    def test_other_error(self):
        """Anything else is reported generically."""
        assert describe_failure("AAPL", ValueError("bad")) == "Analysis failed for AAPL: bad"


class TestSymbolAnalyzer:
    """Tests for SymbolAnalyzer."""

    async def test_successful_analysis(self, analyzer, mock_data_feed):
        """Analysis normalizes quotes and runs the pipeline."""
        analysis = await analyzer.analyze("AAPL", generation=3)

        assert analysis.succeeded is True
        assert analysis.error is None
        assert analysis.generation == 3
        assert analysis.result.generation == 3
        assert len(analysis.result.series) == 40
        assert list(analysis.result.moving_averages) == [5]
        mock_data_feed.get_quotes.assert_called_once_with("AAPL", days=90)

    async def test_symbol_normalized(self, analyzer, mock_data_feed):
        """Symbols are trimmed and upper-cased."""
        analysis = await analyzer.analyze("  aapl ")

        assert analysis.symbol == "AAPL"
        mock_data_feed.get_quotes.assert_called_once_with("AAPL", days=90)

    async def test_blank_symbol(self, analyzer, mock_data_feed):
        """A blank symbol never reaches the feed."""
        analysis = await analyzer.analyze("   ")

        assert analysis.error == "Please enter a stock symbol."
        mock_data_feed.get_quotes.assert_not_called()

    async def test_invalid_symbol(self, analyzer, mock_data_feed):
        """Unknown symbols produce a message, not an exception."""
        mock_data_feed.get_quotes.side_effect = QuoteFetchError(
            "ZZZZ", "Invalid symbol or no data available", invalid_symbol=True
        )

        analysis = await analyzer.analyze("ZZZZ", generation=2)

        assert analysis.succeeded is False
        assert analysis.result is None
        assert analysis.generation == 2
        assert "is not a valid stock symbol" in analysis.error

    async def test_no_usable_points(self, analyzer, mock_data_feed):
        """A payload of gaps stops before the pipeline."""
        mock_data_feed.get_quotes.return_value = make_payload(closes=[None, None, None])

        analysis = await analyzer.analyze("AAPL")

        assert analysis.result is None
        assert analysis.error == "No valid price data found for AAPL."

    async def test_out_of_range_timestamp(self, analyzer, mock_data_feed):
        """An epoch beyond the calendar drops that entry instead of failing the cycle."""
        mock_data_feed.get_quotes.return_value = QuotePayload(
            symbol="AAPL", timestamps=[1e20, START_EPOCH], closes=[1.0, 2.0]
        )

        analysis = await analyzer.analyze("AAPL")

        assert analysis.succeeded is True
        assert len(analysis.result.series) == 1

    async def test_malformed_chart_body(self):
        """A wrongly shaped chart body becomes a message, not an exception."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"chart": "oops"})

        feed = YahooChartFeed(
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            base_url="https://chart.test/v8/finance/chart",
        )
        analysis = await SymbolAnalyzer(data_feed=feed, days=90).analyze("AAPL")

        assert analysis.succeeded is False
        assert analysis.error == "Unable to fetch stock data for AAPL: Malformed chart response"

    async def test_default_config(self, mock_data_feed):
        """Defaults are used when no config is given."""
        analyzer = SymbolAnalyzer(data_feed=mock_data_feed)

        assert analyzer.config == AnalysisConfig()
        analysis = await analyzer.analyze("AAPL")
        assert analysis.succeeded is True
        mock_data_feed.get_quotes.assert_called_once_with("AAPL", days=365)
