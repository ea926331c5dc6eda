"""Yahoo chart JSON API data feed adapter (httpx).

Response shape (only the parts we read):

    {"chart": {"result": [{"timestamp": [...],
                           "indicators": {"quote": [{"close": [...],
                                                     "high": [...],
                                                     "low": [...],
                                                     "volume": [...]}]}}],
               "error": null}}

Closes may contain nulls for non-trading gaps.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import quote

import httpx

from src.domain.interfaces.data_feed import DataFeed, QuoteFetchError
from src.domain.models.market import QuotePayload
from src.infrastructure.config import get_settings
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)

_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; price-chart-analyzer)"}


def parse_chart_response(data: dict[str, Any], symbol: str) -> QuotePayload:
    """Extract parallel quote arrays from a chart API response.

    Args:
        data: Decoded JSON body
        symbol: Requested ticker

    Returns:
        QuotePayload with gaps preserved as None

    Raises:
        QuoteFetchError: If the symbol is unknown, no prices are present
            or the body does not have the chart shape
    """
    malformed = QuoteFetchError(symbol, "Malformed chart response")

    chart = data.get("chart") or {}
    if not isinstance(chart, dict):
        raise malformed
    results = chart.get("result") or []
    if not isinstance(results, list):
        raise malformed
    if not results:
        error = chart.get("error") or {}
        if not isinstance(error, dict):
            raise malformed
        reason = error.get("description") or "Invalid symbol or no data available"
        raise QuoteFetchError(symbol, reason, invalid_symbol=True)

    result = results[0] or {}
    if not isinstance(result, dict):
        raise malformed
    indicators = result.get("indicators") or {}
    if not isinstance(indicators, dict):
        raise malformed
    quotes = indicators.get("quote") or [{}]
    if not isinstance(quotes, list) or not isinstance(quotes[0] or {}, dict):
        raise malformed
    timestamps = result.get("timestamp")
    prices = quotes[0] or {}

    if not timestamps or not prices.get("close"):
        raise QuoteFetchError(symbol, "No price data available for this symbol")
    if not isinstance(timestamps, list) or not isinstance(prices["close"], list):
        raise malformed

    return QuotePayload(
        symbol=symbol,
        timestamps=timestamps,
        closes=prices["close"],
        highs=prices.get("high"),
        lows=prices.get("low"),
        volumes=prices.get("volume"),
        source="chart",
    )


class YahooChartFeed(DataFeed):
    """Chart JSON API feed.

    Calls the chart endpoint directly, without the yfinance dependency
    chain in the request path.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize the chart feed.

        Args:
            client: Shared client (a short-lived one is created per request if omitted)
            base_url: Chart endpoint (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        settings = get_settings()
        self._client = client
        self._base_url = (base_url or settings.chart_api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.chart_request_timeout

    @property
    def source_name(self) -> str:
        """Return data source name."""
        return "chart"

    async def get_quotes(
        self,
        symbol: str,
        days: int = 365,
    ) -> QuotePayload:
        """Fetch daily quotes from the chart API.

        Args:
            symbol: Ticker (e.g., 'AAPL')
            days: Calendar days of history

        Returns:
            QuotePayload, oldest first.

        Raises:
            QuoteFetchError: Transport failure, HTTP error or unusable body
        """
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=days)
        url = f"{self._base_url}/{quote(symbol, safe='')}"
        params = {
            "period1": int(start.timestamp()),
            "period2": int(end.timestamp()),
            "interval": "1d",
        }

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, headers=_HEADERS)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url, params=params, headers=_HEADERS)
        except httpx.HTTPError as e:
            logger.warning("chart.request_failed", symbol=symbol, error=str(e))
            raise QuoteFetchError(symbol, f"Unable to fetch quotes: {e}") from e

        # Unknown symbols come back as 404 with a chart.error body
        if response.status_code == 404:
            return parse_chart_response(self._json(response, symbol), symbol)
        if response.is_error:
            logger.warning("chart.http_error", symbol=symbol, status=response.status_code)
            raise QuoteFetchError(symbol, f"HTTP error! status: {response.status_code}")

        payload = parse_chart_response(self._json(response, symbol), symbol)
        logger.debug("chart.fetched", symbol=symbol, rows=len(payload))
        return payload

    @staticmethod
    def _json(response: httpx.Response, symbol: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise QuoteFetchError(symbol, "Malformed chart response") from e
        if not isinstance(data, dict):
            raise QuoteFetchError(symbol, "Malformed chart response")
        return data
