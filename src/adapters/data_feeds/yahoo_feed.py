"""Yahoo Finance data feed adapter (yfinance)."""

import asyncio
from datetime import date, timedelta

import yfinance as yf

from src.domain.interfaces.data_feed import DataFeed, QuoteFetchError
from src.domain.models.market import QuotePayload
from src.infrastructure.config import get_settings
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


class YahooDataFeed(DataFeed):
    """Yahoo Finance data feed implementation.

    yfinance is synchronous, so downloads run in the default executor.
    Gaps in the returned frame (NaN closes) are passed through untouched;
    the normalizer drops them.
    """

    def __init__(self, auto_adjust: bool | None = None):
        """Initialize Yahoo Finance feed.

        Args:
            auto_adjust: Split/dividend adjust prices (defaults to settings)
        """
        self._auto_adjust = (
            auto_adjust if auto_adjust is not None else get_settings().yahoo_auto_adjust
        )

    @property
    def source_name(self) -> str:
        """Return data source name."""
        return "yahoo"

    async def get_quotes(
        self,
        symbol: str,
        days: int = 365,
    ) -> QuotePayload:
        """Fetch daily quotes from Yahoo Finance.

        Args:
            symbol: Ticker (e.g., 'AAPL')
            days: Calendar days of history

        Returns:
            QuotePayload, oldest first.

        Raises:
            QuoteFetchError: If the download fails or returns no rows
        """
        end = date.today()
        start = end - timedelta(days=days)

        loop = asyncio.get_running_loop()
        try:
            df = await loop.run_in_executor(
                None,
                lambda: self._fetch_history(symbol, start, end),
            )
        except Exception as e:
            logger.warning("yahoo.fetch_failed", symbol=symbol, error=str(e))
            raise QuoteFetchError(symbol, f"Yahoo download failed: {e}") from e

        if df is None or df.empty:
            raise QuoteFetchError(symbol, "No data from Yahoo", invalid_symbol=True)

        payload = self._to_payload(symbol, df)
        logger.debug("yahoo.fetched", symbol=symbol, rows=len(payload))
        return payload

    def _fetch_history(self, symbol: str, start: date, end: date):
        """Synchronous Yahoo Finance fetch."""
        ticker = yf.Ticker(symbol)
        return ticker.history(
            start=start,
            end=end + timedelta(days=1),  # end is exclusive
            interval="1d",
            auto_adjust=self._auto_adjust,
        )

    def _to_payload(self, symbol: str, df) -> QuotePayload:
        """Convert a yfinance history frame to parallel arrays."""
        has_volume = "Volume" in df.columns
        return QuotePayload(
            symbol=symbol,
            timestamps=[idx.date() if hasattr(idx, "date") else idx for idx in df.index],
            closes=[float(v) for v in df["Close"]],
            highs=[float(v) for v in df["High"]] if "High" in df.columns else None,
            lows=[float(v) for v in df["Low"]] if "Low" in df.columns else None,
            volumes=[float(v) for v in df["Volume"]] if has_volume else None,
            source=self.source_name,
        )
