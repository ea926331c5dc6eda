"""Data feed interface (port) - defines how to fetch raw quotes."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.models.market import QuotePayload


class QuoteFetchError(Exception):
    """Raised when a feed cannot deliver quotes for a symbol."""

    def __init__(self, symbol: str, reason: str, invalid_symbol: bool = False):
        self.symbol = symbol
        self.reason = reason
        self.invalid_symbol = invalid_symbol
        super().__init__(f"{symbol}: {reason}")


class DataFeed(ABC):
    """Abstract interface for daily quote sources.

    This is a port in Clean Architecture - defines what the analysis
    needs without specifying implementation details.
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return the name of this data source (e.g., 'yahoo', 'chart')."""
        ...

    @abstractmethod
    async def get_quotes(
        self,
        symbol: str,
        days: int = 365,
    ) -> "QuotePayload":
        """Fetch daily quotes for a symbol.

        Args:
            symbol: Ticker (e.g., 'AAPL')
            days: Calendar days of history to fetch

        Returns:
            Raw parallel-array payload, possibly containing gaps.

        Raises:
            QuoteFetchError: Unknown symbol, empty payload or transport failure
        """
        ...
