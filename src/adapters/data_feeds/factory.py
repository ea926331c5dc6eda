"""Data feed selection."""

from src.adapters.data_feeds.chart_feed import YahooChartFeed
from src.adapters.data_feeds.yahoo_feed import YahooDataFeed
from src.domain.interfaces.data_feed import DataFeed
from src.infrastructure.config import Settings, get_settings


def create_data_feed(settings: Settings | None = None, source: str | None = None) -> DataFeed:
    """Create the configured data feed.

    Args:
        settings: Application settings (cached settings if omitted)
        source: Override for settings.data_source ('yahoo' or 'chart')

    Returns:
        DataFeed implementation

    Raises:
        ValueError: If the source name is unknown
    """
    settings = settings or get_settings()
    name = (source or settings.data_source).lower()

    if name == "yahoo":
        return YahooDataFeed(auto_adjust=settings.yahoo_auto_adjust)
    if name == "chart":
        return YahooChartFeed(
            base_url=settings.chart_api_url,
            timeout=settings.chart_request_timeout,
        )
    raise ValueError(f"Unknown data source: {source or settings.data_source}")
