"""Pytest configuration and fixtures for all tests."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from src.infrastructure.config import get_settings


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def base_date():
    """First date of generated test series."""
    return date(2026, 1, 1)


@pytest.fixture
def zigzag_prices():
    """Prices alternating between peaks and troughs (rising lows)."""
    return [Decimal(p) for p in ("110", "100", "110", "104", "110", "108", "110")]


@pytest.fixture
def trading_days(base_date):
    """Consecutive calendar days starting at base_date."""
    return [base_date + timedelta(days=i) for i in range(400)]
