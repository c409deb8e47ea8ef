"""Shared test fixtures and utilities."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from price_history.sources.gdax import GdaxHistoricalSource

# Rounded and advanced by one day this becomes 2025-01-16 00:00 UTC
FIXED_NOW = datetime(2025, 1, 15, 13, 45, 30, tzinfo=timezone.utc)


def utc(*args) -> datetime:
    """Build a UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


def epoch(value: datetime) -> int:
    return int(value.timestamp())


def create_mock_response(status_code=200, payload=None, json_error=None) -> MagicMock:
    """Create a mock HTTP response.

    Args:
        status_code: HTTP status code
        payload: Decoded JSON body returned by ``json()``
        json_error: Exception raised by ``json()`` instead of returning payload

    Returns:
        MagicMock mimicking requests.Response
    """
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def create_candle_row(timestamp: int, price: float) -> list:
    """Build a wire-format candle row ``[time, price, high, open, close, volume]``."""
    return [timestamp, price, price + 10.0, price - 5.0, price + 2.5, 1.25]


@pytest.fixture
def mock_session():
    """Create a mock requests.Session."""
    return MagicMock()


@pytest.fixture
def source(mock_session):
    """Create a GDAX source backed by the mock session."""
    return GdaxHistoricalSource(session=mock_session)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove configuration variables leaking in from the environment."""
    for name in [
        "GDAX_API_URL",
        "GDAX_PRODUCT_ID",
        "GDAX_REQUEST_TIMEOUT",
        "HISTORY_INTERVAL",
    ]:
        monkeypatch.delenv(name, raising=False)
