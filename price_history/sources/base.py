"""Base classes and errors for historical price sources."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..models.candle import RawCandle
from ..models.interval import SupportedInterval


class HistoricalDataError(Exception):
    """Base exception for historical data errors.

    Carries a human readable message and an optional HTTP-style status code
    that callers may use when translating the failure into a response.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.status_code}


class InvalidIntervalError(HistoricalDataError):
    """Requested interval label is not supported."""

    def __init__(self, message: str, status_code: Optional[int] = 400):
        super().__init__(message, status_code)


class TransportError(HistoricalDataError):
    """Exchange endpoint could not be reached."""

    pass


class ResponseDecodeError(HistoricalDataError):
    """Exchange response body could not be decoded."""

    pass


class ExchangeReportedError(HistoricalDataError):
    """Exchange answered with a well-formed error payload."""

    def __init__(self, message: str, http_status: Optional[int] = None):
        super().__init__(message)
        self.http_status = http_status


class RequestBuildError(HistoricalDataError):
    """Request URL could not be constructed."""

    pass


def parse_interval(label: str) -> SupportedInterval:
    """Parse an interval label into a SupportedInterval.

    Labels are case-insensitive: "week", "Week" and "WEEK" are equivalent.

    Args:
        label: Interval label supplied by the caller

    Returns:
        SupportedInterval enum value

    Raises:
        InvalidIntervalError: If the label is not a supported interval
    """
    normalized = (label or "").strip().upper()
    try:
        return SupportedInterval(normalized)
    except ValueError:
        raise InvalidIntervalError(
            f"Please provide a valid interval; {normalized} is invalid"
        ) from None


class HistoricalSource(ABC):
    """Base class for historical candle sources."""

    def __init__(self, product_id: str = "BTC-USD"):
        """Initialize historical source."""
        self.product_id = product_id

    @abstractmethod
    def fetch_candles(
        self,
        interval: SupportedInterval,
        now: Optional[datetime] = None,
    ) -> List[RawCandle]:
        """Fetch every candle covering the lookback interval.

        Args:
            interval: Lookback interval to cover
            now: Reference time (defaults to the current UTC time)

        Returns:
            Raw candles in request order, most recent sub-range first

        Raises:
            HistoricalDataError: If any request fails
        """
        pass
