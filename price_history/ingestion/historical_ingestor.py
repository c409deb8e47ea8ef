"""Historical price series retrieval."""

import logging
from datetime import datetime
from typing import Optional

from ..models.candle import PriceSeries
from ..sources.base import HistoricalSource, InvalidIntervalError, parse_interval
from .normalizer import normalize

logger = logging.getLogger(__name__)


class HistoricalIngestor:
    """Builds a price series for a lookback interval."""

    def __init__(self, source: HistoricalSource):
        """Initialize historical ingestor.

        Args:
            source: Source used to fetch raw candles
        """
        self.source = source

    def get_historical_series(
        self, interval_label: str, now: Optional[datetime] = None
    ) -> PriceSeries:
        """Fetch the price series covering an interval, most recent window first.

        Args:
            interval_label: Interval label, case-insensitive (e.g., "week")
            now: Reference time (defaults to the current UTC time)

        Returns:
            List of PricePoint

        Raises:
            InvalidIntervalError: If the label is unsupported (no request is made)
            HistoricalDataError: If fetching fails
        """
        try:
            interval = parse_interval(interval_label)
        except InvalidIntervalError as e:
            logger.warning(f"Rejected interval request: {e.message}")
            raise

        candles = self.source.fetch_candles(interval, now=now)
        logger.info(f"Found {len(candles)} buckets from GDAX")

        return normalize(candles)
