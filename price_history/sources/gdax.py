"""GDAX (Coinbase Exchange) historical candles adapter."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, NoReturn, Optional

import requests
from pydantic import ValidationError

from ..config import DEFAULT_API_URL, DEFAULT_PRODUCT_ID
from ..ingestion.partitioner import granularity_for, partition
from ..models.candle import RawCandle
from ..models.interval import CandleGranularity, SupportedInterval, TimeRange
from ..models.payloads import GdaxErrorPayload, parse_candle_rows
from .base import (
    ExchangeReportedError,
    HistoricalSource,
    RequestBuildError,
    ResponseDecodeError,
    TransportError,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class CandleRequest:
    """Fully prepared candles request."""

    url: str
    params: Dict[str, str]


def filter_candles(time_range: TimeRange, candles: List[RawCandle]) -> List[RawCandle]:
    """Keep candles whose timestamp lies within the requested window.

    The exchange may answer with more rows than the requested window; rows
    on either boundary are kept.
    """
    filtered = [candle for candle in candles if time_range.contains(candle.timestamp)]

    dropped = len(candles) - len(filtered)
    if dropped:
        logger.debug(f"Dropped {dropped} candles outside {time_range.start} - {time_range.end}")
    return filtered


class GdaxHistoricalSource(HistoricalSource):
    """Historical candles from the GDAX public REST API."""

    def __init__(
        self,
        product_id: str = DEFAULT_PRODUCT_ID,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GDAX source.

        Args:
            product_id: Product to query (e.g., "BTC-USD")
            api_url: Exchange base URL
            timeout: Per-request timeout in seconds (None keeps the transport default)
            session: Optional HTTP session for testing
        """
        super().__init__(product_id)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/products/{self.product_id}/candles"

    def build_request(
        self, granularity: CandleGranularity, start: datetime, end: datetime
    ) -> CandleRequest:
        """Build the candles request for one window.

        Ex: https://api.gdax.com/products/BTC-USD/candles?granularity=3600&start=2017-01-15&end=2017-01-16

        Raises:
            RequestBuildError: If the endpoint URL is malformed
        """
        params = {
            "granularity": str(int(granularity)),
            "start": start.strftime(DATE_FORMAT),
            "end": end.strftime(DATE_FORMAT),
        }
        try:
            prepared = requests.Request("GET", self.endpoint, params=params).prepare()
        except requests.exceptions.RequestException as e:
            logger.error(f"Could not build GDAX historical URL from {self.endpoint}: {e}")
            raise RequestBuildError(f"Invalid GDAX endpoint {self.endpoint}: {e}") from e

        return CandleRequest(url=prepared.url, params=params)

    def fetch_candles(
        self,
        interval: SupportedInterval,
        now: Optional[datetime] = None,
    ) -> List[RawCandle]:
        """Fetch every candle of the interval, one request per window.

        Windows are requested sequentially, most recent first. Any failure
        aborts the whole fetch.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        granularity = granularity_for(interval)
        candles: List[RawCandle] = []
        for time_range in partition(interval, now):
            request = self.build_request(granularity, time_range.start, time_range.end)
            candles.extend(self._fetch_range(request, time_range))

        return candles

    def _fetch_range(self, request: CandleRequest, time_range: TimeRange) -> List[RawCandle]:
        """Issue one request and return its candles filtered to the window."""
        logger.info(f"Querying {request.url}")
        try:
            response = self.session.get(request.url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Could not reach {request.url}: {e}")
            raise TransportError("Failed to reach GDAX API", status_code=500) from e

        try:
            if response.status_code == requests.codes.ok:
                candles = self._decode_candles(response)
                return filter_candles(time_range, candles)
            self._raise_exchange_error(response)
        finally:
            response.close()

    def _decode_candles(self, response: requests.Response) -> List[RawCandle]:
        try:
            return parse_candle_rows(response.json())
        except (ValueError, OverflowError, ValidationError) as e:
            logger.error("Could not decode GDAX response")
            raise ResponseDecodeError(
                f"Could not decode GDAX candles: {e}", status_code=500
            ) from e

    def _raise_exchange_error(self, response: requests.Response) -> NoReturn:
        """Decode an error body and raise it as a typed error."""
        try:
            payload = GdaxErrorPayload.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(
                f"Could not decode GDAX error response with code {response.status_code}"
            )
            raise ResponseDecodeError(f"Could not decode GDAX error response: {e}") from e

        logger.error(f"GDAX returned {response.status_code}: {payload.message}")
        raise ExchangeReportedError(payload.message, http_status=response.status_code)
