"""End-to-end tests for historical series retrieval.

HTTP calls are mocked at the session level:
HistoricalIngestor -> GdaxHistoricalSource -> requests.Session
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from price_history.ingestion.historical_ingestor import HistoricalIngestor
from price_history.models.candle import PricePoint, RawCandle
from price_history.models.interval import SupportedInterval
from price_history.sources.base import (
    HistoricalSource,
    InvalidIntervalError,
    TransportError,
    parse_interval,
)
from price_history.sources.gdax import GdaxHistoricalSource
from tests.conftest import FIXED_NOW, create_candle_row, create_mock_response, epoch, utc


class TestParseInterval:
    """Tests for interval label validation."""

    @pytest.mark.parametrize("label", ["week", "WEEK", "Week", "  week "])
    def test_case_insensitive(self, label):
        assert parse_interval(label) == SupportedInterval.WEEK

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("twoyear", SupportedInterval.TWO_YEAR),
            ("year", SupportedInterval.YEAR),
            ("sixmonth", SupportedInterval.SIX_MONTH),
            ("threemonth", SupportedInterval.THREE_MONTH),
            ("month", SupportedInterval.MONTH),
            ("day", SupportedInterval.DAY),
        ],
    )
    def test_all_labels(self, label, expected):
        assert parse_interval(label) == expected

    @pytest.mark.parametrize("label", ["bogus", "", "1y", None])
    def test_rejects_unknown(self, label):
        with pytest.raises(InvalidIntervalError) as exc_info:
            parse_interval(label)

        assert exc_info.value.status_code == 400


class TestHistoricalIngestorE2E:
    """End-to-end tests for the complete retrieval flow."""

    def test_week_series(self, source, mock_session, caplog):
        """Successful week fetch returns normalized points in fetch order."""
        anchor = utc(2025, 1, 16)
        mock_session.get.side_effect = [
            create_mock_response(payload=[create_candle_row(epoch(anchor) - 3600, 0.1)]),
            create_mock_response(payload=[create_candle_row(epoch(anchor) - 3 * 86400, 42000.5)]),
            create_mock_response(payload=[create_candle_row(epoch(anchor) - 6 * 86400, 41000.0)]),
        ]
        ingestor = HistoricalIngestor(source)
        caplog.set_level(logging.INFO)

        # Execute
        series = ingestor.get_historical_series("week", now=FIXED_NOW)

        # Verify
        assert series == [
            PricePoint(timestamp=epoch(anchor) - 3600, price="0.1"),
            PricePoint(timestamp=epoch(anchor) - 3 * 86400, price="42000.5"),
            PricePoint(timestamp=epoch(anchor) - 6 * 86400, price="41000"),
        ]
        assert mock_session.get.call_count == 3
        assert "Found 3 buckets from GDAX" in caplog.text

    def test_bogus_interval_makes_no_request(self, source, mock_session):
        """Invalid labels are rejected before any request is built."""
        ingestor = HistoricalIngestor(source)

        with patch.object(GdaxHistoricalSource, "build_request") as mock_build:
            with pytest.raises(InvalidIntervalError) as exc_info:
                ingestor.get_historical_series("bogus")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Please provide a valid interval; BOGUS is invalid"
        mock_build.assert_not_called()
        mock_session.get.assert_not_called()

    def test_transport_failure_returns_no_series(self, source, mock_session):
        """Failure on the second of three requests discards the first result."""
        mock_session.get.side_effect = [
            create_mock_response(payload=[create_candle_row(epoch(utc(2025, 1, 15)), 1.0)]),
            requests.exceptions.ConnectionError("unreachable"),
        ]
        ingestor = HistoricalIngestor(source)

        with pytest.raises(TransportError) as exc_info:
            ingestor.get_historical_series("WEEK", now=FIXED_NOW)

        assert exc_info.value.status_code == 500
        assert exc_info.value.to_dict() == {"error": "Failed to reach GDAX API", "code": 500}

    def test_source_errors_propagate_unchanged(self):
        source = MagicMock(spec=HistoricalSource)
        error = TransportError("Failed to reach GDAX API", status_code=500)
        source.fetch_candles.side_effect = error
        ingestor = HistoricalIngestor(source)

        with pytest.raises(TransportError) as exc_info:
            ingestor.get_historical_series("day")

        assert exc_info.value is error

    def test_delegates_parsed_interval(self):
        source = MagicMock(spec=HistoricalSource)
        source.fetch_candles.return_value = [RawCandle(timestamp=10, price=1.5)]
        ingestor = HistoricalIngestor(source)

        series = ingestor.get_historical_series("twoYear", now=FIXED_NOW)

        source.fetch_candles.assert_called_once_with(SupportedInterval.TWO_YEAR, now=FIXED_NOW)
        assert series == [PricePoint(timestamp=10, price="1.5")]
