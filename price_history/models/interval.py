"""Lookback intervals, candle granularities and request time ranges."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


class SupportedInterval(str, Enum):
    """Lookback intervals a caller may request."""

    TWO_YEAR = "TWOYEAR"
    YEAR = "YEAR"
    SIX_MONTH = "SIXMONTH"
    THREE_MONTH = "THREEMONTH"
    MONTH = "MONTH"
    WEEK = "WEEK"
    DAY = "DAY"


class CandleGranularity(int, Enum):
    """Candle sizes accepted by the exchange, in seconds."""

    ONE_DAY = 86400
    SIX_HOUR = 21600
    ONE_HOUR = 3600
    FIFTEEN_MINUTE = 900
    FIVE_MINUTE = 300
    ONE_MINUTE = 60


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeRange:
    """Window of one exchange request, both ends inclusive."""

    start: datetime
    end: datetime

    def __post_init__(self):
        start = to_utc(self.start)
        end = to_utc(self.end)
        if start > end:
            raise ValueError(f"TimeRange start ({start}) must not be after end ({end})")
        # frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, timestamp: int) -> bool:
        """Check whether an epoch-seconds timestamp lies within the range."""
        return int(self.start.timestamp()) <= timestamp <= int(self.end.timestamp())
