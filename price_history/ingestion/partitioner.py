"""Lookback interval partitioning.

The exchange returns at most ``MAX_CANDLES_PER_REQUEST`` candles per request,
so a lookback interval is split into one or more request windows. Each
interval is described by an ``IntervalRule`` in ``INTERVAL_RULES``; the
evaluator in ``partition`` is the same for every interval.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from dateutil.relativedelta import relativedelta

from ..models.interval import CandleGranularity, SupportedInterval, TimeRange, to_utc

logger = logging.getLogger(__name__)

MAX_CANDLES_PER_REQUEST = 300


@dataclass(frozen=True)
class IntervalRule:
    """How an interval is requested from the exchange.

    Attributes:
        granularity: Candle size used for every request of the interval
        lookback: Total span covered, ending at rounded-now
        step: Fixed window size; windows walk back from now while their start
            is at or after the lookback start
        windows: Explicit window sizes, most recent first (used when step is None)
    """

    granularity: CandleGranularity
    lookback: relativedelta
    step: Optional[relativedelta] = None
    windows: Tuple[relativedelta, ...] = ()


INTERVAL_RULES: Mapping[SupportedInterval, IntervalRule] = MappingProxyType(
    {
        SupportedInterval.TWO_YEAR: IntervalRule(
            granularity=CandleGranularity.ONE_DAY,
            lookback=relativedelta(years=2),
            step=relativedelta(months=6),
        ),
        SupportedInterval.YEAR: IntervalRule(
            granularity=CandleGranularity.ONE_DAY,
            lookback=relativedelta(years=1),
            step=relativedelta(months=6),
        ),
        SupportedInterval.SIX_MONTH: IntervalRule(
            granularity=CandleGranularity.ONE_DAY,
            lookback=relativedelta(months=6),
            windows=(relativedelta(months=6),),
        ),
        SupportedInterval.THREE_MONTH: IntervalRule(
            granularity=CandleGranularity.ONE_DAY,
            lookback=relativedelta(months=3),
            windows=(relativedelta(months=3),),
        ),
        SupportedInterval.MONTH: IntervalRule(
            granularity=CandleGranularity.SIX_HOUR,
            lookback=relativedelta(months=1),
            windows=(relativedelta(months=1),),
        ),
        # 8 days as [now-8d, now-5d], [now-5d, now-2d], [now-2d, now]
        SupportedInterval.WEEK: IntervalRule(
            granularity=CandleGranularity.ONE_HOUR,
            lookback=relativedelta(days=8),
            windows=(relativedelta(days=2), relativedelta(days=3), relativedelta(days=3)),
        ),
        SupportedInterval.DAY: IntervalRule(
            granularity=CandleGranularity.FIFTEEN_MINUTE,
            lookback=relativedelta(days=2),
            windows=(relativedelta(days=2),),
        ),
    }
)


def granularity_for(interval: SupportedInterval) -> CandleGranularity:
    """Return the candle granularity requested for an interval."""
    return INTERVAL_RULES[interval].granularity


def round_to_day(now: datetime) -> datetime:
    """Truncate a timestamp to midnight UTC."""
    return to_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)


def _stepped_windows(end: datetime, rule: IntervalRule) -> List[TimeRange]:
    lookback_start = end - rule.lookback
    ranges = []
    index = 1
    # Offsets are computed from the anchor each time so month-end clamping cannot drift.
    window_start = end - rule.step * index
    while window_start >= lookback_start:
        ranges.append(TimeRange(window_start, end - rule.step * (index - 1)))
        index += 1
        window_start = end - rule.step * index
    return ranges


def _explicit_windows(end: datetime, rule: IntervalRule) -> List[TimeRange]:
    ranges = []
    for size in rule.windows:
        start = end - size
        ranges.append(TimeRange(start, end))
        end = start
    return ranges


def partition(interval: SupportedInterval, now: datetime) -> List[TimeRange]:
    """Split an interval into request windows, most recent first.

    ``now`` is truncated to the day and advanced by one day so the current
    day's partial candle is included.

    Args:
        interval: Lookback interval to split
        now: Reference time

    Returns:
        Contiguous, reverse-chronological list of TimeRange

    Raises:
        ValueError: If a window would exceed MAX_CANDLES_PER_REQUEST candles
    """
    rule = INTERVAL_RULES[interval]
    anchor = round_to_day(now) + timedelta(days=1)

    if rule.step is not None:
        ranges = _stepped_windows(anchor, rule)
    else:
        ranges = _explicit_windows(anchor, rule)

    for time_range in ranges:
        candle_count = time_range.duration.total_seconds() / rule.granularity
        if candle_count > MAX_CANDLES_PER_REQUEST:
            raise ValueError(
                f"{interval.value} window {time_range.start} - {time_range.end} spans "
                f"{candle_count:.0f} candles, more than {MAX_CANDLES_PER_REQUEST} per request"
            )

    logger.debug(f"Partitioned {interval.value} into {len(ranges)} range(s)")
    return ranges
