"""Conversion of raw exchange candles into price points."""

from decimal import Decimal
from typing import Iterable

from ..models.candle import PricePoint, PriceSeries, RawCandle


def format_price(value: float) -> str:
    """Format a price as its shortest exact decimal string.

    ``repr`` gives the shortest string that round-trips the float; it is then
    rendered positionally, without exponent or trailing zeros.

    Examples:
        0.1 -> "0.1", 50000.0 -> "50000", 1e-05 -> "0.00001"
    """
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def normalize(raw_candles: Iterable[RawCandle]) -> PriceSeries:
    """Convert raw candles to price points, keeping their order."""
    return [
        PricePoint(timestamp=int(candle.timestamp), price=format_price(candle.price))
        for candle in raw_candles
    ]
