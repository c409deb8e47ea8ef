"""Canonical candle and price point models."""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple


@dataclass
class RawCandle:
    """One exchange candle row.

    Rows arrive as ``[time, price, ...]``; only the timestamp and the value at
    index 1 are carried forward, the remaining values are kept in ``extra``.
    """

    timestamp: int
    price: float
    extra: Tuple[float, ...] = field(default_factory=tuple)

    @classmethod
    def from_row(cls, row: Sequence[float]) -> "RawCandle":
        return cls(timestamp=int(row[0]), price=row[1], extra=tuple(row[2:]))


@dataclass(frozen=True)
class PricePoint:
    """Normalized price at a point in time."""

    timestamp: int
    price: str

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "price": self.price}


PriceSeries = List[PricePoint]
