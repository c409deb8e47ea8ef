"""Validated GDAX response payloads."""

from typing import Annotated, Any, List

from pydantic import BaseModel, Field, TypeAdapter

from .candle import RawCandle

# JSON numbers only: no numeric strings, no Infinity or NaN
CandleValue = Annotated[float, Field(strict=True, allow_inf_nan=False)]
CandleRow = Annotated[List[CandleValue], Field(min_length=2)]

_candle_rows = TypeAdapter(List[CandleRow])


class GdaxErrorPayload(BaseModel):
    """Error body returned with a non-200 status."""

    message: str = Field(..., description="Human readable error message")


def parse_candle_rows(payload: Any) -> List[RawCandle]:
    """Validate a decoded success body and convert it to raw candles.

    Raises:
        pydantic.ValidationError: If the payload is not an array of numeric rows
    """
    rows = _candle_rows.validate_python(payload)
    return [RawCandle.from_row(row) for row in rows]
