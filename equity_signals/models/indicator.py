"""Indicator snapshot model."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

PRICE_PLACES = Decimal("0.01")
DELTA_PLACES = Decimal("0.0001")

# Fields quantized to 4 places; everything else (except OBV) gets 2.
FOUR_PLACE_FIELDS = frozenset({"macd", "macd_signal", "macd_histogram", "atr"})


def quantize(value: float | None, places: Decimal = PRICE_PLACES) -> Decimal | None:
    """Round a full-precision float for presentation, keeping ``None``."""
    if value is None:
        return None
    return Decimal(repr(float(value))).quantize(places, rounding=ROUND_HALF_UP)


class IndicatorRecord(BaseModel):
    """Indicators for one symbol as of its latest bar.

    Every indicator is optional: ``None`` means the history was too short
    for that indicator's lookback window, never a value of zero.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    date: date

    ma5: Decimal | None = None
    ma10: Decimal | None = None
    ma20: Decimal | None = None
    ma60: Decimal | None = None

    rsi: Decimal | None = None

    macd: Decimal | None = None
    macd_signal: Decimal | None = None
    macd_histogram: Decimal | None = None

    kd_k: Decimal | None = None
    kd_d: Decimal | None = None

    bollinger_upper: Decimal | None = None
    bollinger_middle: Decimal | None = None
    bollinger_lower: Decimal | None = None

    vwap: Decimal | None = None
    atr: Decimal | None = None

    adx: Decimal | None = None
    plus_di: Decimal | None = None
    minus_di: Decimal | None = None

    williams_r: Decimal | None = None
    obv: int | None = None

    @classmethod
    def from_raw(cls, symbol: str, as_of: date, values: dict) -> "IndicatorRecord":
        """Build a record from full-precision float values.

        This is the only place indicator values are rounded.
        """
        fields = {}
        for name, value in values.items():
            if name == "obv":
                fields[name] = None if value is None else int(round(value))
            elif name in FOUR_PLACE_FIELDS:
                fields[name] = quantize(value, DELTA_PLACES)
            else:
                fields[name] = quantize(value, PRICE_PLACES)
        return cls(symbol=symbol, date=as_of, **fields)

    @property
    def bollinger_bandwidth(self) -> Decimal | None:
        """Band width relative to the middle band, in percent."""
        if (
            self.bollinger_upper is None
            or self.bollinger_lower is None
            or not self.bollinger_middle
        ):
            return None
        return (self.bollinger_upper - self.bollinger_lower) / self.bollinger_middle * 100

    def available(self) -> list[str]:
        """Names of indicators that have a value."""
        return [
            name
            for name, value in self.model_dump(exclude={"symbol", "date"}).items()
            if value is not None
        ]
