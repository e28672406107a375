"""Built-in screening strategies.

Each class is registered by name and judges one ``InstrumentSnapshot`` at
a time; ranking and capping happen in ``screen_by_strategy``.
"""

from equity_signals.strategy.protocol import InstrumentSnapshot
from equity_signals.strategy.registry import register_strategy

VOLUME_BREAKOUT_MULTIPLE = 2
DEFAULT_RSI_THRESHOLD = 30


def _f(value) -> float | None:
    return None if value is None else float(value)


@register_strategy("golden_cross")
class GoldenCrossScreen:
    """MA5 crossed above MA20 on the latest day. Ranked by price, highest first."""

    name = "golden_cross"
    descending = True

    def matches(self, snapshot: InstrumentSnapshot) -> bool:
        now, prev = snapshot.indicators, snapshot.previous
        if now is None or prev is None:
            return False
        if None in (now.ma5, now.ma20, prev.ma5, prev.ma20):
            return False
        return now.ma5 > now.ma20 and prev.ma5 <= prev.ma20

    def sort_key(self, snapshot: InstrumentSnapshot) -> float:
        return float(snapshot.latest.close)

    def fields(self, snapshot: InstrumentSnapshot) -> dict[str, float | None]:
        return {
            "ma5": _f(snapshot.indicators.ma5),
            "ma20": _f(snapshot.indicators.ma20),
        }


@register_strategy("rsi_oversold")
class RsiOversoldScreen:
    """Latest RSI below a threshold. Ranked by RSI, lowest first."""

    name = "rsi_oversold"
    descending = False

    def __init__(self, rsi_threshold: float = DEFAULT_RSI_THRESHOLD):
        self.rsi_threshold = rsi_threshold

    def matches(self, snapshot: InstrumentSnapshot) -> bool:
        now = snapshot.indicators
        return now is not None and now.rsi is not None and now.rsi < self.rsi_threshold

    def sort_key(self, snapshot: InstrumentSnapshot) -> float:
        return float(snapshot.indicators.rsi)

    def fields(self, snapshot: InstrumentSnapshot) -> dict[str, float | None]:
        return {"rsi": _f(snapshot.indicators.rsi)}


@register_strategy("macd_golden_cross")
class MacdGoldenCrossScreen:
    """MACD histogram turned positive on the latest day. Ranked by histogram, highest first."""

    name = "macd_golden_cross"
    descending = True

    def matches(self, snapshot: InstrumentSnapshot) -> bool:
        now, prev = snapshot.indicators, snapshot.previous
        if now is None or prev is None:
            return False
        if now.macd_histogram is None or prev.macd_histogram is None:
            return False
        return now.macd_histogram > 0 and prev.macd_histogram <= 0

    def sort_key(self, snapshot: InstrumentSnapshot) -> float:
        return float(snapshot.indicators.macd_histogram)

    def fields(self, snapshot: InstrumentSnapshot) -> dict[str, float | None]:
        return {
            "macd": _f(snapshot.indicators.macd),
            "macd_signal": _f(snapshot.indicators.macd_signal),
            "macd_histogram": _f(snapshot.indicators.macd_histogram),
        }


@register_strategy("volume_breakout")
class VolumeBreakoutScreen:
    """Latest volume above twice the trailing 20-day average. Ranked by volume, highest first."""

    name = "volume_breakout"
    descending = True

    def matches(self, snapshot: InstrumentSnapshot) -> bool:
        if snapshot.avg_volume is None:
            return False
        return snapshot.latest.volume > snapshot.avg_volume * VOLUME_BREAKOUT_MULTIPLE

    def sort_key(self, snapshot: InstrumentSnapshot) -> float:
        return float(snapshot.latest.volume)

    def fields(self, snapshot: InstrumentSnapshot) -> dict[str, float | None]:
        return {
            "volume": float(snapshot.latest.volume),
            "avg_volume": snapshot.avg_volume,
        }


@register_strategy("bollinger_squeeze")
class BollingerSqueezeScreen:
    """Every instrument with bands, ranked by band width, tightest first."""

    name = "bollinger_squeeze"
    descending = False

    def matches(self, snapshot: InstrumentSnapshot) -> bool:
        now = snapshot.indicators
        return now is not None and now.bollinger_bandwidth is not None

    def sort_key(self, snapshot: InstrumentSnapshot) -> float:
        return float(snapshot.indicators.bollinger_bandwidth)

    def fields(self, snapshot: InstrumentSnapshot) -> dict[str, float | None]:
        now = snapshot.indicators
        return {
            "bollinger_upper": _f(now.bollinger_upper),
            "bollinger_lower": _f(now.bollinger_lower),
            "bandwidth": round(float(now.bollinger_bandwidth), 4),
        }
