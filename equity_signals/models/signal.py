"""Signal models."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Bias(str, Enum):
    """Directional meaning of a signal."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class SignalType(str, Enum):
    """Discrete events the detectors can report."""

    GOLDEN_CROSS = "golden_cross"
    DEATH_CROSS = "death_cross"
    RSI_BOUNCE = "rsi_bounce"
    RSI_OVERSOLD = "rsi_oversold"
    RSI_OVERBOUGHT = "rsi_overbought"
    MACD_GOLDEN_CROSS = "macd_golden_cross"
    MACD_DEATH_CROSS = "macd_death_cross"
    VOLUME_BREAKOUT = "volume_breakout"
    BOLLINGER_BREAKOUT_UP = "bollinger_breakout_up"
    BOLLINGER_BREAKOUT_DOWN = "bollinger_breakout_down"


SIGNAL_BIAS: dict[SignalType, Bias] = {
    SignalType.GOLDEN_CROSS: Bias.BULLISH,
    SignalType.DEATH_CROSS: Bias.BEARISH,
    SignalType.RSI_BOUNCE: Bias.BULLISH,
    SignalType.RSI_OVERSOLD: Bias.BULLISH,
    SignalType.RSI_OVERBOUGHT: Bias.BEARISH,
    SignalType.MACD_GOLDEN_CROSS: Bias.BULLISH,
    SignalType.MACD_DEATH_CROSS: Bias.BEARISH,
    SignalType.VOLUME_BREAKOUT: Bias.NEUTRAL,
    SignalType.BOLLINGER_BREAKOUT_UP: Bias.BULLISH,
    SignalType.BOLLINGER_BREAKOUT_DOWN: Bias.BEARISH,
}


class Signal(BaseModel):
    """An event detected on one symbol at one date.

    Signals are recomputed on request and never persisted by the engine.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    date: date
    signal_type: SignalType
    description: str
    value: float | None = None

    @property
    def bias(self) -> Bias:
        return SIGNAL_BIAS[self.signal_type]
