"""Signal detectors.

Each detector looks at the last one or two indicator records (or the last
21 price bars) for a single symbol and returns at most one ``Signal``.
Detectors are independent of each other and keep no state, so running
them again on an unchanged tail yields the same events.
"""

import logging
from decimal import Decimal
from typing import Sequence

from equity_signals.models.indicator import IndicatorRecord
from equity_signals.models.price import PricePoint
from equity_signals.models.signal import Signal, SignalType

logger = logging.getLogger(__name__)

RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70
VOLUME_BREAKOUT_MULTIPLE = 2
VOLUME_LOOKBACK = 20


def detect_ma_crossover(
    previous: IndicatorRecord | None,
    latest: IndicatorRecord,
) -> Signal | None:
    """MA5 crossing MA20 between the previous and latest record."""
    if previous is None:
        return None
    if None in (previous.ma5, previous.ma20, latest.ma5, latest.ma20):
        return None

    if previous.ma5 <= previous.ma20 and latest.ma5 > latest.ma20:
        return Signal(
            symbol=latest.symbol,
            date=latest.date,
            signal_type=SignalType.GOLDEN_CROSS,
            description="MA5 crossed above MA20 (golden cross)",
            value=float(latest.ma5),
        )
    if previous.ma5 >= previous.ma20 and latest.ma5 < latest.ma20:
        return Signal(
            symbol=latest.symbol,
            date=latest.date,
            signal_type=SignalType.DEATH_CROSS,
            description="MA5 crossed below MA20 (death cross)",
            value=float(latest.ma5),
        )
    return None


def detect_rsi_zone(
    previous: IndicatorRecord | None,
    latest: IndicatorRecord,
    oversold: float = RSI_OVERSOLD,
    overbought: float = RSI_OVERBOUGHT,
) -> Signal | None:
    """RSI rebound out of oversold, otherwise oversold, otherwise overbought."""
    if previous is None or previous.rsi is None or latest.rsi is None:
        return None

    rsi_now = latest.rsi
    if previous.rsi < oversold and rsi_now >= oversold:
        signal_type = SignalType.RSI_BOUNCE
        description = f"RSI rebounded out of the oversold zone ({rsi_now})"
    elif rsi_now < oversold:
        signal_type = SignalType.RSI_OVERSOLD
        description = f"RSI is in the oversold zone ({rsi_now})"
    elif rsi_now > overbought:
        signal_type = SignalType.RSI_OVERBOUGHT
        description = f"RSI is in the overbought zone ({rsi_now})"
    else:
        return None

    return Signal(
        symbol=latest.symbol,
        date=latest.date,
        signal_type=signal_type,
        description=description,
        value=float(rsi_now),
    )


def detect_macd_crossover(
    previous: IndicatorRecord | None,
    latest: IndicatorRecord,
) -> Signal | None:
    """Sign flip of the MACD histogram."""
    if previous is None:
        return None
    hist_prev = previous.macd_histogram
    hist_now = latest.macd_histogram
    if hist_prev is None or hist_now is None:
        return None

    if hist_prev <= 0 and hist_now > 0:
        return Signal(
            symbol=latest.symbol,
            date=latest.date,
            signal_type=SignalType.MACD_GOLDEN_CROSS,
            description="MACD histogram turned positive (golden cross)",
            value=float(hist_now),
        )
    if hist_prev >= 0 and hist_now < 0:
        return Signal(
            symbol=latest.symbol,
            date=latest.date,
            signal_type=SignalType.MACD_DEATH_CROSS,
            description="MACD histogram turned negative (death cross)",
            value=float(hist_now),
        )
    return None


def average_volume(points: Sequence[PricePoint], lookback: int = VOLUME_LOOKBACK) -> float | None:
    """Mean volume of the ``lookback`` bars before the latest one."""
    if len(points) < lookback + 1:
        return None
    window = points[-(lookback + 1) : -1]
    return sum(p.volume for p in window) / lookback


def detect_volume_breakout(
    points: Sequence[PricePoint],
    multiple: float = VOLUME_BREAKOUT_MULTIPLE,
) -> Signal | None:
    """Latest volume above ``multiple`` times the preceding 20-day average."""
    avg = average_volume(points)
    if avg is None:
        return None

    latest = points[-1]
    if latest.volume <= avg * multiple:
        return None

    if avg > 0:
        description = f"Volume surged to {latest.volume / avg:.1f}x the 20-day average"
    else:
        description = "Volume surged after 20 days without trading"
    return Signal(
        symbol=latest.symbol,
        date=latest.date,
        signal_type=SignalType.VOLUME_BREAKOUT,
        description=description,
        value=float(latest.volume),
    )


def detect_bollinger_breakout(
    latest: IndicatorRecord,
    close: Decimal | float,
) -> Signal | None:
    """Close strictly above the upper or below the lower band."""
    if latest.bollinger_upper is None or latest.bollinger_lower is None:
        return None

    if close > latest.bollinger_upper:
        return Signal(
            symbol=latest.symbol,
            date=latest.date,
            signal_type=SignalType.BOLLINGER_BREAKOUT_UP,
            description="Close broke above the upper Bollinger band",
            value=float(close),
        )
    if close < latest.bollinger_lower:
        return Signal(
            symbol=latest.symbol,
            date=latest.date,
            signal_type=SignalType.BOLLINGER_BREAKOUT_DOWN,
            description="Close broke below the lower Bollinger band",
            value=float(close),
        )
    return None


def detect_all_signals(
    records: Sequence[IndicatorRecord],
    points: Sequence[PricePoint],
) -> list[Signal]:
    """Run every detector on one symbol's latest data.

    Args:
        records: Indicator records, oldest first; only the last two are used.
        points: Price bars, oldest first; only the last 21 are used.

    Returns:
        All detected signals, in no particular order.
    """
    if not records:
        return []

    latest = records[-1]
    previous = records[-2] if len(records) >= 2 else None

    candidates = [
        detect_ma_crossover(previous, latest),
        detect_rsi_zone(previous, latest),
        detect_macd_crossover(previous, latest),
        detect_volume_breakout(points),
    ]
    if points and points[-1].date == latest.date:
        candidates.append(detect_bollinger_breakout(latest, points[-1].close))

    signals = [s for s in candidates if s is not None]
    if signals:
        logger.debug(
            "%s: %d signals on %s (%s)",
            latest.symbol,
            len(signals),
            latest.date,
            ", ".join(s.signal_type.value for s in signals),
        )
    return signals
