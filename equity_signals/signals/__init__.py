"""Signal detection on indicator records and price bars."""

from equity_signals.signals.detectors import (
    average_volume,
    detect_all_signals,
    detect_bollinger_breakout,
    detect_ma_crossover,
    detect_macd_crossover,
    detect_rsi_zone,
    detect_volume_breakout,
)

__all__ = [
    "average_volume",
    "detect_all_signals",
    "detect_bollinger_breakout",
    "detect_ma_crossover",
    "detect_macd_crossover",
    "detect_rsi_zone",
    "detect_volume_breakout",
]
