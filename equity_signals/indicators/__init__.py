"""Technical indicators (pure math, no I/O)."""

from equity_signals.indicators.batch import BatchResult, calculate_universe
from equity_signals.indicators.indicators import (
    IndicatorCalculator,
    as_points,
    atr,
    bollinger_bands,
    dmi,
    macd,
    moving_average,
    obv,
    rsi,
    stochastic_kd,
    vwap,
    williams_r,
)
from equity_signals.indicators.primitives import (
    ema_series,
    highest,
    lowest,
    simple_moving_average,
    sma,
    standard_deviation,
    true_range,
    wilder_smooth,
)

__all__ = [
    "sma",
    "simple_moving_average",
    "ema_series",
    "wilder_smooth",
    "standard_deviation",
    "highest",
    "lowest",
    "true_range",
    "moving_average",
    "rsi",
    "macd",
    "stochastic_kd",
    "bollinger_bands",
    "vwap",
    "atr",
    "dmi",
    "williams_r",
    "obv",
    "IndicatorCalculator",
    "as_points",
    "BatchResult",
    "calculate_universe",
]
