"""Indicator and scoring configuration models.

The scoring constants are heuristic rule weights carried over unchanged
from the production scorer. They are not calibrated; keep them here so
they can be overridden rather than edited in place.
"""

from pydantic import BaseModel


class IndicatorConfig(BaseModel):
    """Lookback periods used by the indicator engine."""

    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    kd_period: int = 9
    bollinger_period: int = 20
    bollinger_width: float = 2.0
    vwap_period: int = 20
    atr_period: int = 14
    dmi_period: int = 14
    williams_period: int = 14

    # Below this many rows nothing is computed for an instrument
    min_history: int = 20


class TechnicalScoreWeights(BaseModel):
    """Points added or removed by each technical rule (baseline 50)."""

    baseline: float = 50

    # RSI zone
    rsi_rebound_zone: float = 10  # 30 <= RSI <= 50
    rsi_bull_zone: float = 5  # 50 < RSI <= 70
    rsi_overbought: float = -5  # RSI > 70
    rsi_oversold: float = -5  # RSI < 30

    # Moving-average stacking
    ma_bullish_stack: float = 10  # close > MA5 > MA20
    ma_bearish_stack: float = -10  # close < MA5 < MA20
    above_ma60: float = 5

    # MACD histogram sign
    macd_positive: float = 8
    macd_negative: float = -8

    # KD
    kd_bull_cross: float = 8  # K > D and K < 80
    kd_bear_cross: float = -5  # K < D and K > 20
    kd_overbought: float = -3  # K > 80
    kd_oversold: float = 3  # K < 20

    # Volume confirmation
    volume_up_ratio: float = 1.5
    volume_down_ratio: float = 2.0
    volume_breakout_up: float = 5
    volume_breakout_down: float = -5

    # ADX
    adx_trend_threshold: float = 25
    adx_bull_trend: float = 5
    adx_bear_trend: float = -5

    # Position within the Bollinger band (0 = lower, 1 = upper)
    bollinger_upper_half: float = 3  # 0.5 < pos < 0.8
    bollinger_near_upper: float = -2  # pos >= 0.8
    bollinger_near_lower: float = 2  # pos <= 0.2


class FundamentalScoreThresholds(BaseModel):
    """Thresholds and points for the fundamental rules (baseline 50).

    The P/E cut-offs (12, 20, 30) and the 5% dividend yield have no
    documented rationale and are pending product-owner review.
    """

    baseline: float = 50

    # Latest monthly revenue YoY, percent
    revenue_yoy_strong: float = 20
    revenue_yoy_good: float = 10
    revenue_yoy_weak: float = -10
    revenue_strong_points: float = 15
    revenue_good_points: float = 10
    revenue_positive_points: float = 5
    revenue_soft_decline_points: float = -5
    revenue_decline_points: float = -10

    # EPS
    eps_ttm_positive_points: float = 5
    eps_growth_strong: float = 20
    eps_growth_strong_points: float = 10
    eps_growth_positive_points: float = 5
    eps_growth_negative_points: float = -5

    # Valuation
    pe_low: float = 12
    pe_fair: float = 20
    pe_high: float = 30
    pe_low_points: float = 10
    pe_fair_points: float = 5
    pe_high_points: float = -5
    dividend_yield_high: float = 5
    dividend_yield_points: float = 5
