"""Technical score (0-100) from an indicator record and recent prices.

Starts at a baseline of 50 and applies independent additive rules. A rule
whose inputs are missing is skipped (recorded as ``None``), which is not
the same as a rule that ran and contributed 0.
"""

import logging
from typing import Sequence

from equity_signals.models.config import TechnicalScoreWeights
from equity_signals.models.indicator import IndicatorRecord
from equity_signals.models.price import PricePoint
from equity_signals.models.score import Score, ScoreKind
from equity_signals.scoring.common import finalize_score, to_float
from equity_signals.signals.detectors import average_volume

logger = logging.getLogger(__name__)


def rsi_adjustment(rsi: float | None, w: TechnicalScoreWeights) -> float | None:
    if rsi is None:
        return None
    if 30 <= rsi <= 50:
        return w.rsi_rebound_zone
    if 50 < rsi <= 70:
        return w.rsi_bull_zone
    if rsi > 70:
        return w.rsi_overbought
    return w.rsi_oversold


def ma_stack_adjustment(
    close: float,
    ma5: float | None,
    ma20: float | None,
    w: TechnicalScoreWeights,
) -> float | None:
    if ma5 is None or ma20 is None:
        return None
    if close > ma5 > ma20:
        return w.ma_bullish_stack
    if close < ma5 < ma20:
        return w.ma_bearish_stack
    return 0.0


def ma60_adjustment(close: float, ma60: float | None, w: TechnicalScoreWeights) -> float | None:
    if ma60 is None:
        return None
    return w.above_ma60 if close > ma60 else 0.0


def macd_adjustment(histogram: float | None, w: TechnicalScoreWeights) -> float | None:
    if histogram is None:
        return None
    return w.macd_positive if histogram > 0 else w.macd_negative


def kd_adjustment(k: float | None, d: float | None, w: TechnicalScoreWeights) -> float | None:
    if k is None or d is None:
        return None

    points = 0.0
    if k > d and k < 80:
        points += w.kd_bull_cross
    elif k < d and k > 20:
        points += w.kd_bear_cross
    if k > 80:
        points += w.kd_overbought
    if k < 20:
        points += w.kd_oversold
    return points


def volume_adjustment(
    close: float,
    ma5: float | None,
    volume_ratio: float | None,
    w: TechnicalScoreWeights,
) -> float | None:
    if volume_ratio is None or ma5 is None:
        return None
    if volume_ratio > w.volume_up_ratio and close > ma5:
        return w.volume_breakout_up
    if volume_ratio > w.volume_down_ratio and close < ma5:
        return w.volume_breakout_down
    return 0.0


def adx_adjustment(
    adx: float | None,
    plus_di: float | None,
    minus_di: float | None,
    w: TechnicalScoreWeights,
) -> float | None:
    if adx is None or plus_di is None or minus_di is None:
        return None
    if adx > w.adx_trend_threshold and plus_di > minus_di:
        return w.adx_bull_trend
    if adx > w.adx_trend_threshold and minus_di > plus_di:
        return w.adx_bear_trend
    return 0.0


def bollinger_position(
    close: float,
    upper: float | None,
    lower: float | None,
) -> float | None:
    """Where ``close`` sits in the band: 0 at the lower, 1 at the upper band.

    A band of zero width counts as the middle (0.5).
    """
    if upper is None or lower is None:
        return None
    width = upper - lower
    if width <= 0:
        return 0.5
    return (close - lower) / width


def bollinger_adjustment(position: float | None, w: TechnicalScoreWeights) -> float | None:
    if position is None:
        return None
    if 0.5 < position < 0.8:
        return w.bollinger_upper_half
    if position >= 0.8:
        return w.bollinger_near_upper
    if position <= 0.2:
        return w.bollinger_near_lower
    return 0.0


def volume_ratio(points: Sequence[PricePoint]) -> float | None:
    """Latest volume over the preceding 20-day average, if that average is positive."""
    avg = average_volume(points)
    if not avg:
        return None
    return points[-1].volume / avg


def score_technical(
    record: IndicatorRecord,
    points: Sequence[PricePoint],
    weights: TechnicalScoreWeights | None = None,
) -> Score | None:
    """Score one symbol's technical picture.

    Args:
        record: Latest indicator record.
        points: Recent price bars, oldest first; the last bar supplies the
            close and the last 21 bars the volume ratio.
        weights: Rule weights; defaults to ``TechnicalScoreWeights()``.

    Returns:
        Score, or ``None`` when there is no price bar to score against.
    """
    if not points:
        return None
    w = weights or TechnicalScoreWeights()

    close = float(points[-1].close)
    rsi = to_float(record.rsi)
    ma5 = to_float(record.ma5)
    ma20 = to_float(record.ma20)
    ma60 = to_float(record.ma60)
    histogram = to_float(record.macd_histogram)
    kd_k = to_float(record.kd_k)
    kd_d = to_float(record.kd_d)
    adx = to_float(record.adx)
    plus_di = to_float(record.plus_di)
    minus_di = to_float(record.minus_di)
    position = bollinger_position(
        close, to_float(record.bollinger_upper), to_float(record.bollinger_lower)
    )
    ratio = volume_ratio(points)

    adjustments = {
        "rsi": rsi_adjustment(rsi, w),
        "ma_stack": ma_stack_adjustment(close, ma5, ma20, w),
        "ma60": ma60_adjustment(close, ma60, w),
        "macd": macd_adjustment(histogram, w),
        "kd": kd_adjustment(kd_k, kd_d, w),
        "volume": volume_adjustment(close, ma5, ratio, w),
        "adx": adx_adjustment(adx, plus_di, minus_di, w),
        "bollinger": bollinger_adjustment(position, w),
    }
    score = finalize_score(w.baseline, adjustments)

    breakdown = {
        "close": close,
        "rsi": rsi,
        "ma5": ma5,
        "ma20": ma20,
        "ma60": ma60,
        "kd_k": kd_k,
        "kd_d": kd_d,
        "macd": to_float(record.macd),
        "macd_histogram": histogram,
        "adx": adx,
        "volume_ratio": round(ratio, 2) if ratio is not None else None,
        "bollinger_position": round(position * 100, 1) if position is not None else None,
    }
    logger.debug("%s technical score %d on %s", record.symbol, score, record.date)
    return Score(
        symbol=record.symbol,
        kind=ScoreKind.TECHNICAL,
        score=score,
        breakdown=breakdown,
        adjustments=adjustments,
    )
