"""Technical indicators for one instrument's daily history.

Each indicator function takes float sequences (oldest first) and returns
its value as of the last element, or ``None`` when the history is shorter
than the indicator's lookback. ``IndicatorCalculator`` ties them together
into an ``IndicatorRecord``.
"""

import logging
import math
from typing import Sequence

from equity_signals.errors import InsufficientHistoryError, MalformedInputError
from equity_signals.indicators.primitives import (
    directional_movement,
    ema_series,
    highest,
    lowest,
    simple_moving_average,
    standard_deviation,
    true_range,
    wilder_smooth,
)
from equity_signals.models.config import IndicatorConfig
from equity_signals.models.indicator import IndicatorRecord
from equity_signals.models.price import PriceHistory, PricePoint

logger = logging.getLogger(__name__)

# RSV / Williams %R reported for a window whose high equals its low
NEUTRAL_RSV = 50.0
NEUTRAL_WILLIAMS_R = -50.0

MA_PERIODS = (5, 10, 20, 60)


def moving_average(closes: Sequence[float], period: int) -> float | None:
    """Simple average of the last ``period`` closes."""
    return simple_moving_average(closes, period)


def rsi(closes: Sequence[float], period: int = 14) -> float | None:
    """Relative Strength Index with Wilder smoothing.

    The first average gain/loss is the plain mean of the first ``period``
    deltas; later deltas are Wilder-smoothed. A zero average loss gives 100.
    """
    if len(closes) < period + 1:
        return None

    gains = []
    losses = []
    for prev, curr in zip(closes[:-1], closes[1:]):
        change = curr - prev
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)

    avg_gain = wilder_smooth(gains, period)[-1]
    avg_loss = wilder_smooth(losses, period)[-1]

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def macd(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> tuple[float | None, float | None, float | None]:
    """MACD line, signal line and histogram.

    The MACD line is EMA(fast) - EMA(slow) wherever both are defined; the
    signal line is an SMA-seeded EMA of that line. Needs ``slow + signal``
    closes, otherwise all three are ``None``.
    """
    if len(closes) < slow + signal:
        return None, None, None

    ema_fast = ema_series(closes, fast)
    ema_slow = ema_series(closes, slow)
    macd_line = [
        f - s
        for f, s in zip(ema_fast, ema_slow)
        if f is not None and s is not None
    ]
    if len(macd_line) < signal:
        return None, None, None

    signal_line = ema_series(macd_line, signal)
    macd_value = macd_line[-1]
    signal_value = signal_line[-1]
    return macd_value, signal_value, macd_value - signal_value


def raw_stochastic_value(
    highs: Sequence[float],
    lows: Sequence[float],
    close: float,
) -> float:
    """RSV of ``close`` within the window; 50 when the window has no range."""
    highest_high = max(highs)
    lowest_low = min(lows)
    if highest_high == lowest_low:
        return NEUTRAL_RSV
    return (close - lowest_low) / (highest_high - lowest_low) * 100


def stochastic_kd(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 9,
) -> tuple[float | None, float | None]:
    """Stochastic K and D using the 1/3 smoothing recurrence.

    K = 2/3 * K_prev + 1/3 * RSV and D = 2/3 * D_prev + 1/3 * K, with K and
    D starting at 50 before the first full window.
    """
    if len(closes) < period:
        return None, None

    k = 50.0
    d = 50.0
    for i in range(period - 1, len(closes)):
        start = i - period + 1
        rsv = raw_stochastic_value(highs[start : i + 1], lows[start : i + 1], closes[i])
        k = (2 / 3) * k + (1 / 3) * rsv
        d = (2 / 3) * d + (1 / 3) * k
    return k, d


def bollinger_bands(
    closes: Sequence[float],
    period: int = 20,
    width: float = 2.0,
) -> tuple[float | None, float | None, float | None]:
    """Upper, middle and lower bands using the population standard deviation."""
    if len(closes) < period:
        return None, None, None

    window = closes[-period:]
    middle = simple_moving_average(window, period)
    half_width = width * standard_deviation(window)
    return middle + half_width, middle, middle - half_width


def vwap(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
    period: int = 20,
) -> float | None:
    """Volume-weighted typical price over the trailing ``period`` bars.

    ``None`` when the window traded no volume.
    """
    if len(closes) < period:
        return None

    sum_pv = 0.0
    sum_v = 0.0
    for i in range(len(closes) - period, len(closes)):
        typical = (highs[i] + lows[i] + closes[i]) / 3
        sum_pv += typical * volumes[i]
        sum_v += volumes[i]

    if sum_v == 0:
        return None
    return sum_pv / sum_v


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> float | None:
    """Average True Range, Wilder-smoothed from an SMA seed."""
    if len(closes) < period + 1:
        return None
    return wilder_smooth(true_range(highs, lows, closes), period)[-1]


def dmi(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> tuple[float | None, float | None, float | None]:
    """ADX, +DI and -DI.

    TR, +DM and -DM are Wilder-smoothed independently. DX is computed for
    every bar after the smoothing seed, and ADX is the Wilder-smoothed DX
    seeded by the mean of its first ``period`` values. That needs
    ``2 * period + 1`` closes; shorter histories return all ``None``.
    """
    empty = (None, None, None)
    if len(closes) < period + 1:
        return empty

    tr = true_range(highs, lows, closes)
    plus_dm, minus_dm = directional_movement(highs, lows)

    smooth_tr = wilder_smooth(tr, period)
    smooth_plus = wilder_smooth(plus_dm, period)
    smooth_minus = wilder_smooth(minus_dm, period)

    dx_series = []
    plus_di = minus_di = 0.0
    for i in range(period, len(tr)):
        if smooth_tr[i] > 0:
            plus_di = smooth_plus[i] / smooth_tr[i] * 100
            minus_di = smooth_minus[i] / smooth_tr[i] * 100
        else:
            plus_di = minus_di = 0.0
        di_sum = plus_di + minus_di
        dx_series.append(abs(plus_di - minus_di) / di_sum * 100 if di_sum > 0 else 0.0)

    if len(dx_series) < period:
        return empty

    adx = wilder_smooth(dx_series, period)[-1]
    return adx, plus_di, minus_di


def williams_r(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> float | None:
    """Williams %R in [-100, 0]; -50 when the window has no range."""
    if len(closes) < period:
        return None

    highest_high = highest(highs, period)[-1]
    lowest_low = lowest(lows, period)[-1]
    if highest_high == lowest_low:
        return NEUTRAL_WILLIAMS_R
    return (highest_high - closes[-1]) / (highest_high - lowest_low) * -100


def obv(closes: Sequence[float], volumes: Sequence[float]) -> float | None:
    """On-Balance Volume accumulated from zero over the whole history."""
    if len(closes) < 2:
        return None

    total = 0.0
    for i in range(1, len(closes)):
        if closes[i] > closes[i - 1]:
            total += volumes[i]
        elif closes[i] < closes[i - 1]:
            total -= volumes[i]
    return total


def as_points(points: PriceHistory | Sequence[PricePoint]) -> Sequence[PricePoint]:
    """Bars of a ``PriceHistory``, or ``points`` unchanged."""
    if isinstance(points, PriceHistory):
        return points.points
    return points


def validate_history(points: Sequence[PricePoint]) -> None:
    """Reject histories the recurrences must never see.

    Raises:
        MalformedInputError: Mixed symbols, dates not strictly ascending, or
            a non-finite / non-positive price or negative volume.
    """
    if not points:
        return

    symbol = points[0].symbol
    prev_date = None
    for point in points:
        if point.symbol != symbol:
            raise MalformedInputError(
                f"history for {symbol} contains a bar for {point.symbol}"
            )
        if prev_date is not None and point.date <= prev_date:
            raise MalformedInputError(
                f"{symbol}: dates must be strictly ascending "
                f"({point.date} follows {prev_date})"
            )
        prev_date = point.date

        for name in ("open", "high", "low", "close"):
            value = float(getattr(point, name))
            if not math.isfinite(value) or value <= 0:
                raise MalformedInputError(
                    f"{symbol} {point.date}: invalid {name} price {getattr(point, name)}"
                )
        if point.volume < 0:
            raise MalformedInputError(
                f"{symbol} {point.date}: negative volume {point.volume}"
            )


class IndicatorCalculator:
    """Computes every indicator for one instrument as of its latest bar."""

    def __init__(self, config: IndicatorConfig | None = None):
        self.config = config or IndicatorConfig()

    def calculate_values(
        self,
        highs: Sequence[float],
        lows: Sequence[float],
        closes: Sequence[float],
        volumes: Sequence[float],
    ) -> dict[str, float | None]:
        """Full-precision indicator values for the last bar."""
        cfg = self.config

        macd_value, macd_signal, macd_hist = macd(
            closes, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal
        )
        kd_k, kd_d = stochastic_kd(highs, lows, closes, cfg.kd_period)
        upper, middle, lower = bollinger_bands(
            closes, cfg.bollinger_period, cfg.bollinger_width
        )
        adx, plus_di, minus_di = dmi(highs, lows, closes, cfg.dmi_period)

        values: dict[str, float | None] = {
            f"ma{period}": moving_average(closes, period) for period in MA_PERIODS
        }
        values.update(
            {
                "rsi": rsi(closes, cfg.rsi_period),
                "macd": macd_value,
                "macd_signal": macd_signal,
                "macd_histogram": macd_hist,
                "kd_k": kd_k,
                "kd_d": kd_d,
                "bollinger_upper": upper,
                "bollinger_middle": middle,
                "bollinger_lower": lower,
                "vwap": vwap(highs, lows, closes, volumes, cfg.vwap_period),
                "atr": atr(highs, lows, closes, cfg.atr_period),
                "adx": adx,
                "plus_di": plus_di,
                "minus_di": minus_di,
                "williams_r": williams_r(highs, lows, closes, cfg.williams_period),
                "obv": obv(closes, volumes),
            }
        )
        return values

    def calculate_latest(
        self,
        points: PriceHistory | Sequence[PricePoint],
    ) -> IndicatorRecord | None:
        """Indicator record for the latest bar of ``points``.

        Args:
            points: Bars for one symbol in ascending date order.

        Returns:
            The record, or ``None`` when there are fewer than
            ``config.min_history`` bars.

        Raises:
            MalformedInputError: If the history breaks the input contract.
        """
        points = as_points(points)
        validate_history(points)

        if len(points) < self.config.min_history:
            if points:
                logger.debug(
                    "%s: insufficient history (%d < %d rows)",
                    points[0].symbol,
                    len(points),
                    self.config.min_history,
                )
            return None

        values = self.calculate_values(
            highs=[float(p.high) for p in points],
            lows=[float(p.low) for p in points],
            closes=[float(p.close) for p in points],
            volumes=[float(p.volume) for p in points],
        )
        latest = points[-1]
        return IndicatorRecord.from_raw(latest.symbol, latest.date, values)

    def require_latest(self, points: PriceHistory | Sequence[PricePoint]) -> IndicatorRecord:
        """Like ``calculate_latest`` but raises when history is too short."""
        points = as_points(points)
        record = self.calculate_latest(points)
        if record is None:
            symbol = points[0].symbol if points else "(empty)"
            raise InsufficientHistoryError(symbol, len(points), self.config.min_history)
        return record

    def calculate_history(
        self,
        points: PriceHistory | Sequence[PricePoint],
        count: int = 2,
    ) -> list[IndicatorRecord]:
        """Records for each of the last ``count`` dates, oldest first.

        Each record only sees bars up to its own date. Dates whose prefix
        is below the history floor are left out.
        """
        points = as_points(points)
        validate_history(points)

        records = []
        for end in range(max(len(points) - count, 0) + 1, len(points) + 1):
            record = self.calculate_latest(points[:end])
            if record is not None:
                records.append(record)
        return records
