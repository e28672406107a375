"""Series math shared by every indicator.

All functions take plain sequences of numbers and return Python lists
aligned with the input. Positions that a lookback window cannot cover yet
are ``None`` rather than NaN or zero, so callers can never mistake
"not enough data" for a value.

Values are carried as float64 at full precision; rounding is left to the
record that presents them.
"""

from typing import Sequence

import numpy as np

Number = float | int


def _to_array(values: Sequence[Number]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def _to_list(arr: np.ndarray) -> list[float | None]:
    return [None if np.isnan(v) else float(v) for v in arr]


def simple_moving_average(values: Sequence[Number], period: int) -> float | None:
    """Average of the last ``period`` values, or ``None`` if there are fewer."""
    if period <= 0 or len(values) < period:
        return None
    return float(np.mean(_to_array(values[-period:])))


def sma(values: Sequence[Number], period: int) -> list[float | None]:
    """Rolling simple moving average.

    Args:
        values: Sequence of values
        period: Window length

    Returns:
        List the same length as ``values``; the first ``period - 1``
        entries are ``None``.
    """
    if len(values) < period:
        return [None] * len(values)

    arr = _to_array(values)
    result = np.full_like(arr, np.nan)
    for i in range(period - 1, len(arr)):
        result[i] = np.mean(arr[i - period + 1 : i + 1])
    return _to_list(result)


def ema_series(values: Sequence[Number], period: int) -> list[float | None]:
    """Exponential moving average seeded with a simple average.

    Element ``period - 1`` is the mean of the first ``period`` values; each
    later element is ``value * k + prev * (1 - k)`` with
    ``k = 2 / (period + 1)``. Seeding with the first value instead gives
    materially different MACD readings.

    Returns:
        List the same length as ``values``, ``None`` before the seed. A
        series shorter than ``period`` is all ``None``.
    """
    if len(values) < period:
        return [None] * len(values)

    arr = _to_array(values)
    k = 2.0 / (period + 1)

    result = np.full_like(arr, np.nan)
    result[period - 1] = np.mean(arr[:period])
    for i in range(period, len(arr)):
        result[i] = arr[i] * k + result[i - 1] * (1 - k)
    return _to_list(result)


def wilder_smooth(values: Sequence[Number], period: int) -> list[float | None]:
    """Wilder's smoothing (RMA).

    The first smoothed value is the mean of the first ``period`` values;
    after that ``(prev * (period - 1) + value) / period``. RSI, ATR and
    DMI/ADX all use this recurrence.
    """
    if len(values) < period:
        return [None] * len(values)

    arr = _to_array(values)
    result = np.full_like(arr, np.nan)
    result[period - 1] = np.mean(arr[:period])
    for i in range(period, len(arr)):
        result[i] = (result[i - 1] * (period - 1) + arr[i]) / period
    return _to_list(result)


def standard_deviation(window: Sequence[Number]) -> float | None:
    """Population standard deviation (divides by N, not N - 1)."""
    if len(window) == 0:
        return None
    return float(np.std(_to_array(window), ddof=0))


def highest(values: Sequence[Number], period: int) -> list[float | None]:
    """Highest value over the trailing ``period`` values at each position."""
    if len(values) < period:
        return [None] * len(values)

    arr = _to_array(values)
    result = np.full_like(arr, np.nan)
    for i in range(period - 1, len(arr)):
        result[i] = np.max(arr[i - period + 1 : i + 1])
    return _to_list(result)


def lowest(values: Sequence[Number], period: int) -> list[float | None]:
    """Lowest value over the trailing ``period`` values at each position."""
    if len(values) < period:
        return [None] * len(values)

    arr = _to_array(values)
    result = np.full_like(arr, np.nan)
    for i in range(period - 1, len(arr)):
        result[i] = np.min(arr[i - period + 1 : i + 1])
    return _to_list(result)


def true_range(
    highs: Sequence[Number],
    lows: Sequence[Number],
    closes: Sequence[Number],
) -> list[float]:
    """True range of every bar that has a previous close.

    ``max(high - low, |high - prev_close|, |low - prev_close|)``. The
    result is one element shorter than the input: element ``i`` belongs to
    bar ``i + 1``.
    """
    h = _to_array(highs)
    l = _to_array(lows)
    c = _to_array(closes)
    if len(c) < 2:
        return []

    prev_close = c[:-1]
    hl = h[1:] - l[1:]
    hc = np.abs(h[1:] - prev_close)
    lc = np.abs(l[1:] - prev_close)
    return [float(v) for v in np.maximum(hl, np.maximum(hc, lc))]


def directional_movement(
    highs: Sequence[Number],
    lows: Sequence[Number],
) -> tuple[list[float], list[float]]:
    """+DM and -DM for every bar that has a previous bar.

    An up-move counts only when it is positive and larger than the
    down-move, and vice versa; otherwise the bar contributes 0.
    """
    h = _to_array(highs)
    l = _to_array(lows)
    if len(h) < 2:
        return [], []

    up = h[1:] - h[:-1]
    down = l[:-1] - l[1:]
    plus_dm = np.where((up > down) & (up > 0), up, 0.0)
    minus_dm = np.where((down > up) & (down > 0), down, 0.0)
    return [float(v) for v in plus_dm], [float(v) for v in minus_dm]
