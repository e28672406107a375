"""Tests for technical indicators and the indicator calculator."""

import math
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

import pytest
from pydantic import ValidationError

from equity_signals.errors import InsufficientHistoryError, MalformedInputError
from equity_signals.indicators import (
    IndicatorCalculator,
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
from equity_signals.models import IndicatorConfig, PricePoint


def _d(value: float) -> Decimal:
    return Decimal(str(round(value, 2)))


def make_points(
    closes: list[float],
    highs: list[float] | None = None,
    lows: list[float] | None = None,
    volumes: list[int] | None = None,
    symbol: str = "2330",
    start: date = date(2024, 1, 2),
) -> list[PricePoint]:
    """Build consecutive daily bars; highs/lows default to close +/- 1."""
    highs = highs or [c + 1 for c in closes]
    lows = lows or [max(c - 1, 0.01) for c in closes]
    volumes = volumes or [1000] * len(closes)
    return [
        PricePoint(
            symbol=symbol,
            date=start + timedelta(days=i),
            open=_d(closes[i]),
            high=_d(highs[i]),
            low=_d(lows[i]),
            close=_d(closes[i]),
            volume=volumes[i],
        )
        for i in range(len(closes))
    ]


class TestMovingAverage:
    def test_last_n_closes(self):
        closes = [float(c) for c in range(1, 61)]
        assert moving_average(closes, 5) == 58.0
        assert moving_average(closes, 60) == 30.5

    def test_insufficient_history(self):
        assert moving_average([1.0] * 59, 60) is None


class TestRSI:
    def test_no_losses_is_100(self):
        assert rsi([float(c) for c in range(100, 130)]) == 100.0

    def test_constant_prices_is_100(self):
        assert rsi([100.0] * 30) == 100.0

    def test_balanced_changes_is_50(self):
        closes = [100.0 if i % 2 == 0 else 101.0 for i in range(15)]
        assert rsi(closes) == pytest.approx(50.0)

    def test_wilder_step_after_seed(self):
        # 14 alternating deltas seed avg gain = avg loss = 0.5, then a +2 delta
        closes = [100.0 if i % 2 == 0 else 101.0 for i in range(15)]
        closes.append(closes[-1] + 2)

        avg_gain = (0.5 * 13 + 2) / 14
        avg_loss = (0.5 * 13) / 14
        expected = 100 - 100 / (1 + avg_gain / avg_loss)
        assert rsi(closes) == pytest.approx(expected)
        assert rsi(closes) == pytest.approx(56.6667, abs=1e-4)

    def test_needs_period_plus_one_closes(self):
        assert rsi([100.0] * 14) is None
        assert rsi([100.0] * 15) is not None


class TestMACD:
    def test_requires_35_closes(self):
        closes = [float(c) for c in range(1, 35)]
        assert macd(closes) == (None, None, None)

        line, signal, hist = macd(closes + [35.0])
        assert line is not None and signal is not None and hist is not None

    def test_constant_prices_are_zero(self):
        line, signal, hist = macd([50.0] * 40)

        assert line == pytest.approx(0.0, abs=1e-9)
        assert signal == pytest.approx(0.0, abs=1e-9)
        assert hist == pytest.approx(0.0, abs=1e-9)

    def test_uptrend_is_positive(self):
        line, signal, hist = macd([float(c) for c in range(1, 61)])

        assert line > 0
        assert signal > 0
        assert hist == pytest.approx(line - signal)


class TestStochastic:
    def test_single_window(self):
        k, d = stochastic_kd([10, 10, 10], [0, 0, 0], [5, 5, 10], period=3)

        # RSV = 100; K = 2/3*50 + 1/3*100; D = 2/3*50 + 1/3*K
        assert k == pytest.approx(200 / 3)
        assert d == pytest.approx(100 / 3 + 200 / 9)

    def test_flat_window_gives_50(self):
        k, d = stochastic_kd([100] * 9, [100] * 9, [100] * 9)

        assert k == pytest.approx(50.0)
        assert d == pytest.approx(50.0)

    def test_insufficient_history(self):
        assert stochastic_kd([10] * 8, [9] * 8, [9.5] * 8) == (None, None)


class TestBollinger:
    def test_known_values(self):
        closes = [float(c) for c in range(1, 21)]
        upper, middle, lower = bollinger_bands(closes)

        sd = math.sqrt(33.25)  # population stddev of 1..20
        assert middle == pytest.approx(10.5)
        assert upper == pytest.approx(10.5 + 2 * sd)
        assert lower == pytest.approx(10.5 - 2 * sd)

    def test_uses_trailing_window(self):
        closes = [1000.0] * 10 + [100.0] * 20
        upper, middle, lower = bollinger_bands(closes)
        assert upper == middle == lower == 100.0

    def test_insufficient_history(self):
        assert bollinger_bands([1.0] * 19) == (None, None, None)


class TestVWAP:
    def test_volume_weighted(self):
        prices = [10.0] * 10 + [20.0] * 10
        volumes = [100] * 10 + [300] * 10

        assert vwap(prices, prices, prices, volumes) == pytest.approx(17.5)

    def test_zero_volume_is_absent(self):
        prices = [10.0] * 20
        assert vwap(prices, prices, prices, [0] * 20) is None

    def test_insufficient_history(self):
        prices = [10.0] * 19
        assert vwap(prices, prices, prices, [1] * 19) is None


class TestATR:
    def test_constant_range(self):
        highs = [102.0] * 20
        lows = [100.0] * 20
        closes = [101.0] * 20

        assert atr(highs, lows, closes) == pytest.approx(2.0)

    def test_needs_period_plus_one_bars(self):
        assert atr([102.0] * 14, [100.0] * 14, [101.0] * 14) is None
        assert atr([102.0] * 15, [100.0] * 15, [101.0] * 15) == pytest.approx(2.0)


class TestDMI:
    def test_steady_uptrend(self):
        closes = [100.0 + i for i in range(40)]
        highs = [c + 1 for c in closes]
        lows = [c - 1 for c in closes]

        adx, plus_di, minus_di = dmi(highs, lows, closes)

        # +DM = 1 and TR = 2 on every bar, no -DM
        assert plus_di == pytest.approx(50.0)
        assert minus_di == pytest.approx(0.0)
        assert adx == pytest.approx(100.0)

    def test_flat_prices_fall_back_to_zero(self):
        adx, plus_di, minus_di = dmi([100.0] * 40, [100.0] * 40, [100.0] * 40)
        assert (adx, plus_di, minus_di) == (0.0, 0.0, 0.0)

    def test_needs_two_periods_of_bars(self):
        closes = [100.0 + i for i in range(29)]
        highs = [c + 1 for c in closes]
        lows = [c - 1 for c in closes]

        assert dmi(highs[:28], lows[:28], closes[:28]) == (None, None, None)
        assert dmi(highs, lows, closes)[0] is not None


class TestWilliamsR:
    def test_close_at_high(self):
        closes = [105.0] * 13 + [110.0]
        assert williams_r([110.0] * 14, [100.0] * 14, closes) == 0

    def test_close_at_low(self):
        closes = [105.0] * 13 + [100.0]
        assert williams_r([110.0] * 14, [100.0] * 14, closes) == pytest.approx(-100.0)

    def test_flat_window(self):
        assert williams_r([50.0] * 14, [50.0] * 14, [50.0] * 14) == -50.0

    def test_insufficient_history(self):
        assert williams_r([1.0] * 13, [1.0] * 13, [1.0] * 13) is None


class TestOBV:
    def test_accumulates_by_close_direction(self):
        # up +200, equal 0, down -400
        assert obv([10, 11, 11, 10], [100, 200, 300, 400]) == -200

    def test_single_bar(self):
        assert obv([10], [100]) is None


class TestIndicatorCalculator:
    def test_below_floor_returns_none(self):
        calc = IndicatorCalculator()
        points = make_points([100.0 + i for i in range(19)])

        assert calc.calculate_latest(points) is None

    def test_floor_met_with_partial_coverage(self):
        calc = IndicatorCalculator()
        points = make_points([100.0 + i for i in range(20)])

        record = calc.calculate_latest(points)

        assert record is not None
        assert record.date == points[-1].date
        assert record.ma5 == Decimal("117.00")
        assert record.ma20 == Decimal("109.50")
        assert record.rsi == Decimal("100.00")
        assert record.bollinger_middle == Decimal("109.50")
        # Longer lookbacks stay absent
        assert record.ma60 is None
        assert record.macd is None
        assert record.macd_signal is None
        assert record.adx is None
        assert record.obv == 19 * 1000

    def test_full_history_has_every_indicator(self):
        closes = [100 + 10 * math.sin(i / 5) for i in range(80)]
        record = IndicatorCalculator().calculate_latest(make_points(closes))

        assert len(record.available()) == 20

    def test_rounding_policy(self):
        closes = [100 + 10 * math.sin(i / 5) for i in range(80)]
        record = IndicatorCalculator().calculate_latest(make_points(closes))

        assert record.ma5.as_tuple().exponent == -2
        assert record.rsi.as_tuple().exponent == -2
        assert record.macd.as_tuple().exponent == -4
        assert record.atr.as_tuple().exponent == -4
        assert isinstance(record.obv, int)

    def test_ma5_matches_last_five_closes(self):
        closes = [float(100 + (i * 7) % 13) for i in range(40)]
        points = make_points(closes)
        record = IndicatorCalculator().calculate_latest(points)

        expected = (sum(p.close for p in points[-5:]) / 5).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        assert record.ma5 == expected
        # Feeding exactly the last five closes back reproduces the value
        assert moving_average([float(p.close) for p in points[-5:]], 5) == pytest.approx(
            float(expected), abs=0.005
        )

    def test_configurable_floor(self):
        calc = IndicatorCalculator(IndicatorConfig(min_history=5))
        record = calc.calculate_latest(make_points([1.0, 2.0, 3.0, 4.0, 5.0]))

        assert record.ma5 == Decimal("3.00")
        assert record.ma10 is None
        assert record.rsi is None

    def test_require_latest_raises(self):
        points = make_points([100.0] * 10)
        with pytest.raises(InsufficientHistoryError, match="10 rows"):
            IndicatorCalculator().require_latest(points)

    def test_calculate_history_last_two_dates(self):
        points = make_points([100.0 + i for i in range(25)])
        records = IndicatorCalculator().calculate_history(points, count=2)

        assert [r.date for r in records] == [points[-2].date, points[-1].date]

    def test_calculate_history_skips_short_prefixes(self):
        points = make_points([100.0 + i for i in range(20)])
        records = IndicatorCalculator().calculate_history(points, count=2)

        assert len(records) == 1
        assert records[0].date == points[-1].date


class TestMalformedInput:
    def test_unordered_dates(self):
        points = make_points([100.0] * 25)
        points[3], points[4] = points[4], points[3]

        with pytest.raises(MalformedInputError, match="ascending"):
            IndicatorCalculator().calculate_latest(points)

    def test_duplicate_dates(self):
        points = make_points([100.0] * 25)
        points.insert(5, points[4])

        with pytest.raises(MalformedInputError):
            IndicatorCalculator().calculate_latest(points)

    def test_mixed_symbols(self):
        points = make_points([100.0] * 10) + make_points(
            [100.0] * 15, symbol="2317", start=date(2024, 2, 1)
        )
        with pytest.raises(MalformedInputError, match="2317"):
            IndicatorCalculator().calculate_latest(points)

    def test_negative_price_rejected_at_boundary(self):
        with pytest.raises(ValidationError):
            PricePoint(
                symbol="2330",
                date=date(2024, 1, 2),
                open=Decimal("10"),
                high=Decimal("10"),
                low=Decimal("9"),
                close=Decimal("-1"),
                volume=100,
            )

    def test_non_numeric_volume_rejected(self):
        with pytest.raises(ValidationError):
            PricePoint(
                symbol="2330",
                date=date(2024, 1, 2),
                open=Decimal("10"),
                high=Decimal("10"),
                low=Decimal("9"),
                close=Decimal("9.5"),
                volume="lots",
            )

    def test_bypassed_validation_still_rejected(self):
        points = make_points([100.0] * 25)
        points[10] = PricePoint.model_construct(
            symbol="2330",
            date=points[10].date,
            open=Decimal("100"),
            high=Decimal("101"),
            low=Decimal("99"),
            close=Decimal("-5"),
            volume=1000,
        )
        with pytest.raises(MalformedInputError, match="close"):
            IndicatorCalculator().calculate_latest(points)
