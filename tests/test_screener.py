"""Tests for the strategy registry and screener."""

import logging
from datetime import date, timedelta
from decimal import Decimal

import pytest

from equity_signals.errors import UnknownStrategyError
from equity_signals.models import IndicatorRecord, PriceHistory, PricePoint
from equity_signals.strategy import (
    InstrumentSnapshot,
    ScreenStrategy,
    build_snapshot,
    build_snapshots,
    create_strategy,
    get_strategy_class,
    list_strategies,
    register_strategy,
    screen_by_strategy,
    strategy_parameters,
)
from equity_signals.strategy.registry import _REGISTRY

DAY = date(2024, 3, 1)


def _record(as_of: date, fields: dict | None) -> IndicatorRecord | None:
    if fields is None:
        return None
    values = {k: Decimal(str(v)) for k, v in fields.items()}
    return IndicatorRecord(symbol="x", date=as_of, **values)


def snapshot(
    symbol: str,
    close: float = 100.0,
    volume: int = 1000,
    avg_volume: float | None = 1000.0,
    now: dict | None = None,
    prev: dict | None = None,
) -> InstrumentSnapshot:
    price = Decimal(str(close))
    return InstrumentSnapshot(
        symbol=symbol,
        name=f"Company {symbol}",
        latest=PricePoint(
            symbol=symbol,
            date=DAY,
            open=price,
            high=price,
            low=price,
            close=price,
            volume=volume,
        ),
        avg_volume=avg_volume,
        indicators=_record(DAY, now),
        previous=_record(DAY - timedelta(days=1), prev),
    )


def make_points(count: int, symbol: str = "2330") -> list[PricePoint]:
    start = DAY - timedelta(days=count - 1)
    return [
        PricePoint(
            symbol=symbol,
            date=start + timedelta(days=i),
            open=Decimal(100 + i),
            high=Decimal(101 + i),
            low=Decimal(99 + i),
            close=Decimal(100 + i),
            volume=1000,
        )
        for i in range(count)
    ]


class TestRegistry:
    def test_builtin_strategies(self):
        assert set(list_strategies()) >= {
            "golden_cross",
            "rsi_oversold",
            "macd_golden_cross",
            "volume_breakout",
            "bollinger_squeeze",
        }
        assert list_strategies() == sorted(list_strategies())

    def test_strategies_satisfy_protocol(self):
        for name in list_strategies():
            assert isinstance(create_strategy(name), ScreenStrategy)

    def test_unknown_strategy(self):
        with pytest.raises(UnknownStrategyError) as exc_info:
            get_strategy_class("cup_and_handle")

        assert "cup_and_handle" in str(exc_info.value)
        assert "golden_cross" in str(exc_info.value)

    def test_unknown_strategy_is_key_error(self):
        with pytest.raises(KeyError):
            screen_by_strategy("cup_and_handle", [])

    def test_duplicate_registration(self):
        with pytest.raises(ValueError, match="already registered"):

            @register_strategy("golden_cross")
            class Duplicate:
                pass

    def test_register_custom(self):
        @register_strategy("everything")
        class Everything:
            name = "everything"
            descending = False

            def matches(self, snapshot):
                return True

            def sort_key(self, snapshot):
                return 0.0

            def fields(self, snapshot):
                return {}

        try:
            result = screen_by_strategy("everything", [snapshot("B"), snapshot("A")])
            assert [m.symbol for m in result.matches] == ["A", "B"]
        finally:
            _REGISTRY.pop("everything")


class TestScreens:
    def test_golden_cross(self):
        cross = {"ma5": 11, "ma20": 10}
        before = {"ma5": 9, "ma20": 10}
        snapshots = [
            snapshot("A", close=50, now=cross, prev=before),
            snapshot("B", close=80, now=cross, prev=before),
            snapshot("C", close=90, now=cross, prev=cross),
            snapshot("D", close=95, now=cross),
        ]
        result = screen_by_strategy("golden_cross", snapshots)

        assert result.strategy == "golden_cross"
        assert result.count == 2
        assert [m.symbol for m in result.matches] == ["B", "A"]
        assert result.matches[0].fields == {"ma5": 11.0, "ma20": 10.0}
        assert result.matches[0].name == "Company B"
        assert result.matches[0].close == 80.0

    def test_rsi_oversold_lowest_first(self):
        snapshots = [
            snapshot("A", now={"rsi": 25}),
            snapshot("B", now={"rsi": 18}),
            snapshot("C", now={"rsi": 35}),
            snapshot("D"),
        ]
        result = screen_by_strategy("rsi_oversold", snapshots)

        assert [m.symbol for m in result.matches] == ["B", "A"]

    def test_rsi_oversold_threshold(self):
        snapshots = [snapshot("A", now={"rsi": 25}), snapshot("B", now={"rsi": 18})]
        result = screen_by_strategy("rsi_oversold", snapshots, rsi_threshold=20)

        assert [m.symbol for m in result.matches] == ["B"]

    def test_macd_golden_cross(self):
        snapshots = [
            snapshot("A", now={"macd_histogram": 0.2}, prev={"macd_histogram": -0.1}),
            snapshot("B", now={"macd_histogram": 0.5}, prev={"macd_histogram": 0}),
            snapshot("C", now={"macd_histogram": 0.9}, prev={"macd_histogram": 0.1}),
        ]
        result = screen_by_strategy("macd_golden_cross", snapshots)

        assert [m.symbol for m in result.matches] == ["B", "A"]

    def test_volume_breakout(self):
        snapshots = [
            snapshot("A", volume=3000),
            snapshot("B", volume=5000),
            snapshot("C", volume=2000),
            snapshot("D", volume=9000, avg_volume=None),
        ]
        result = screen_by_strategy("volume_breakout", snapshots)

        assert [m.symbol for m in result.matches] == ["B", "A"]
        assert result.matches[0].fields == {"volume": 5000.0, "avg_volume": 1000.0}

    def test_bollinger_squeeze_tightest_first(self):
        snapshots = [
            snapshot("A", now={"bollinger_upper": 110, "bollinger_middle": 100, "bollinger_lower": 90}),
            snapshot("B", now={"bollinger_upper": 102, "bollinger_middle": 100, "bollinger_lower": 98}),
            snapshot("C", now={"ma5": 100}),
        ]
        result = screen_by_strategy("bollinger_squeeze", snapshots)

        assert [m.symbol for m in result.matches] == ["B", "A"]
        assert result.matches[0].fields["bandwidth"] == pytest.approx(4.0)

    def test_ties_break_by_symbol(self):
        snapshots = [snapshot(s, volume=5000) for s in ("C", "A", "B")]
        result = screen_by_strategy("volume_breakout", snapshots)

        assert [m.symbol for m in result.matches] == ["A", "B", "C"]


class TestParameters:
    def test_declared_parameters(self):
        assert strategy_parameters("golden_cross") == set()
        assert strategy_parameters("rsi_oversold") == {"rsi_threshold"}

    def test_unused_parameter_is_ignored(self):
        snapshots = [
            snapshot("A", now={"ma5": 11, "ma20": 10}, prev={"ma5": 9, "ma20": 10}),
        ]
        result = screen_by_strategy("golden_cross", snapshots, rsi_threshold=30)

        assert [m.symbol for m in result.matches] == ["A"]

    def test_every_strategy_accepts_rsi_threshold(self):
        snapshots = build_snapshots({"2330": make_points(40)})

        for name in list_strategies():
            result = screen_by_strategy(name, snapshots, rsi_threshold=30)
            assert result.strategy == name

    def test_declared_parameter_still_applies(self):
        snapshots = [snapshot("A", now={"rsi": 25}), snapshot("B", now={"rsi": 18})]
        result = screen_by_strategy("rsi_oversold", snapshots, rsi_threshold=20, limit_days=5)

        assert [m.symbol for m in result.matches] == ["B"]


class TestLimit:
    def universe(self, size: int) -> list[InstrumentSnapshot]:
        return [snapshot(f"{i:04d}", volume=3000 + i) for i in range(size)]

    def test_default_cap(self):
        result = screen_by_strategy("volume_breakout", self.universe(60))

        assert result.count == 50
        assert result.matches[0].symbol == "0059"

    def test_custom_limit(self):
        result = screen_by_strategy("volume_breakout", self.universe(60), limit=10)
        assert result.count == 10

    def test_no_matches(self):
        result = screen_by_strategy("volume_breakout", [snapshot("A")])

        assert result.count == 0
        assert result.matches == []


class TestBuildSnapshot:
    def test_empty_history(self):
        assert build_snapshot([]) is None

    def test_latest_and_previous(self):
        points = make_points(25)
        snap = build_snapshot(points, name="TSMC")

        assert snap.symbol == "2330"
        assert snap.name == "TSMC"
        assert snap.latest == points[-1]
        assert snap.avg_volume == 1000.0
        assert snap.indicators.date == DAY
        assert snap.previous.date == DAY - timedelta(days=1)

    def test_minimum_history(self):
        snap = build_snapshot(make_points(20))

        assert snap.indicators is not None
        assert snap.previous is None
        assert snap.avg_volume is None

    def test_short_history(self):
        snap = build_snapshot(make_points(10))

        assert snap.indicators is None
        assert snap.latest.date == DAY

    def test_build_snapshots_skips_bad_history(self, caplog):
        bad = make_points(25, symbol="2317")
        bad[3], bad[4] = bad[4], bad[3]
        histories = {"2330": make_points(25), "2317": bad, "2454": []}

        with caplog.at_level(logging.WARNING):
            snapshots = build_snapshots(histories, names={"2330": "TSMC"})

        assert [s.symbol for s in snapshots] == ["2330"]
        assert snapshots[0].name == "TSMC"
        assert "2317" in caplog.text

    def test_accepts_price_history(self):
        history = PriceHistory(symbol="2330")
        history.extend(make_points(25))

        snap = build_snapshot(history)

        assert snap == build_snapshot(make_points(25))
        assert snap.previous is not None
