"""Tests for the universe batch runner."""

import logging
from datetime import date, timedelta

import pytest

from equity_signals.config import get_settings
from equity_signals.indicators import BatchResult, IndicatorCalculator, calculate_universe
from equity_signals.indicators.batch import to_price_points
from equity_signals.models import IndicatorConfig, PriceHistory
from equity_signals.strategy import build_snapshot


def make_rows(count: int, symbol: str = "2330") -> list[dict]:
    start = date(2024, 1, 2)
    return [
        {
            "symbol": symbol,
            "date": (start + timedelta(days=i)).isoformat(),
            "open": str(100 + i),
            "high": str(101 + i),
            "low": str(99 + i),
            "close": str(100 + i),
            "volume": 1000,
        }
        for i in range(count)
    ]


class TestCalculateUniverse:
    def test_mixed_universe(self, caplog):
        bad = make_rows(25, symbol="2317")
        bad[10]["volume"] = -5
        histories = {
            "2330": make_rows(30),
            "2454": make_rows(5, symbol="2454"),
            "2317": bad,
        }

        with caplog.at_level(logging.WARNING):
            result = calculate_universe(histories)

        assert list(result.records) == ["2330"]
        assert result.records["2330"].date == date(2024, 1, 31)
        assert result.skipped == ["2454"]
        assert list(result.failed) == ["2317"]
        assert result.total == 3
        assert "2317" in caplog.text

    def test_failure_does_not_stop_batch(self):
        unordered = make_rows(25, symbol="2317")
        unordered.reverse()
        histories = {"2317": unordered, "2330": make_rows(25)}

        result = calculate_universe(histories)

        assert "ascending" in result.failed["2317"]
        assert "2330" in result.records

    def test_custom_calculator(self):
        calculator = IndicatorCalculator(IndicatorConfig(min_history=5))
        result = calculate_universe({"2454": make_rows(5, symbol="2454")}, calculator)

        assert result.skipped == []
        assert result.records["2454"].ma5 is not None

    def test_empty_universe(self):
        result = calculate_universe({})

        assert result == BatchResult()
        assert result.total == 0


class TestSettingsDefaults:
    @pytest.fixture(autouse=True)
    def _fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_history_floor_from_settings(self, monkeypatch):
        monkeypatch.setenv("EQUITY_SIGNALS_MIN_HISTORY", "30")
        rows = make_rows(25)

        result = calculate_universe({"2330": rows})
        snapshot = build_snapshot(to_price_points(rows))

        assert result.skipped == ["2330"]
        assert result.records == {}
        assert snapshot.indicators is None

    def test_periods_from_settings(self, monkeypatch):
        # 25 rows cover a 14-day RSI but not a 30-day one
        monkeypatch.setenv("EQUITY_SIGNALS_RSI_PERIOD", "30")
        rows = make_rows(25)

        record = calculate_universe({"2330": rows}).records["2330"]

        assert record.rsi is None
        assert record == build_snapshot(to_price_points(rows)).indicators


class TestPriceHistoryInput:
    def test_history_model(self):
        history = PriceHistory(symbol="2330")
        history.extend(to_price_points(make_rows(25)))

        result = calculate_universe({"2330": history})

        assert result.records["2330"] == calculate_universe({"2330": make_rows(25)}).records["2330"]
