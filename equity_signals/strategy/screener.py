"""Apply a named screen across a universe of instrument snapshots."""

import logging
from typing import Any, Mapping, Sequence

from equity_signals.config import get_settings
from equity_signals.errors import IndicatorError
from equity_signals.indicators.indicators import IndicatorCalculator, as_points
from equity_signals.models.price import PriceHistory, PricePoint
from equity_signals.signals.detectors import average_volume
from equity_signals.strategy.protocol import InstrumentSnapshot, ScreenMatch, ScreenResult
from equity_signals.strategy.registry import create_strategy, strategy_parameters

logger = logging.getLogger(__name__)


def build_snapshot(
    points: PriceHistory | Sequence[PricePoint],
    name: str = "",
    calculator: IndicatorCalculator | None = None,
) -> InstrumentSnapshot | None:
    """Snapshot of one instrument from its price history.

    Computes indicator records for the last two dates and the trailing
    20-day average volume. Returns ``None`` for an empty history.

    Raises:
        MalformedInputError: If the history breaks the input contract.
    """
    points = as_points(points)
    if not points:
        return None
    calculator = calculator or IndicatorCalculator(get_settings().indicator_config())

    records = calculator.calculate_history(points, count=2)
    latest = points[-1]
    indicators = records[-1] if records and records[-1].date == latest.date else None
    previous = None
    if indicators is not None and len(records) >= 2:
        previous = records[-2]

    return InstrumentSnapshot(
        symbol=latest.symbol,
        name=name,
        latest=latest,
        avg_volume=average_volume(points),
        indicators=indicators,
        previous=previous,
    )


def build_snapshots(
    histories: Mapping[str, PriceHistory | Sequence[PricePoint]],
    names: Mapping[str, str] | None = None,
    calculator: IndicatorCalculator | None = None,
) -> list[InstrumentSnapshot]:
    """Snapshots for a whole universe, skipping instruments that fail."""
    names = names or {}
    snapshots = []
    for symbol, points in histories.items():
        try:
            snapshot = build_snapshot(points, names.get(symbol, ""), calculator)
        except IndicatorError as e:
            logger.warning("Skipping %s in screen universe: %s", symbol, e)
            continue
        if snapshot is not None:
            snapshots.append(snapshot)
    return snapshots


def screen_by_strategy(
    strategy: str,
    snapshots: Sequence[InstrumentSnapshot],
    limit: int | None = None,
    **params: Any,
) -> ScreenResult:
    """Run the named screen over ``snapshots`` and rank the matches.

    Args:
        strategy: Registered strategy name, e.g. ``"golden_cross"``.
        snapshots: One snapshot per instrument.
        limit: Maximum matches returned; defaults to the configured limit (50).
        **params: Strategy parameters, e.g. ``rsi_threshold=25``. Parameters
            the named strategy does not take are ignored.

    Raises:
        UnknownStrategyError: If ``strategy`` is not registered.
    """
    settings = get_settings()
    if limit is None:
        limit = settings.screen_limit
    accepted = strategy_parameters(strategy)
    if accepted is not None:
        ignored = sorted(set(params) - accepted)
        if ignored:
            logger.debug("Screen %s ignores parameters: %s", strategy, ", ".join(ignored))
        params = {k: v for k, v in params.items() if k in accepted}
        if "rsi_threshold" in accepted:
            params.setdefault("rsi_threshold", settings.rsi_oversold_threshold)

    screen = create_strategy(strategy, **params)

    matched = [s for s in snapshots if screen.matches(s)]
    # Symbol order first so ties rank deterministically
    matched.sort(key=lambda s: s.symbol)
    matched.sort(key=screen.sort_key, reverse=screen.descending)
    matched = matched[:limit]

    logger.info(
        "Screen %s: %d of %d instruments matched", strategy, len(matched), len(snapshots)
    )
    return ScreenResult(
        strategy=strategy,
        count=len(matched),
        matches=[
            ScreenMatch(
                symbol=s.symbol,
                name=s.name,
                date=s.latest.date,
                close=float(s.latest.close),
                fields=screen.fields(s),
            )
            for s in matched
        ],
    )
