"""Run the indicator engine over a universe of instruments.

Instruments are independent: a failure for one symbol is logged and
recorded, and the batch moves on to the next.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from equity_signals.config import get_settings
from equity_signals.errors import IndicatorError
from equity_signals.indicators.indicators import IndicatorCalculator
from equity_signals.models.indicator import IndicatorRecord
from equity_signals.models.price import PriceHistory, PricePoint

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of a universe run.

    Attributes:
        records: Latest indicator record per symbol.
        skipped: Symbols with too little history to compute anything.
        failed: Symbol -> error message for rejected histories.
    """

    records: dict[str, IndicatorRecord] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.records) + len(self.skipped) + len(self.failed)


def to_price_points(
    rows: PriceHistory | Sequence[PricePoint | Mapping[str, Any]],
) -> list[PricePoint]:
    """Validate upstream rows into ``PricePoint`` models.

    Raises:
        pydantic.ValidationError: If a row has missing, negative or
            non-numeric fields.
    """
    if isinstance(rows, PriceHistory):
        return list(rows.points)
    return [
        row if isinstance(row, PricePoint) else PricePoint.model_validate(row)
        for row in rows
    ]


def calculate_universe(
    histories: Mapping[str, PriceHistory | Sequence[PricePoint | Mapping[str, Any]]],
    calculator: IndicatorCalculator | None = None,
) -> BatchResult:
    """Compute the latest indicator record for every symbol in ``histories``.

    Args:
        histories: Symbol -> bars in ascending date order. Bars may be
            ``PricePoint`` models, plain dicts with the same fields, or a
            ``PriceHistory``.
        calculator: Engine to use; one built from the settings if omitted.

    Returns:
        BatchResult with records, skipped and failed symbols.
    """
    calculator = calculator or IndicatorCalculator(get_settings().indicator_config())
    result = BatchResult()

    for symbol, rows in histories.items():
        try:
            points = to_price_points(rows)
            record = calculator.calculate_latest(points)
        except (IndicatorError, ValidationError) as e:
            logger.warning("Indicator calculation failed for %s: %s", symbol, e)
            result.failed[symbol] = str(e)
            continue

        if record is None:
            result.skipped.append(symbol)
        else:
            result.records[symbol] = record

    logger.info(
        "Indicators calculated: %d ok, %d insufficient history, %d failed",
        len(result.records),
        len(result.skipped),
        len(result.failed),
    )
    return result
