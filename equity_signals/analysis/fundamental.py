"""Revenue, EPS and valuation analysis.

Pure functions over ``FinancialFacts``; the facts themselves are fetched
and stored elsewhere.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Sequence

from equity_signals.models.fundamentals import (
    FinancialFacts,
    MonthlyRevenue,
    QuarterlyFinancials,
)


class RevenueMomentum(str, Enum):
    """Shape of the last three monthly YoY growth rates."""

    STRONG_GROWTH = "strong_growth"
    STEADY_GROWTH = "steady_growth"
    ACCELERATING_DECLINE = "accelerating_decline"
    CONTINUING_DECLINE = "continuing_decline"
    TURNING_POSITIVE = "turning_positive"
    FLAT = "flat"


@dataclass
class RevenueTrend:
    symbol: str
    latest_period: str
    latest_revenue: float
    latest_mom: float | None
    latest_yoy: float | None
    avg_yoy: float | None
    momentum: RevenueMomentum
    history: list[MonthlyRevenue] = field(default_factory=list)


@dataclass
class EpsGrowth:
    period: str
    eps: float
    yoy_growth: float  # percent


@dataclass
class EpsTrend:
    symbol: str
    eps_ttm: float
    quarterly_eps: list[tuple[str, float]]
    yoy_growth: list[EpsGrowth]

    @property
    def latest_growth(self) -> float | None:
        return self.yoy_growth[-1].yoy_growth if self.yoy_growth else None

    @property
    def is_growing(self) -> bool:
        growth = self.latest_growth
        return growth is not None and growth > 0


@dataclass
class Valuation:
    symbol: str
    price: float
    eps_ttm: float | None = None
    pe_ratio: float | None = None
    book_value: float | None = None
    pb_ratio: float | None = None
    dividend_yield: float | None = None  # percent


def _momentum(yoy_values: Sequence[float]) -> RevenueMomentum:
    if len(yoy_values) < 3:
        return RevenueMomentum.FLAT

    first, second, third = yoy_values[-3:]
    all_positive = all(v > 0 for v in (first, second, third))
    all_negative = all(v < 0 for v in (first, second, third))
    increasing = third > second > first
    decreasing = third < second < first

    if all_positive and increasing:
        return RevenueMomentum.STRONG_GROWTH
    if all_positive:
        return RevenueMomentum.STEADY_GROWTH
    if all_negative and decreasing:
        return RevenueMomentum.ACCELERATING_DECLINE
    if all_negative:
        return RevenueMomentum.CONTINUING_DECLINE
    if third > 0 and first < 0:
        return RevenueMomentum.TURNING_POSITIVE
    return RevenueMomentum.FLAT


def analyze_revenue_trend(facts: FinancialFacts, months: int = 12) -> RevenueTrend | None:
    """Summarise the last ``months`` monthly revenue reports.

    Returns:
        RevenueTrend, or ``None`` if there is no monthly revenue.
    """
    data = facts.sorted_revenue()[-months:]
    if not data:
        return None

    latest = data[-1]
    yoy_values = [float(r.revenue_yoy) for r in data if r.revenue_yoy is not None]
    avg_yoy = sum(yoy_values) / len(yoy_values) if yoy_values else None

    return RevenueTrend(
        symbol=facts.symbol,
        latest_period=latest.period,
        latest_revenue=float(latest.revenue),
        latest_mom=float(latest.revenue_mom) if latest.revenue_mom is not None else None,
        latest_yoy=float(latest.revenue_yoy) if latest.revenue_yoy is not None else None,
        avg_yoy=avg_yoy,
        momentum=_momentum(yoy_values),
        history=data,
    )


def _quarters_with_eps(facts: FinancialFacts, limit: int) -> list[QuarterlyFinancials]:
    return [q for q in facts.sorted_quarters() if q.eps is not None][-limit:]


def analyze_eps_trend(facts: FinancialFacts) -> EpsTrend | None:
    """EPS over the last eight reported quarters.

    Same-quarter YoY growth is computed wherever the prior-year quarter is
    present with non-zero EPS, as ``(eps - prev) / |prev| * 100``.
    """
    data = _quarters_with_eps(facts, 8)
    if not data:
        return None

    by_period = {q.sort_key: float(q.eps) for q in data}
    growth = []
    for q in data:
        prev = by_period.get((q.year - 1, q.quarter))
        if prev is None or prev == 0:
            continue
        current = float(q.eps)
        growth.append(
            EpsGrowth(
                period=q.period,
                eps=current,
                yoy_growth=(current - prev) / abs(prev) * 100,
            )
        )

    recent = [(q.period, float(q.eps)) for q in data[-4:]]
    return EpsTrend(
        symbol=facts.symbol,
        eps_ttm=sum(eps for _, eps in recent),
        quarterly_eps=recent,
        yoy_growth=growth,
    )


def calculate_valuation(facts: FinancialFacts, price: Decimal | float) -> Valuation:
    """P/E, P/B and dividend yield at ``price``.

    P/E needs a positive trailing EPS and P/B a positive book value; the
    dividend yield uses the most recent year's cash dividend.
    """
    price = float(price)
    result = Valuation(symbol=facts.symbol, price=price)

    recent = _quarters_with_eps(facts, 4)
    if recent:
        eps_ttm = sum(float(q.eps) for q in recent)
        result.eps_ttm = eps_ttm
        if eps_ttm > 0:
            result.pe_ratio = price / eps_ttm

    with_book_value = [
        q for q in facts.sorted_quarters() if q.book_value_per_share is not None
    ]
    if with_book_value:
        book_value = float(with_book_value[-1].book_value_per_share)
        result.book_value = book_value
        if book_value > 0:
            result.pb_ratio = price / book_value

    dividend = facts.latest_dividend()
    if dividend is not None:
        cash = float(dividend.cash_dividend)
        if cash > 0 and price > 0:
            result.dividend_yield = cash / price * 100

    return result
