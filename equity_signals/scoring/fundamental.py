"""Fundamental score (0-100) from revenue, EPS and valuation."""

import logging
from decimal import Decimal

from equity_signals.analysis.fundamental import (
    analyze_eps_trend,
    analyze_revenue_trend,
    calculate_valuation,
)
from equity_signals.models.config import FundamentalScoreThresholds
from equity_signals.models.fundamentals import FinancialFacts
from equity_signals.models.score import Score, ScoreKind
from equity_signals.scoring.common import finalize_score

logger = logging.getLogger(__name__)


def revenue_adjustment(yoy: float | None, t: FundamentalScoreThresholds) -> float | None:
    if yoy is None:
        return None
    if yoy > t.revenue_yoy_strong:
        return t.revenue_strong_points
    if yoy > t.revenue_yoy_good:
        return t.revenue_good_points
    if yoy > 0:
        return t.revenue_positive_points
    if yoy > t.revenue_yoy_weak:
        return t.revenue_soft_decline_points
    return t.revenue_decline_points


def eps_ttm_adjustment(eps_ttm: float | None, t: FundamentalScoreThresholds) -> float | None:
    if eps_ttm is None:
        return None
    return t.eps_ttm_positive_points if eps_ttm > 0 else 0.0


def eps_growth_adjustment(growth: float | None, t: FundamentalScoreThresholds) -> float | None:
    if growth is None:
        return None
    if growth > t.eps_growth_strong:
        return t.eps_growth_strong_points
    if growth > 0:
        return t.eps_growth_positive_points
    return t.eps_growth_negative_points


def pe_adjustment(pe: float | None, t: FundamentalScoreThresholds) -> float | None:
    if pe is None:
        return None
    if 0 < pe < t.pe_low:
        return t.pe_low_points
    if t.pe_low <= pe < t.pe_fair:
        return t.pe_fair_points
    if pe >= t.pe_high:
        return t.pe_high_points
    return 0.0


def dividend_adjustment(dividend_yield: float | None, t: FundamentalScoreThresholds) -> float | None:
    if dividend_yield is None:
        return None
    return t.dividend_yield_points if dividend_yield > t.dividend_yield_high else 0.0


def score_fundamental(
    facts: FinancialFacts,
    price: Decimal | float | None = None,
    thresholds: FundamentalScoreThresholds | None = None,
) -> Score:
    """Score one symbol's fundamentals.

    Args:
        facts: Monthly revenue, quarterly financials and dividends.
        price: Latest close; valuation rules are skipped without it.
        thresholds: Rule thresholds; defaults to ``FundamentalScoreThresholds()``.
    """
    t = thresholds or FundamentalScoreThresholds()

    revenue = analyze_revenue_trend(facts, months=6)
    eps = analyze_eps_trend(facts)
    valuation = calculate_valuation(facts, price) if price is not None else None

    revenue_yoy = revenue.latest_yoy if revenue else None
    eps_ttm = eps.eps_ttm if eps else None
    eps_growth = eps.latest_growth if eps else None
    pe_ratio = valuation.pe_ratio if valuation else None
    dividend_yield = valuation.dividend_yield if valuation else None

    adjustments = {
        "revenue_yoy": revenue_adjustment(revenue_yoy, t),
        "eps_ttm": eps_ttm_adjustment(eps_ttm, t),
        "eps_growth": eps_growth_adjustment(eps_growth, t),
        "pe_ratio": pe_adjustment(pe_ratio, t),
        "dividend_yield": dividend_adjustment(dividend_yield, t),
    }
    score = finalize_score(t.baseline, adjustments)

    breakdown = {
        "revenue_yoy": revenue_yoy,
        "revenue_momentum": revenue.momentum.value if revenue else None,
        "eps_ttm": eps_ttm,
        "eps_growth": eps_growth,
        "eps_trend": ("growing" if eps.is_growing else "declining") if eps else None,
        "pe_ratio": pe_ratio,
        "pb_ratio": valuation.pb_ratio if valuation else None,
        "dividend_yield": dividend_yield,
    }
    logger.debug("%s fundamental score %d", facts.symbol, score)
    return Score(
        symbol=facts.symbol,
        kind=ScoreKind.FUNDAMENTAL,
        score=score,
        breakdown=breakdown,
        adjustments=adjustments,
    )
