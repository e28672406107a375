"""Fundamental and institutional analysis on externally supplied facts."""

from equity_signals.analysis.fundamental import (
    EpsTrend,
    RevenueMomentum,
    RevenueTrend,
    Valuation,
    analyze_eps_trend,
    analyze_revenue_trend,
    calculate_valuation,
)
from equity_signals.analysis.institutional import (
    Accumulation,
    Consensus,
    ConsensusLevel,
    InstitutionalScreenEntry,
    InstitutionalTrend,
    InvestorSummary,
    MarginInterpretation,
    MarginTrend,
    analyze_consensus,
    analyze_institutional_trend,
    analyze_margin_trend,
    detect_accumulation,
    screen_by_institutional,
)

__all__ = [
    "EpsTrend",
    "RevenueMomentum",
    "RevenueTrend",
    "Valuation",
    "analyze_eps_trend",
    "analyze_revenue_trend",
    "calculate_valuation",
    "Accumulation",
    "Consensus",
    "ConsensusLevel",
    "InstitutionalScreenEntry",
    "InstitutionalTrend",
    "InvestorSummary",
    "MarginInterpretation",
    "MarginTrend",
    "analyze_consensus",
    "analyze_institutional_trend",
    "analyze_margin_trend",
    "detect_accumulation",
    "screen_by_institutional",
]
