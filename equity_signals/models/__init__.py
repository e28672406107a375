"""Data models."""

from equity_signals.models.config import (
    FundamentalScoreThresholds,
    IndicatorConfig,
    TechnicalScoreWeights,
)
from equity_signals.models.fundamentals import (
    AnnualDividend,
    FinancialFacts,
    MonthlyRevenue,
    QuarterlyFinancials,
)
from equity_signals.models.indicator import IndicatorRecord
from equity_signals.models.institutional import InstitutionalFlow, MarginBalance
from equity_signals.models.price import PriceHistory, PricePoint
from equity_signals.models.score import Score, ScoreKind
from equity_signals.models.signal import Bias, Signal, SignalType

__all__ = [
    "PricePoint",
    "PriceHistory",
    "IndicatorRecord",
    "Signal",
    "SignalType",
    "Bias",
    "Score",
    "ScoreKind",
    "QuarterlyFinancials",
    "MonthlyRevenue",
    "AnnualDividend",
    "FinancialFacts",
    "InstitutionalFlow",
    "MarginBalance",
    "IndicatorConfig",
    "TechnicalScoreWeights",
    "FundamentalScoreThresholds",
]
