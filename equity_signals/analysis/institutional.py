"""Institutional investor flow and margin trading analysis."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Mapping, Sequence

from equity_signals.models.institutional import InstitutionalFlow, MarginBalance

logger = logging.getLogger(__name__)

INVESTORS = ("foreign", "trust", "dealer")


@dataclass
class InvestorSummary:
    net_total: int
    buy_days: int
    sell_days: int

    @property
    def is_net_buyer(self) -> bool:
        return self.net_total > 0


@dataclass
class InstitutionalTrend:
    symbol: str
    period_days: int
    foreign: InvestorSummary
    trust: InvestorSummary
    dealer: InvestorSummary
    total_net: int

    @property
    def is_net_buying(self) -> bool:
        return self.total_net > 0


@dataclass
class Accumulation:
    symbol: str
    is_accumulating: bool
    foreign_consecutive_buy_days: int
    trust_consecutive_buy_days: int
    total_consecutive_buy_days: int
    accumulation_volume: int


class ConsensusLevel(str, Enum):
    ALL_BUYING = "all_buying"
    ALL_SELLING = "all_selling"
    FOREIGN_TRUST_BUYING = "foreign_trust_buying"
    FOREIGN_TRUST_SELLING = "foreign_trust_selling"
    DIVERGENT = "divergent"


@dataclass
class Consensus:
    symbol: str
    flow: InstitutionalFlow
    level: ConsensusLevel
    score: int  # 100 all buying, 0 all selling, 50 otherwise


class MarginInterpretation(str, Enum):
    RETAIL_BULLISH = "retail_bullish"  # margin up, short down
    SHORT_SQUEEZE_SETUP = "short_squeeze_setup"  # margin down, short up
    DIVERGENT = "divergent"  # both up
    SIDELINED = "sidelined"  # both down
    UNCHANGED = "unchanged"


@dataclass
class MarginTrend:
    symbol: str
    period_days: int
    margin_balance: int
    margin_change: int
    short_balance: int
    short_change: int
    short_margin_ratio: float  # percent
    interpretation: MarginInterpretation


@dataclass
class InstitutionalScreenEntry:
    symbol: str
    foreign_total: int
    trust_total: int
    dealer_total: int
    total_net: int
    data_days: int


def _recent(flows: Sequence[InstitutionalFlow], days: int) -> list[InstitutionalFlow]:
    return sorted(flows, key=lambda f: f.date)[-days:]


def _summarise(flows: Sequence[InstitutionalFlow], investor: str) -> InvestorSummary:
    nets = [getattr(f, f"{investor}_net") for f in flows]
    buy_days = sum(1 for n in nets if n > 0)
    return InvestorSummary(
        net_total=sum(nets),
        buy_days=buy_days,
        sell_days=len(nets) - buy_days,
    )


def analyze_institutional_trend(
    flows: Sequence[InstitutionalFlow],
    days: int = 20,
) -> InstitutionalTrend | None:
    """Net buying per investor class over the last ``days`` sessions."""
    data = _recent(flows, days)
    if not data:
        return None

    return InstitutionalTrend(
        symbol=data[-1].symbol,
        period_days=len(data),
        foreign=_summarise(data, "foreign"),
        trust=_summarise(data, "trust"),
        dealer=_summarise(data, "dealer"),
        total_net=sum(f.total_net for f in data),
    )


def _consecutive(values: Sequence[int]) -> int:
    count = 0
    for value in values:
        if value <= 0:
            break
        count += 1
    return count


def detect_accumulation(
    flows: Sequence[InstitutionalFlow],
    min_consecutive_days: int = 3,
) -> Accumulation | None:
    """Consecutive net-buy streaks ending at the latest session.

    Accumulation is flagged when foreign or trust investors have bought on
    at least ``min_consecutive_days`` consecutive days.
    """
    data = list(reversed(_recent(flows, 30)))  # newest first
    if not data:
        return None

    foreign_days = _consecutive([f.foreign_net for f in data])
    trust_days = _consecutive([f.trust_net for f in data])
    total_days = _consecutive([f.total_net for f in data])

    result = Accumulation(
        symbol=data[0].symbol,
        is_accumulating=(
            foreign_days >= min_consecutive_days or trust_days >= min_consecutive_days
        ),
        foreign_consecutive_buy_days=foreign_days,
        trust_consecutive_buy_days=trust_days,
        total_consecutive_buy_days=total_days,
        accumulation_volume=sum(f.total_net for f in data[:total_days]),
    )
    if result.is_accumulating:
        logger.debug(
            "%s: accumulation (foreign %d days, trust %d days)",
            result.symbol,
            foreign_days,
            trust_days,
        )
    return result


def _direction(value: int) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def analyze_consensus(flows: Sequence[InstitutionalFlow]) -> Consensus | None:
    """Whether the three investor classes traded in the same direction on the latest day."""
    if not flows:
        return None

    latest = max(flows, key=lambda f: f.date)
    foreign = _direction(latest.foreign_net)
    trust = _direction(latest.trust_net)
    dealer = _direction(latest.dealer_net)

    all_same = foreign != 0 and foreign == trust == dealer
    if all_same:
        level = ConsensusLevel.ALL_BUYING if foreign > 0 else ConsensusLevel.ALL_SELLING
    elif foreign != 0 and foreign == trust:
        level = (
            ConsensusLevel.FOREIGN_TRUST_BUYING
            if foreign > 0
            else ConsensusLevel.FOREIGN_TRUST_SELLING
        )
    else:
        level = ConsensusLevel.DIVERGENT

    if all_same:
        score = 100 if foreign > 0 else 0
    else:
        score = 50

    return Consensus(symbol=latest.symbol, flow=latest, level=level, score=score)


def analyze_margin_trend(
    balances: Sequence[MarginBalance],
    days: int = 20,
) -> MarginTrend | None:
    """Change in margin and short balances over the last ``days`` sessions."""
    data = sorted(balances, key=lambda b: b.date)[-days:]
    if len(data) < 2:
        return None

    first, last = data[0], data[-1]
    margin_change = last.margin_balance - first.margin_balance
    short_change = last.short_balance - first.short_balance

    if margin_change > 0 and short_change < 0:
        interpretation = MarginInterpretation.RETAIL_BULLISH
    elif margin_change < 0 and short_change > 0:
        interpretation = MarginInterpretation.SHORT_SQUEEZE_SETUP
    elif margin_change > 0 and short_change > 0:
        interpretation = MarginInterpretation.DIVERGENT
    elif margin_change < 0 and short_change < 0:
        interpretation = MarginInterpretation.SIDELINED
    else:
        interpretation = MarginInterpretation.UNCHANGED

    ratio = (
        last.short_balance / last.margin_balance * 100 if last.margin_balance > 0 else 0.0
    )
    return MarginTrend(
        symbol=last.symbol,
        period_days=len(data),
        margin_balance=last.margin_balance,
        margin_change=margin_change,
        short_balance=last.short_balance,
        short_change=short_change,
        short_margin_ratio=ratio,
        interpretation=interpretation,
    )


def screen_by_institutional(
    universe: Mapping[str, Sequence[InstitutionalFlow]],
    foreign_net_min: int | None = None,
    trust_net_min: int | None = None,
    days: int = 5,
    limit: int = 50,
) -> list[InstitutionalScreenEntry]:
    """Rank symbols by institutional net buying over the last ``days`` calendar days.

    The window ends at the latest date found anywhere in ``universe``.
    """
    latest_dates = [max(f.date for f in flows) for flows in universe.values() if flows]
    if not latest_dates:
        return []
    since = max(latest_dates) - timedelta(days=days)

    entries = []
    for symbol, flows in universe.items():
        window = [f for f in flows if f.date >= since]
        if not window:
            continue
        entry = InstitutionalScreenEntry(
            symbol=symbol,
            foreign_total=sum(f.foreign_net for f in window),
            trust_total=sum(f.trust_net for f in window),
            dealer_total=sum(f.dealer_net for f in window),
            total_net=sum(f.total_net for f in window),
            data_days=len(window),
        )
        if foreign_net_min is not None and entry.foreign_total < foreign_net_min:
            continue
        if trust_net_min is not None and entry.trust_total < trust_net_min:
            continue
        entries.append(entry)

    entries.sort(key=lambda e: e.total_net, reverse=True)
    return entries[:limit]
