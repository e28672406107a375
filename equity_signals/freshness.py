"""Staleness metadata for datasets the engine consumes.

The caller passes ``today`` explicitly so results are reproducible.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel

from equity_signals.config import get_settings


class FreshnessMeta(BaseModel):
    has_data: bool
    latest_date: date | None = None
    days_since_update: int | None = None
    is_stale: bool
    update_frequency: str
    suggestion: str | None = None


class Dataset(str, Enum):
    DAILY_PRICES = "daily_prices"
    INDICATORS = "indicators"
    INSTITUTIONAL = "institutional"
    MARGIN = "margin"
    MONTHLY_REVENUE = "monthly_revenue"
    FINANCIALS = "financials"
    DIVIDENDS = "dividends"


class FreshnessPolicy(BaseModel):
    """How often a dataset updates and how old it may get.

    ``stale_days`` of ``None`` means the configured daily window.
    """

    frequency: str
    refresh_action: str
    stale_days: int | None = None


FRESHNESS_POLICIES: dict[Dataset, FreshnessPolicy] = {
    Dataset.DAILY_PRICES: FreshnessPolicy(
        frequency="every trading day",
        refresh_action="sync_daily_prices",
    ),
    Dataset.INDICATORS: FreshnessPolicy(
        frequency="every trading day (after daily prices)",
        refresh_action="calculate_indicators",
    ),
    Dataset.INSTITUTIONAL: FreshnessPolicy(
        frequency="every trading day",
        refresh_action="sync_institutional_trading",
    ),
    Dataset.MARGIN: FreshnessPolicy(
        frequency="every trading day",
        refresh_action="sync_margin_trading",
    ),
    Dataset.MONTHLY_REVENUE: FreshnessPolicy(
        frequency="monthly (published after the 10th of the next month)",
        refresh_action="sync_monthly_revenue",
        stale_days=45,
    ),
    Dataset.FINANCIALS: FreshnessPolicy(
        frequency="quarterly (published about 45 days after quarter end)",
        refresh_action="sync_financial_statements",
        stale_days=100,
    ),
    Dataset.DIVIDENDS: FreshnessPolicy(
        frequency="yearly (by ex-dividend date)",
        refresh_action="sync_dividends",
        stale_days=90,
    ),
}


def month_date(year: int, month: int) -> date:
    """Reference date of a monthly report: the first of that month."""
    return date(year, month, 1)


def quarter_date(year: int, quarter: int) -> date:
    """Reference date of a quarterly report: the first of the quarter's last month."""
    if not 1 <= quarter <= 4:
        raise ValueError(f"quarter must be 1-4, got {quarter}")
    return date(year, quarter * 3, 1)


def build_freshness_meta(
    latest_date: date | None,
    today: date,
    frequency: str = "every trading day",
    refresh_action: str = "sync_daily_prices",
    stale_days: int | None = None,
) -> FreshnessMeta:
    """Describe how current a dataset is.

    Args:
        latest_date: Most recent date present in the dataset, or ``None``.
        today: Reference date.
        frequency: Human-readable update cadence.
        refresh_action: Name of the job that refreshes the dataset.
        stale_days: Calendar days after which data is stale; defaults to
            the configured value (5).
    """
    if stale_days is None:
        stale_days = get_settings().stale_days

    if latest_date is None:
        return FreshnessMeta(
            has_data=False,
            is_stale=True,
            update_frequency=frequency,
            suggestion=f"No data yet, run {refresh_action} first",
        )

    days = (today - latest_date).days
    is_stale = days > stale_days
    return FreshnessMeta(
        has_data=True,
        latest_date=latest_date,
        days_since_update=days,
        is_stale=is_stale,
        update_frequency=frequency,
        suggestion=(
            f"Data is {days} days old, run {refresh_action}" if is_stale else None
        ),
    )


def dataset_freshness(dataset: Dataset | str, latest_date: date | None, today: date) -> FreshnessMeta:
    """``build_freshness_meta`` with the window and wording of a known dataset.

    Raises:
        ValueError: If ``dataset`` is not a known dataset name.
    """
    policy = FRESHNESS_POLICIES[Dataset(dataset)]
    return build_freshness_meta(
        latest_date,
        today,
        frequency=policy.frequency,
        refresh_action=policy.refresh_action,
        stale_days=policy.stale_days,
    )
