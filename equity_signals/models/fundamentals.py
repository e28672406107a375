"""Financial statement models consumed by the fundamental analysis."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class QuarterlyFinancials(BaseModel):
    """Income, balance sheet and cash flow aggregates for one fiscal quarter."""

    model_config = ConfigDict(frozen=True)

    year: int
    quarter: int = Field(ge=1, le=4)
    revenue: Decimal | None = None
    gross_profit: Decimal | None = None
    operating_income: Decimal | None = None
    net_income: Decimal | None = None
    eps: Decimal | None = None

    total_assets: Decimal | None = None
    total_liabilities: Decimal | None = None
    equity: Decimal | None = None
    book_value_per_share: Decimal | None = None

    operating_cash_flow: Decimal | None = None
    investing_cash_flow: Decimal | None = None
    financing_cash_flow: Decimal | None = None

    @property
    def period(self) -> str:
        return f"{self.year}Q{self.quarter}"

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.year, self.quarter)


class MonthlyRevenue(BaseModel):
    """Revenue for one calendar month with growth rates in percent."""

    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    revenue: Decimal
    revenue_mom: Decimal | None = None
    revenue_yoy: Decimal | None = None

    @property
    def period(self) -> str:
        return f"{self.year}/{self.month}"

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.year, self.month)


class AnnualDividend(BaseModel):
    """Dividends declared for one year, per share."""

    model_config = ConfigDict(frozen=True)

    year: int
    cash_dividend: Decimal = Decimal("0")
    stock_dividend: Decimal = Decimal("0")


class FinancialFacts(BaseModel):
    """Everything the fundamental scorer knows about one symbol.

    Lists may arrive in any order; consumers sort by period.
    """

    symbol: str
    quarters: list[QuarterlyFinancials] = Field(default_factory=list)
    monthly_revenue: list[MonthlyRevenue] = Field(default_factory=list)
    dividends: list[AnnualDividend] = Field(default_factory=list)

    def sorted_quarters(self) -> list[QuarterlyFinancials]:
        return sorted(self.quarters, key=lambda q: q.sort_key)

    def sorted_revenue(self) -> list[MonthlyRevenue]:
        return sorted(self.monthly_revenue, key=lambda m: m.sort_key)

    def latest_dividend(self) -> AnnualDividend | None:
        if not self.dividends:
            return None
        return max(self.dividends, key=lambda d: d.year)
