"""Daily price bar models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PricePoint(BaseModel):
    """One trading day of OHLCV data for one instrument."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    date: date
    open: Decimal = Field(gt=0)
    high: Decimal = Field(gt=0)
    low: Decimal = Field(gt=0)
    close: Decimal = Field(gt=0)
    volume: int = Field(ge=0)
    turnover: Decimal = Field(default=Decimal("0"), ge=0)
    transactions: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "PricePoint":
        if self.high < self.low:
            raise ValueError(f"high {self.high} is below low {self.low}")
        return self

    @property
    def typical_price(self) -> Decimal:
        """(high + low + close) / 3."""
        return (self.high + self.low + self.close) / 3

    @property
    def range_size(self) -> Decimal:
        """Get the full range (high - low) of the bar."""
        return self.high - self.low

    @property
    def change(self) -> Decimal:
        """Close minus open."""
        return self.close - self.open


class PriceHistory(BaseModel):
    """Chronologically ascending bars for a single symbol."""

    symbol: str
    points: list[PricePoint] = Field(default_factory=list)
    max_size: int = 250

    def add(self, point: PricePoint) -> None:
        """Append a bar, replacing the last one if it has the same date.

        Bars older than the latest one are ignored.
        """
        if point.symbol != self.symbol:
            raise ValueError(
                f"bar for {point.symbol} added to history of {self.symbol}"
            )
        if self.points and point.date <= self.points[-1].date:
            if point.date == self.points[-1].date:
                self.points[-1] = point
            return

        self.points.append(point)
        if len(self.points) > self.max_size:
            self.points = self.points[-self.max_size :]

    def extend(self, points: list[PricePoint]) -> None:
        for point in sorted(points, key=lambda p: p.date):
            self.add(point)

    def closes(self) -> list[float]:
        return [float(p.close) for p in self.points]

    def highs(self) -> list[float]:
        return [float(p.high) for p in self.points]

    def lows(self) -> list[float]:
        return [float(p.low) for p in self.points]

    def volumes(self) -> list[int]:
        return [p.volume for p in self.points]

    @property
    def latest(self) -> PricePoint | None:
        return self.points[-1] if self.points else None

    def __len__(self) -> int:
        return len(self.points)
