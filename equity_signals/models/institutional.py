"""Institutional investor flow and margin balance models."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class InstitutionalFlow(BaseModel):
    """Net shares bought (positive) or sold by each investor class on one day."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    date: date
    foreign_net: int = 0
    trust_net: int = 0
    dealer_net: int = 0

    @property
    def total_net(self) -> int:
        return self.foreign_net + self.trust_net + self.dealer_net


class MarginBalance(BaseModel):
    """Outstanding margin purchases and short sales at end of one day."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    date: date
    margin_balance: int = 0
    short_balance: int = 0
    offset_volume: int = 0
