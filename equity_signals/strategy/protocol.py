"""Screening strategy protocol and the data it works on."""

from datetime import date
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from equity_signals.models.indicator import IndicatorRecord
from equity_signals.models.price import PricePoint


class InstrumentSnapshot(BaseModel):
    """Latest state of one instrument, as seen by the screener.

    Attributes:
        latest: Most recent price bar.
        avg_volume: Mean volume of the 20 bars before ``latest``, if known.
        indicators: Indicator record for ``latest``'s date.
        previous: Indicator record for the trading day before.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str = ""
    latest: PricePoint
    avg_volume: float | None = None
    indicators: IndicatorRecord | None = None
    previous: IndicatorRecord | None = None


class ScreenMatch(BaseModel):
    """One instrument that passed a screen, with the fields that explain why."""

    symbol: str
    name: str = ""
    date: date
    close: float
    fields: dict[str, float | None] = Field(default_factory=dict)


class ScreenResult(BaseModel):
    strategy: str
    count: int
    matches: list[ScreenMatch] = Field(default_factory=list)


@runtime_checkable
class ScreenStrategy(Protocol):
    """Protocol that every registered screening strategy implements."""

    @property
    def name(self) -> str:
        """Registered strategy name (e.g. 'golden_cross')."""
        ...

    @property
    def descending(self) -> bool:
        """Whether matches are ranked by ``sort_key`` from high to low."""
        ...

    def matches(self, snapshot: InstrumentSnapshot) -> bool:
        """Return ``True`` if the instrument passes the screen."""
        ...

    def sort_key(self, snapshot: InstrumentSnapshot) -> float:
        """Ranking value for a matching instrument."""
        ...

    def fields(self, snapshot: InstrumentSnapshot) -> dict[str, float | None]:
        """Values reported alongside a match."""
        ...
