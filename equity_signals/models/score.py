"""Composite score model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ScoreKind(str, Enum):
    TECHNICAL = "technical"
    FUNDAMENTAL = "fundamental"


class Score(BaseModel):
    """A bounded 0-100 score plus the raw inputs that produced it.

    ``breakdown`` holds the input values (``None`` where an input was
    absent); ``adjustments`` holds the points each rule contributed, with
    ``None`` for rules that were skipped rather than evaluated to zero.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    kind: ScoreKind
    score: int = Field(ge=0, le=100)
    breakdown: dict[str, float | str | None] = Field(default_factory=dict)
    adjustments: dict[str, float | None] = Field(default_factory=dict)
