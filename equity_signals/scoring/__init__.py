"""Composite technical and fundamental scores."""

from equity_signals.models.score import Score
from equity_signals.scoring.common import finalize_score, round_score
from equity_signals.scoring.fundamental import score_fundamental
from equity_signals.scoring.technical import score_technical


def combine_scores(*scores: Score | None) -> int | None:
    """Mean of the available scores, rounded; ``None`` if there are none."""
    values = [s.score for s in scores if s is not None]
    if not values:
        return None
    return round_score(sum(values) / len(values))


__all__ = [
    "combine_scores",
    "finalize_score",
    "round_score",
    "score_fundamental",
    "score_technical",
]
