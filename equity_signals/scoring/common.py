"""Helpers shared by the technical and fundamental scorers."""

from decimal import ROUND_HALF_UP, Decimal

MIN_SCORE = 0
MAX_SCORE = 100


def to_float(value: Decimal | float | int | None) -> float | None:
    """Convert an optional numeric input, keeping ``None`` as ``None``."""
    if value is None:
        return None
    return float(value)


def round_score(value: float) -> int:
    """Clamp to [0, 100] and round half up."""
    clamped = max(MIN_SCORE, min(MAX_SCORE, value))
    return int(Decimal(repr(float(clamped))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def finalize_score(baseline: float, adjustments: dict[str, float | None]) -> int:
    """Sum the baseline and every evaluated adjustment, then clamp and round.

    ``None`` adjustments are rules that were skipped for lack of input.
    The sum does not depend on the order the rules ran in.
    """
    return round_score(baseline + sum(v for v in adjustments.values() if v is not None))
