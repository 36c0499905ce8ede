"""
Shared scoring utilities.

This module contains the small numeric primitives every category scorer uses:
- `clamp`: keep values within 0..100 for stable UI/output
- `normalize_score`: relative min/max normalization onto 0..100
- `weighted_score`: combine the six category scores with a weight vector
"""

from __future__ import annotations

from destscore.domain.models import CategoryScores, WeightVector

CATEGORY_NAMES: tuple[str, ...] = ("rating", "safety", "cost", "climate", "activities", "walkability")

# Weighted scores are divided by this constant, not by the weight total. Weights
# summing to 100 land in 0..100; other totals scale the result proportionally.
WEIGHT_DIVISOR = 100.0

NEUTRAL_SCORE = 50.0


def clamp(x: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp a number into the [lo, hi] range."""
    return max(lo, min(hi, float(x)))


def normalize_score(value: float, min_value: float, max_value: float, *, neutral: float = NEUTRAL_SCORE) -> float:
    """Map `value` linearly from [min_value, max_value] onto [0, 100].

    Returns `neutral` when the range is empty (no variation across the candidate set).
    The result is not clamped.
    """
    if max_value == min_value:
        return float(neutral)
    return (float(value) - min_value) / (max_value - min_value) * 100.0


def weighted_score(scores: CategoryScores, weights: WeightVector) -> float:
    return (
        scores.rating * weights.rating
        + scores.safety * weights.safety
        + scores.cost * weights.cost
        + scores.climate * weights.climate
        + scores.activities * weights.activities
        + scores.walkability * weights.walkability
    ) / WEIGHT_DIVISOR
