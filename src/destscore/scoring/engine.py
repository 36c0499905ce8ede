"""
Scoring and comparison engine.

Pure, synchronous functions over an in-memory candidate set:
- `score_destinations`: category scores (relative to the set) + weighted score per destination
- `apply_filters`: keep destinations meeting every minimum category score
- `rank_destinations`: weighted score descending, stable for ties, 1-based ranks

Degenerate inputs (empty set, one destination, all-zero weights, missing optional
attributes) are normal inputs here and never raise.
"""

from __future__ import annotations

import logging
from typing import Sequence

from destscore.config.settings import ScoringSettings
from destscore.domain.models import Destination, FilterThresholds, ScoredDestination, WeightVector
from destscore.features.category_scores import CandidateRanges, score_categories
from destscore.scoring.composite import weighted_score

logger = logging.getLogger(__name__)


def score_destinations(
    destinations: Sequence[Destination],
    weights: WeightVector,
    *,
    settings: ScoringSettings | None = None,
) -> list[ScoredDestination]:
    """Score every destination against the others in `destinations` (input order kept)."""
    settings = settings or ScoringSettings()
    ranges = CandidateRanges.from_candidates(destinations, settings)

    scored: list[ScoredDestination] = []
    for dest in destinations:
        scores = score_categories(dest, ranges, settings=settings)
        scored.append(
            ScoredDestination(
                destination=dest,
                category_scores=scores,
                weighted_score=weighted_score(scores, weights),
            )
        )
    logger.debug("Scored %d destinations (weight total %.1f)", len(scored), weights.total)
    return scored


def passes_thresholds(item: ScoredDestination, thresholds: FilterThresholds) -> bool:
    s = item.category_scores
    return (
        s.rating >= thresholds.rating
        and s.safety >= thresholds.safety
        and s.cost >= thresholds.cost
        and s.climate >= thresholds.climate
        and s.activities >= thresholds.activities
        and s.walkability >= thresholds.walkability
    )


def apply_filters(scored: Sequence[ScoredDestination], thresholds: FilterThresholds) -> list[ScoredDestination]:
    """Keep the items whose six category scores all meet their threshold."""
    return [item for item in scored if passes_thresholds(item, thresholds)]


def rank_destinations(scored: Sequence[ScoredDestination]) -> list[ScoredDestination]:
    """Sort by weighted score (descending) and assign 1-based ranks.

    `sorted` is stable, so equal scores keep their input order.
    """
    ordered = sorted(scored, key=lambda item: item.weighted_score, reverse=True)
    return [item.model_copy(update={"rank": i}) for i, item in enumerate(ordered, start=1)]


def score_filter_rank(
    destinations: Sequence[Destination],
    weights: WeightVector,
    thresholds: FilterThresholds | None = None,
    *,
    settings: ScoringSettings | None = None,
) -> list[ScoredDestination]:
    """Score against the whole candidate set, then filter, then rank."""
    scored = score_destinations(destinations, weights, settings=settings)
    if thresholds is not None:
        scored = apply_filters(scored, thresholds)
    return rank_destinations(scored)
