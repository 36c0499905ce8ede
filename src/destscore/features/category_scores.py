# src/destscore/features/category_scores.py
"""
Category scores (destination-level, relative to a candidate set).

Five of the six categories are *relative*: a destination's score answers "how does
this compare to its peers in the current view", so min/max come from the candidate
set being scored (the 2-4 destinations in a comparison, or the browse list), not
from a fixed global range. Changing the candidate set changes every score.

Rules:
- rating, safety, activities (POI count), walkability: min/max normalization, higher is better.
- cost: inverted normalization of the total daily cost (cheaper is better). A destination
  without cost data (total 0) gets the neutral score and is left out of the cost range.
- climate: absolute. Full score at the ideal temperature, linear penalty per degree of
  deviation, clamped to 0..100.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from destscore.config.settings import ScoringSettings
from destscore.domain.models import CategoryScores, Destination
from destscore.features.attributes import (
    effective_safety,
    effective_temperature_c,
    effective_walkability,
    total_cost,
)
from destscore.scoring.composite import clamp, normalize_score

Range = tuple[float, float]


def _span(values: Sequence[float]) -> Range | None:
    if not values:
        return None
    return min(values), max(values)


@dataclass(frozen=True)
class CandidateRanges:
    """Min/max of every relative category over one candidate set."""

    rating: Range | None
    safety: Range | None
    cost: Range | None
    activities: Range | None
    walkability: Range | None

    @classmethod
    def from_candidates(cls, destinations: Sequence[Destination], settings: ScoringSettings) -> "CandidateRanges":
        return cls(
            rating=_span([float(d.rating) for d in destinations]),
            safety=_span([effective_safety(d, settings) for d in destinations]),
            # Zero means "no cost data", which would otherwise pose as the cheapest option.
            cost=_span([c for c in (total_cost(d) for d in destinations) if c > 0]),
            activities=_span([float(d.poi_count) for d in destinations]),
            walkability=_span([effective_walkability(d, settings) for d in destinations]),
        )


def _relative(value: float, span: Range | None, neutral: float) -> float:
    if span is None:
        return neutral
    return normalize_score(value, span[0], span[1], neutral=neutral)


def climate_score(temperature_c: float, settings: ScoringSettings) -> float:
    deviation = abs(float(temperature_c) - settings.ideal_temperature_c)
    return clamp(100.0 - deviation * settings.climate_penalty_per_degree)


def cost_score(destination: Destination, ranges: CandidateRanges, settings: ScoringSettings) -> float:
    cost = total_cost(destination)
    neutral = float(settings.neutral_score)
    if cost <= 0:
        return neutral
    return 100.0 - _relative(cost, ranges.cost, neutral)


def score_categories(
    destination: Destination, ranges: CandidateRanges, *, settings: ScoringSettings
) -> CategoryScores:
    """Compute the six category scores of `destination` within the candidate set behind `ranges`."""
    neutral = float(settings.neutral_score)
    return CategoryScores(
        rating=_relative(float(destination.rating), ranges.rating, neutral),
        safety=_relative(effective_safety(destination, settings), ranges.safety, neutral),
        cost=cost_score(destination, ranges, settings),
        climate=climate_score(effective_temperature_c(destination, settings), settings),
        activities=_relative(float(destination.poi_count), ranges.activities, neutral),
        walkability=_relative(effective_walkability(destination, settings), ranges.walkability, neutral),
    )
