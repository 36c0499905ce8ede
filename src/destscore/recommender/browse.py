"""
Catalog browse list.

Pipeline for one browse request:
1. basic filters: free-text search (name, country, description), category label, budget tier
2. score the remaining destinations against each other (they form the candidate set)
3. advanced filters: minimum category scores (all must hold)
4. sort by the requested key and truncate to `limit`

Every sort is stable, so destinations that compare equal keep catalog order.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence
from zoneinfo import ZoneInfo

from destscore.catalog.loader import UnknownDestinationError, load_destinations
from destscore.config.overrides import apply_settings_overrides
from destscore.config.settings import Settings, get_settings
from destscore.domain.models import (
    BrowseQuery,
    BrowseResult,
    Destination,
    FilterThresholds,
    ScoredDestination,
    SortKey,
    WeightVector,
)
from destscore.features.attributes import total_cost
from destscore.scoring.engine import apply_filters, rank_destinations, score_destinations

logger = logging.getLogger(__name__)


def _is_wildcard(value: str | None) -> bool:
    return value is None or not value.strip() or value.strip().lower() == "all"


def matches_basic_filters(
    destination: Destination,
    *,
    query: str | None = None,
    category: str | None = None,
    budget: str | None = None,
) -> bool:
    if query and query.strip():
        needle = query.strip().lower()
        haystacks = (destination.name, destination.country, destination.description)
        if not any(needle in h.lower() for h in haystacks):
            return False
    if not _is_wildcard(category):
        wanted = category.strip().lower()
        if wanted not in {c.lower() for c in destination.categories}:
            return False
    if not _is_wildcard(budget) and destination.budget_tier != budget:
        return False
    return True


def _sort_key(sort: SortKey) -> tuple[Callable[[ScoredDestination], object], bool]:
    """Return (key function, reverse) for a non-score sort."""
    if sort == "rating":
        return (lambda s: s.destination.rating), True
    if sort == "name":
        return (lambda s: s.destination.name.casefold()), False
    if sort == "country":
        return (lambda s: s.destination.country.casefold()), False
    if sort == "places":
        return (lambda s: s.destination.poi_count), True
    if sort == "safety":
        # Missing safety sorts as 0, not as the scoring default.
        return (lambda s: s.destination.safety_overall or 0.0), True
    if sort == "cost":
        return (lambda s: total_cost(s.destination)), False
    raise ValueError(f"Unknown sort key '{sort}'.")


def sort_scored(scored: Sequence[ScoredDestination], sort: SortKey) -> list[ScoredDestination]:
    """Order scored destinations by `sort`; ranks reflect weighted score regardless of order."""
    if sort == "score":
        return rank_destinations(scored)
    # Same ordering rank_destinations uses, applied by position so ties fall back to catalog order.
    positions = sorted(range(len(scored)), key=lambda i: scored[i].weighted_score, reverse=True)
    rank_of = {pos: r for r, pos in enumerate(positions, start=1)}
    with_ranks = [item.model_copy(update={"rank": rank_of[i]}) for i, item in enumerate(scored)]
    key, reverse = _sort_key(sort)
    return sorted(with_ranks, key=key, reverse=reverse)


def browse(
    query: BrowseQuery,
    *,
    settings: Settings | None = None,
    destinations: list[Destination] | None = None,
) -> BrowseResult:
    settings = apply_settings_overrides(settings or get_settings(), query.settings_overrides)
    if destinations is None:
        destinations = load_destinations(settings.catalog.path)

    sort: SortKey = query.sort or settings.browse.default_sort
    weights = query.weights or settings.scoring.default_weights
    thresholds = query.thresholds or FilterThresholds()

    candidates = [
        d
        for d in destinations
        if matches_basic_filters(d, query=query.query, category=query.category, budget=query.budget)
    ]
    scored = score_destinations(candidates, weights, settings=settings.scoring)
    kept = scored if thresholds.is_noop() else apply_filters(scored, thresholds)
    ordered = sort_scored(kept, sort)
    visible = ordered[: query.limit] if query.limit else ordered

    logger.debug(
        "Browse: %d catalog, %d basic matches, %d after score filters (sort=%s)",
        len(destinations),
        len(candidates),
        len(kept),
        sort,
    )

    return BrowseResult(
        generated_at=datetime.now(ZoneInfo(settings.app.timezone)),
        query=query.model_copy(update={"sort": sort, "weights": weights, "thresholds": thresholds}),
        total_count=len(destinations),
        basic_match_count=len(candidates),
        filtered_by_scores_count=len(candidates) - len(kept),
        results=visible,
        meta={"active_threshold_count": sum(1 for v in thresholds.model_dump().values() if v > 0)},
    )


def find_destination(
    destination_id: str,
    *,
    settings: Settings | None = None,
    destinations: list[Destination] | None = None,
    weights: WeightVector | None = None,
) -> ScoredDestination:
    """Score one destination against the whole catalog (detail view)."""
    settings = settings or get_settings()
    if destinations is None:
        destinations = load_destinations(settings.catalog.path)

    ranked = rank_destinations(
        score_destinations(destinations, weights or settings.scoring.default_weights, settings=settings.scoring)
    )
    for item in ranked:
        if item.destination.id == destination_id:
            return item
    raise UnknownDestinationError(destination_id)
