from __future__ import annotations

# Orchestrator for the side-by-side comparison view.
# It wires together:
# - request input (ComparisonRequest: ids, weights, thresholds, overrides)
# - the destination catalog (loaded from disk unless injected)
# - the scoring engine (score -> filter -> rank)
#
# The candidate set for normalization is the selected destinations only, so the
# scores answer "how do these few compare with each other".

import logging
import time
from datetime import datetime
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from destscore.catalog.loader import UnknownDestinationError, index_by_id, load_destinations
from destscore.config.overrides import apply_settings_overrides
from destscore.config.settings import ScoringSettings, Settings, get_settings
from destscore.domain.models import (
    ComparisonRequest,
    ComparisonResult,
    Destination,
    FilterThresholds,
    WeightVector,
)
from destscore.scoring.composite import CATEGORY_NAMES
from destscore.scoring.engine import apply_filters, rank_destinations, score_destinations

logger = logging.getLogger(__name__)


def select_for_comparison(ids: Iterable[str], *, max_destinations: int = 4) -> list[str]:
    """Drop blanks, de-duplicate (first occurrence wins) and cap the selection."""
    selected: list[str] = []
    for raw in ids:
        dest_id = (raw or "").strip()
        if dest_id and dest_id not in selected:
            selected.append(dest_id)
    return selected[:max_destinations]


def validate_weights(weights: WeightVector, scoring: ScoringSettings) -> WeightVector:
    """Reject weights above the configured per-category slider maximum."""
    too_high = [name for name in CATEGORY_NAMES if getattr(weights, name) > scoring.max_weight]
    if too_high:
        raise ValueError(
            f"Weights must be between 0 and {scoring.max_weight:g}; out of range: {', '.join(too_high)}"
        )
    return weights


def resolve_destinations(ids: Sequence[str], destinations: Sequence[Destination]) -> list[Destination]:
    """Look up `ids` in the catalog, keeping the order of `ids`."""
    by_id = index_by_id(list(destinations))
    resolved: list[Destination] = []
    for dest_id in ids:
        dest = by_id.get(dest_id)
        if dest is None:
            raise UnknownDestinationError(dest_id)
        resolved.append(dest)
    return resolved


def compare(
    request: ComparisonRequest,
    *,
    settings: Settings | None = None,
    destinations: list[Destination] | None = None,
) -> ComparisonResult:
    t0 = time.monotonic()
    settings = apply_settings_overrides(settings or get_settings(), request.settings_overrides)

    selected_ids = select_for_comparison(
        request.destination_ids or settings.comparison.default_destination_ids,
        max_destinations=settings.comparison.max_destinations,
    )
    weights = validate_weights(request.weights or settings.scoring.default_weights, settings.scoring)
    thresholds = request.thresholds or FilterThresholds()

    if destinations is None:
        destinations = load_destinations(settings.catalog.path)
    candidates = resolve_destinations(selected_ids, destinations)

    scored = score_destinations(candidates, weights, settings=settings.scoring)
    kept = apply_filters(scored, thresholds)
    ranked = rank_destinations(kept)

    kept_ids = {item.destination.id for item in kept}
    filtered_out = [d.id for d in candidates if d.id not in kept_ids]
    logger.debug("Compared %s -> %d ranked, %d filtered out", selected_ids, len(ranked), len(filtered_out))

    return ComparisonResult(
        generated_at=datetime.now(ZoneInfo(settings.app.timezone)),
        weights=weights,
        thresholds=thresholds,
        results=ranked,
        meta={
            "selected_ids": selected_ids,
            "filtered_out_ids": filtered_out,
            "weight_total": weights.total,
            "max_destinations": settings.comparison.max_destinations,
            "timings_ms": {"total": int((time.monotonic() - t0) * 1000)},
        },
    )
