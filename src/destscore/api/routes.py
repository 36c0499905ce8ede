"""
API routes.

Endpoints:
- POST `/api/compare`: side-by-side comparison of up to four destinations.
- POST `/api/destinations/search`: browse list with basic filters, score thresholds and sorting.
- GET  `/api/destinations/{id}`: one destination scored against the whole catalog.
- GET  `/api/catalog/meta`: category/budget/country counts for filter menus.
- GET  `/api/settings`: public scoring defaults for clients.
- GET  `/api/quality/report`: offline catalog quality report.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, HTTPException

from destscore.catalog.loader import UnknownDestinationError, load_destinations
from destscore.config.overrides import overridable_paths
from destscore.config.settings import get_settings
from destscore.domain.models import (
    BrowseQuery,
    BrowseResult,
    ComparisonRequest,
    ComparisonResult,
    Destination,
    ScoredDestination,
)
from destscore.quality.report import build_quality_report
from destscore.recommender.browse import browse, find_destination
from destscore.recommender.compare import compare

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _catalog() -> tuple[Destination, ...]:
    settings = get_settings()
    return tuple(load_destinations(settings.catalog.path))


def _not_found(e: UnknownDestinationError) -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": str(e)})


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": str(e)})


def _internal(e: Exception) -> HTTPException:
    logger.exception("Request failed")
    return HTTPException(status_code=500, detail={"code": "INTERNAL_ERROR", "message": str(e)})


@router.post("/api/compare", response_model=ComparisonResult)
def post_compare(request: ComparisonRequest) -> ComparisonResult:
    """Score, filter and rank the selected destinations against each other."""
    try:
        return compare(request, settings=get_settings(), destinations=list(_catalog()))
    except UnknownDestinationError as e:
        raise _not_found(e) from e
    except ValueError as e:
        raise _bad_request(e) from e
    except Exception as e:
        raise _internal(e) from e


@router.post("/api/destinations/search", response_model=BrowseResult)
def post_destination_search(query: BrowseQuery) -> BrowseResult:
    """Return the browse list for the given filters and sort order."""
    try:
        return browse(query, settings=get_settings(), destinations=list(_catalog()))
    except ValueError as e:
        raise _bad_request(e) from e
    except Exception as e:
        raise _internal(e) from e


@router.get("/api/destinations/{destination_id}", response_model=ScoredDestination)
def get_destination(destination_id: str) -> ScoredDestination:
    try:
        return find_destination(destination_id, settings=get_settings(), destinations=list(_catalog()))
    except UnknownDestinationError as e:
        raise _not_found(e) from e
    except Exception as e:
        raise _internal(e) from e


@router.get("/api/catalog/meta")
def get_catalog_meta() -> dict:
    """Return discoverable catalog metadata (categories, budget tiers, countries with counts)."""
    destinations = _catalog()

    category_counts: dict[str, int] = {}
    budget_counts: dict[str, int] = {}
    country_counts: dict[str, int] = {}
    for d in destinations:
        for c in d.categories:
            category_counts[c] = category_counts.get(c, 0) + 1
        budget_counts[d.budget_tier] = budget_counts.get(d.budget_tier, 0) + 1
        country_counts[d.country] = country_counts.get(d.country, 0) + 1

    return {
        "destination_count": len(destinations),
        "categories": sorted(category_counts.keys()),
        "category_counts": dict(sorted(category_counts.items(), key=lambda kv: (-kv[1], kv[0]))),
        "budget_counts": dict(sorted(budget_counts.items())),
        "country_counts": dict(sorted(country_counts.items(), key=lambda kv: (-kv[1], kv[0]))),
    }


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for client defaults (no filesystem paths)."""
    data = get_settings().model_dump(mode="json")
    return {
        "app": {"name": data["app"]["name"], "timezone": data["app"]["timezone"]},
        "scoring": data["scoring"],
        "comparison": data["comparison"],
        "browse": data["browse"],
        "overridable": overridable_paths(),
    }


@router.get("/api/quality/report")
def get_quality_report() -> dict:
    """Return an offline catalog quality report."""
    return build_quality_report(get_settings())
