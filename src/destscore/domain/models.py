"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- catalog entities (`Destination`), which the scoring engine never mutates
- scoring inputs (`WeightVector`, `FilterThresholds`)
- scoring output (`CategoryScores`, `ScoredDestination`)
- API/CLI request and response payloads (`ComparisonRequest`, `BrowseQuery`, ...)

Weight, threshold and score vectors are explicit six-field records: the category
set is fixed and closed (rating, safety, cost, climate, activities, walkability).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

BudgetTier = Literal["Budget", "Mid-range", "Luxury"]
SortKey = Literal["score", "rating", "name", "country", "places", "safety", "cost"]


class CostBreakdown(BaseModel):
    """Daily costs in a common currency unit."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    accommodation: float = Field(0, ge=0)
    food: float = Field(0, ge=0)
    activities: float = Field(0, ge=0)
    transport: float = Field(0, ge=0)

    @property
    def total(self) -> float:
        return self.accommodation + self.food + self.activities + self.transport


class Destination(BaseModel):
    """A destination record as stored in the catalog."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str = Field(..., min_length=1)
    name: str
    country: str = "Unknown"
    region: str | None = None
    description: str = ""
    image: str | None = None
    categories: list[str] = Field(default_factory=list)

    rating: float = Field(0, ge=0)
    review_count: int = Field(0, ge=0)
    poi_count: int = Field(0, ge=0)
    safety_overall: float | None = None
    costs: CostBreakdown | None = None
    climate_avg_temp_c: float | None = None
    walkability: float | None = None

    budget_tier: BudgetTier = "Mid-range"
    best_time_to_visit: str | None = None

    @field_validator("categories")
    @classmethod
    def _strip_categories(cls, categories: list[str]) -> list[str]:
        return [c.strip() for c in categories if c and c.strip()]


class WeightVector(BaseModel):
    """User-adjustable category weights. Any non-negative combination is valid."""

    model_config = ConfigDict(allow_inf_nan=False)

    rating: float = Field(0, ge=0)
    safety: float = Field(0, ge=0)
    cost: float = Field(0, ge=0)
    climate: float = Field(0, ge=0)
    activities: float = Field(0, ge=0)
    walkability: float = Field(0, ge=0)

    @property
    def total(self) -> float:
        return self.rating + self.safety + self.cost + self.climate + self.activities + self.walkability


class FilterThresholds(BaseModel):
    """Minimum category score (0..100) a destination needs to stay in the candidate set."""

    model_config = ConfigDict(allow_inf_nan=False)

    rating: float = Field(0, ge=0, le=100)
    safety: float = Field(0, ge=0, le=100)
    cost: float = Field(0, ge=0, le=100)
    climate: float = Field(0, ge=0, le=100)
    activities: float = Field(0, ge=0, le=100)
    walkability: float = Field(0, ge=0, le=100)

    def is_noop(self) -> bool:
        return not any(
            (self.rating, self.safety, self.cost, self.climate, self.activities, self.walkability)
        )


class CategoryScores(BaseModel):
    """The six normalized 0..100 sub-scores of one destination."""

    model_config = ConfigDict(frozen=True)

    rating: float
    safety: float
    cost: float
    climate: float
    activities: float
    walkability: float


class ScoredDestination(BaseModel):
    """A destination plus the scores derived for it within one candidate set."""

    model_config = ConfigDict(frozen=True)

    destination: Destination
    category_scores: CategoryScores
    weighted_score: float
    rank: int | None = Field(default=None, ge=1)


class ComparisonRequest(BaseModel):
    """Side-by-side comparison of a few destinations."""

    destination_ids: list[str] = Field(default_factory=list)
    weights: WeightVector | None = None
    thresholds: FilterThresholds | None = None
    settings_overrides: dict[str, Any] | None = None


class ComparisonResult(BaseModel):
    generated_at: datetime
    weights: WeightVector
    thresholds: FilterThresholds
    results: list[ScoredDestination]
    meta: dict[str, Any] = Field(default_factory=dict)


class BrowseQuery(BaseModel):
    """Catalog browse request: basic filters, score thresholds, sort order."""

    query: str | None = None
    category: str | None = None
    budget: BudgetTier | Literal["all"] | None = None
    sort: SortKey | None = None
    weights: WeightVector | None = None
    thresholds: FilterThresholds | None = None
    limit: int | None = Field(default=None, ge=1)
    settings_overrides: dict[str, Any] | None = None


class BrowseResult(BaseModel):
    generated_at: datetime
    query: BrowseQuery
    total_count: int
    basic_match_count: int
    filtered_by_scores_count: int
    results: list[ScoredDestination]
    meta: dict[str, Any] = Field(default_factory=dict)
