"""
Default-value policy for optional destination attributes.

Catalog records may omit safety, climate and walkability data. Those gaps are
filled here, before normalization, so the category scorers never deal with None:
a destination with missing data is scored with the configured default, never
excluded.
"""

from __future__ import annotations

from destscore.config.settings import ScoringSettings
from destscore.domain.models import Destination


def effective_safety(destination: Destination, settings: ScoringSettings) -> float:
    if destination.safety_overall is None:
        return float(settings.attribute_defaults.safety_overall)
    return float(destination.safety_overall)


def effective_temperature_c(destination: Destination, settings: ScoringSettings) -> float:
    if destination.climate_avg_temp_c is None:
        return float(settings.attribute_defaults.climate_avg_temp_c)
    return float(destination.climate_avg_temp_c)


def effective_walkability(destination: Destination, settings: ScoringSettings) -> float:
    if destination.walkability is None:
        return float(settings.attribute_defaults.walkability)
    return float(destination.walkability)


def total_cost(destination: Destination) -> float:
    """Sum of the four daily cost components; 0 means "no cost data"."""
    if destination.costs is None:
        return 0.0
    return float(destination.costs.total)
