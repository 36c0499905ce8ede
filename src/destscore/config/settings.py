# src/destscore/config/settings.py
"""
Application settings (Pydantic).

Source order:
1. `DESTSCORE_CONFIG_PATH` if set, otherwise the packaged `defaults.yaml`
2. `DESTSCORE_LOG_LEVEL` and `DESTSCORE_CATALOG_PATH` from the environment (or `.env`)

Scoring constants (neutral score, ideal temperature, attribute defaults, default
weights) are settings so deployments can tune them without code changes.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from destscore.core.env import load_dotenv_if_present
from destscore.domain.models import SortKey, WeightVector


def _yaml_mapping(text: str, source: str) -> dict[str, Any]:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{source}: expected a YAML mapping at the top level.")
    return data


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read one of the YAML files shipped in `destscore.config`."""
    return _yaml_mapping(resources.files("destscore.config").joinpath(filename).read_text(encoding="utf-8"), filename)


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    return _yaml_mapping(Path(path).read_text(encoding="utf-8"), str(path))


class AppSettings(BaseModel):
    name: str = "DestScore"
    timezone: str = "UTC"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/destinations.json"


class AttributeDefaults(BaseModel):
    """Values substituted for missing optional destination attributes (before normalization)."""

    safety_overall: float = 5
    climate_avg_temp_c: float = 15
    walkability: float = 5


def _default_weights() -> WeightVector:
    return WeightVector(rating=20, safety=20, cost=20, climate=15, activities=15, walkability=10)


class ScoringSettings(BaseModel):
    neutral_score: float = Field(50, ge=0, le=100)
    ideal_temperature_c: float = 20
    climate_penalty_per_degree: float = Field(5, ge=0)
    attribute_defaults: AttributeDefaults = Field(default_factory=AttributeDefaults)
    default_weights: WeightVector = Field(default_factory=_default_weights)
    max_weight: float = Field(50, ge=0)


class ComparisonSettings(BaseModel):
    max_destinations: int = Field(4, ge=1)
    default_destination_ids: list[str] = Field(default_factory=lambda: ["paris", "tokyo", "istanbul"])


class BrowseSettings(BaseModel):
    default_sort: SortKey = "rating"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    comparison: ComparisonSettings = Field(default_factory=ComparisonSettings)
    browse: BrowseSettings = Field(default_factory=BrowseSettings)


# Env var -> (section, key).
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "DESTSCORE_LOG_LEVEL": ("app", "log_level"),
    "DESTSCORE_CATALOG_PATH": ("catalog", "path"),
}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    data = {k: dict(v) if isinstance(v, dict) else v for k, v in data.items()}
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(var)
        if value:
            data.setdefault(section, {})[key] = value
    return data


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings: YAML (packaged or `DESTSCORE_CONFIG_PATH`) plus env overrides."""
    load_dotenv_if_present()
    external = os.getenv("DESTSCORE_CONFIG_PATH")
    raw = _read_yaml_file(external) if external else _read_package_yaml("defaults.yaml")
    return Settings.model_validate(_apply_env_overrides(raw))


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """The packaged dictConfig payload. Callers must copy before mutating."""
    return _read_package_yaml("logging.yaml")

