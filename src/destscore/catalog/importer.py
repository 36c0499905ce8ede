"""
Destination import from user-supplied JSON/CSV files (or a JSON URL).

Imported files come in many shapes: snake_case or camelCase keys, nested blocks
(`costs`, `safety.overall`, `climate.avgTemp`, `transportation.walkability`) or flat
CSV columns. This module maps them onto `Destination` with lenient numeric
coercion: unparsable required numbers become 0, unparsable optional attributes stay
missing (the scoring default policy fills them later).
"""

from __future__ import annotations

import csv
import io
import json
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Literal

from pydantic import ValidationError

from destscore.core.env import resolve_project_path
from destscore.core.http import get_json, is_http_url
from destscore.domain.models import CostBreakdown, Destination

logger = logging.getLogger(__name__)

MergeMode = Literal["keep-existing", "overwrite"]

_BUDGET_TIERS = {"budget": "Budget", "mid-range": "Mid-range", "midrange": "Mid-range", "luxury": "Luxury"}
_COST_FIELDS = ("accommodation", "food", "activities", "transport")


def _first(row: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def _coalesce(*values: Any) -> Any:
    return next((v for v in values if v is not None and v != ""), None)


def _nested(row: dict[str, Any], block: str, key: str) -> Any:
    inner = row.get(block)
    if isinstance(inner, dict):
        return inner.get(key)
    return None


def _as_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        x = float(value)
    except (TypeError, ValueError):
        return None
    return x if math.isfinite(x) else None


def _as_int(value: Any) -> int:
    x = _as_float(value)
    return max(0, int(x)) if x is not None else 0


def _split_labels(value: Any) -> list[str]:
    if value is None:
        return []
    raw = value if isinstance(value, list) else str(value).split(";")
    return [str(v).strip() for v in raw if str(v).strip()]


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    return slug or "destination"


def _costs_from_row(row: dict[str, Any]) -> CostBreakdown | None:
    block = row.get("costs") if isinstance(row.get("costs"), dict) else row
    values = {k: _as_float(block.get(k)) for k in _COST_FIELDS}
    if all(v is None for v in values.values()):
        return None
    return CostBreakdown(**{k: max(0.0, v or 0.0) for k, v in values.items()})


def _budget_tier(value: Any) -> str:
    return _BUDGET_TIERS.get(str(value or "").strip().lower(), "Mid-range")


def destination_from_row(row: dict[str, Any], *, index: int, used_ids: set[str]) -> Destination:
    """Build one Destination from a loosely-shaped imported row."""
    row = {str(k).strip(): v for k, v in row.items() if k is not None}
    lower = {k.lower(): v for k, v in row.items()}

    name = str(_first(row, "name", "destination") or _first(lower, "name", "destination") or "").strip()
    name = name or f"Destination {index + 1}"

    dest_id = str(_first(row, "id") or "").strip() or slugify(name)
    base_id, suffix = dest_id, 2
    while dest_id in used_ids:
        dest_id = f"{base_id}-{suffix}"
        suffix += 1
    used_ids.add(dest_id)

    safety = _coalesce(
        _first(row, "safety_overall", "safetyOverall"),
        _nested(row, "safety", "overall"),
        None if isinstance(lower.get("safety"), dict) else lower.get("safety"),
    )
    temp = _coalesce(
        _first(row, "climate_avg_temp_c", "avgTemp"),
        _nested(row, "climate", "avgTemp"),
        _first(lower, "avgtemp", "temperature"),
    )
    walk = _coalesce(_first(lower, "walkability"), _nested(row, "transportation", "walkability"))

    return Destination(
        id=dest_id,
        name=name,
        country=str(_first(row, "country") or _first(lower, "country") or "Unknown"),
        region=_first(row, "region") or _first(lower, "region"),
        description=str(_first(row, "description") or _first(lower, "description") or "Imported destination"),
        image=_first(row, "image") or _first(lower, "image"),
        categories=_split_labels(_first(row, "categories") or _first(lower, "categories")),
        rating=max(0.0, _as_float(_first(lower, "rating")) or 0.0),
        review_count=_as_int(_first(row, "review_count", "reviewCount") or _first(lower, "reviews", "reviewcount")),
        poi_count=_as_int(_first(row, "poi_count", "poiCount") or _first(lower, "pois", "poicount")),
        safety_overall=_as_float(safety),
        costs=_costs_from_row(lower),
        climate_avg_temp_c=_as_float(temp),
        walkability=_as_float(walk),
        budget_tier=_budget_tier(_first(row, "budget_tier", "budget") or lower.get("budget")),
        best_time_to_visit=_first(row, "best_time_to_visit", "bestTimeToVisit")
        or _first(lower, "besttimetovisit", "besttime"),
    )


def destinations_from_rows(rows: Iterable[dict[str, Any]]) -> list[Destination]:
    """Convert rows to destinations, skipping rows that still fail validation."""
    used_ids: set[str] = set()
    out: list[Destination] = []
    for i, row in enumerate(rows):
        try:
            out.append(destination_from_row(row, index=i, used_ids=used_ids))
        except ValidationError as e:
            logger.warning("Skipping imported row %d: %s", i + 1, e.errors()[0].get("msg", str(e)))
    return out


def rows_from_json_payload(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, list):
        return [r for r in payload if isinstance(r, dict)]
    raise ValueError("Unsupported JSON shape: expected an array of destinations.")


def rows_from_csv_text(text: str) -> list[dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(text))
    rows: list[dict[str, Any]] = []
    for row in reader:
        if any(isinstance(v, str) and v.strip() for v in row.values()):
            rows.append(row)
    return rows


def read_rows(source: str | Path) -> list[dict[str, Any]]:
    """Read raw rows from a `.json`/`.csv` file or an http(s) URL serving a JSON array."""
    if isinstance(source, str) and is_http_url(source):
        return rows_from_json_payload(get_json(source))

    path = resolve_project_path(source)
    suffix = path.suffix.lower()
    if suffix == ".json":
        return rows_from_json_payload(json.loads(path.read_text(encoding="utf-8")))
    if suffix == ".csv":
        return rows_from_csv_text(path.read_text(encoding="utf-8-sig"))
    raise ValueError(f"Unsupported file format '{suffix or path.name}'; expected .json or .csv.")


@dataclass
class MergeSummary:
    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {"added": list(self.added), "updated": list(self.updated), "skipped": list(self.skipped)}


def merge_catalog(
    existing: list[Destination], imported: list[Destination], *, mode: MergeMode = "keep-existing"
) -> tuple[list[Destination], MergeSummary]:
    """Merge imported destinations into the catalog, keeping catalog order for existing ids."""
    summary = MergeSummary()
    merged = list(existing)
    position = {d.id: i for i, d in enumerate(merged)}
    for dest in imported:
        if dest.id not in position:
            position[dest.id] = len(merged)
            merged.append(dest)
            summary.added.append(dest.id)
        elif mode == "overwrite":
            merged[position[dest.id]] = dest
            summary.updated.append(dest.id)
        else:
            summary.skipped.append(dest.id)
    return merged, summary
