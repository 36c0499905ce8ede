"""
Offline catalog quality report.

Goal: a deterministic view of "is our local catalog complete and sane?"
Used by:
- CLI debugging (`destscore quality-report`)
- API status endpoint
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from destscore.catalog.loader import load_destinations
from destscore.config.settings import Settings
from destscore.core.env import resolve_project_path
from destscore.domain.models import Destination


@dataclass(frozen=True)
class Issue:
    severity: str  # "info" | "warning" | "error"
    code: str
    message: str
    count: int = 1
    sample: list[str] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
            "count": int(self.count),
            "sample": list(self.sample or []),
        }


def _out_of_range(values: list[tuple[str, float | None]], lo: float, hi: float) -> list[str]:
    return [dest_id for dest_id, v in values if v is not None and not (lo <= v <= hi)]


def catalog_issues(destinations: list[Destination]) -> list[Issue]:
    issues: list[Issue] = []

    ids = [d.id for d in destinations]
    dup = {i for i in ids if ids.count(i) > 1}
    if dup:
        issues.append(
            Issue(
                severity="error",
                code="CATALOG_DUPLICATE_ID",
                message="Duplicate destination ids in catalog.",
                count=len(dup),
                sample=sorted(dup)[:8],
            )
        )

    bad_rating = _out_of_range([(d.id, d.rating) for d in destinations], 0, 5)
    if bad_rating:
        issues.append(
            Issue(
                severity="warning",
                code="CATALOG_RATING_RANGE",
                message="Some ratings fall outside 0..5.",
                count=len(bad_rating),
                sample=bad_rating[:8],
            )
        )

    for code, label, values in [
        ("CATALOG_SAFETY_RANGE", "safety", [(d.id, d.safety_overall) for d in destinations]),
        ("CATALOG_WALKABILITY_RANGE", "walkability", [(d.id, d.walkability) for d in destinations]),
    ]:
        bad = _out_of_range(values, 0, 10)
        if bad:
            issues.append(
                Issue(
                    severity="warning",
                    code=code,
                    message=f"Some {label} values fall outside 0..10.",
                    count=len(bad),
                    sample=bad[:8],
                )
            )

    for code, field_name in [
        ("CATALOG_MISSING_SAFETY", "safety_overall"),
        ("CATALOG_MISSING_CLIMATE", "climate_avg_temp_c"),
        ("CATALOG_MISSING_WALKABILITY", "walkability"),
    ]:
        missing = [d.id for d in destinations if getattr(d, field_name) is None]
        if missing:
            issues.append(
                Issue(
                    severity="info",
                    code=code,
                    message=f"Some destinations lack `{field_name}`; the default value is used for scoring.",
                    count=len(missing),
                    sample=missing[:8],
                )
            )

    no_costs = [d.id for d in destinations if d.costs is None or d.costs.total <= 0]
    if no_costs:
        issues.append(
            Issue(
                severity="info",
                code="CATALOG_MISSING_COSTS",
                message="Some destinations have no cost data; their cost score is neutral.",
                count=len(no_costs),
                sample=no_costs[:8],
            )
        )

    return issues


def build_quality_report(settings: Settings) -> dict[str, Any]:
    catalog_path = resolve_project_path(settings.catalog.path)

    destinations: list[Destination] = []
    try:
        destinations = load_destinations(catalog_path)
    except Exception as e:
        issues = [Issue(severity="error", code="CATALOG_LOAD_FAILED", message=str(e))]
    else:
        issues = catalog_issues(destinations)

    severity_rank = {"error": 3, "warning": 2, "info": 1}
    worst = "info"
    for i in issues:
        if severity_rank.get(i.severity, 0) > severity_rank.get(worst, 0):
            worst = i.severity

    return {
        "overall": {"severity": worst, "issue_count": len(issues)},
        "paths": {"catalog_path": str(catalog_path)},
        "catalog": {"destination_count": len(destinations)},
        "issues": [i.as_dict() for i in issues],
    }
