"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of scored destinations.
"""

from __future__ import annotations

from destscore.domain.models import ScoredDestination
from destscore.scoring.composite import CATEGORY_NAMES


def one_line_summary(item: ScoredDestination) -> str:
    """Render a compact single-line summary for a scored destination."""
    head = f"#{item.rank}" if item.rank is not None else "-"
    parts = [f"{head} {item.destination.name}", f"total={item.weighted_score:.1f}"]
    for name in CATEGORY_NAMES:
        parts.append(f"{name}={getattr(item.category_scores, name):.0f}")
    return " | ".join(parts)
