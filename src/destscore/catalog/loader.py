"""
Destination catalog loader.

The catalog is a local JSON file (default: `data/catalogs/destinations.json`) holding
an array of destination records. We validate it into typed Pydantic models so the
scoring code can assume a consistent shape.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter

from destscore.core.env import resolve_project_path
from destscore.domain.models import Destination


_DESTINATIONS_ADAPTER = TypeAdapter(list[Destination])


class UnknownDestinationError(ValueError):
    """Raised when a destination id is not in the catalog."""

    def __init__(self, destination_id: str) -> None:
        super().__init__(f"Unknown destination id '{destination_id}'.")
        self.destination_id = destination_id


def load_destinations(path: str | Path) -> list[Destination]:
    """Load and validate a destination catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    return _DESTINATIONS_ADAPTER.validate_python(payload)


def index_by_id(destinations: list[Destination]) -> dict[str, Destination]:
    """Map id -> destination; the first record wins on duplicate ids."""
    out: dict[str, Destination] = {}
    for d in destinations:
        out.setdefault(d.id, d)
    return out


def write_catalog(path: str | Path, destinations: list[Destination]) -> Path:
    """Write destinations as a pretty-printed JSON catalog; returns the resolved path."""
    resolved = resolve_project_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    payload = _DESTINATIONS_ADAPTER.dump_python(destinations, mode="json", exclude_none=True)
    resolved.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return resolved
