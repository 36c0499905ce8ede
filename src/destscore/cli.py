"""
DestScore CLI entrypoint.

This CLI is intended for quick local comparisons and catalog maintenance without the API.
It delegates all scoring logic to `destscore.recommender` and `destscore.scoring`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from destscore.catalog.importer import destinations_from_rows, merge_catalog, read_rows
from destscore.catalog.loader import load_destinations, write_catalog
from destscore.config.settings import get_settings
from destscore.core.logging import configure_logging
from destscore.domain.models import BrowseQuery, ComparisonRequest, FilterThresholds, WeightVector
from destscore.quality.report import build_quality_report
from destscore.recommender.browse import browse
from destscore.recommender.compare import compare
from destscore.scoring.composite import CATEGORY_NAMES
from destscore.scoring.explain import one_line_summary


def _weights_from_args(args: argparse.Namespace) -> WeightVector | None:
    """Build a WeightVector from `--w-*` flags; unset categories keep their configured default."""
    given = {name: getattr(args, f"w_{name}") for name in CATEGORY_NAMES}
    if all(v is None for v in given.values()):
        return None
    defaults = get_settings().scoring.default_weights.model_dump()
    return WeightVector(**{k: (float(v) if v is not None else defaults[k]) for k, v in given.items()})


def _thresholds_from_args(args: argparse.Namespace) -> FilterThresholds | None:
    given = {name: getattr(args, f"min_{name}") for name in CATEGORY_NAMES}
    if all(v is None for v in given.values()):
        return None
    return FilterThresholds(**{k: float(v) for k, v in given.items() if v is not None})


def _add_weight_and_threshold_args(p: argparse.ArgumentParser) -> None:
    for name in CATEGORY_NAMES:
        p.add_argument(f"--w-{name}", dest=f"w_{name}", type=float, default=None, help=f"Weight for {name}")
    for name in CATEGORY_NAMES:
        p.add_argument(
            f"--min-{name}", dest=f"min_{name}", type=float, default=None, help=f"Minimum {name} score (0..100)"
        )


def _cmd_compare(args: argparse.Namespace) -> int:
    """Handle the `compare` subcommand."""
    request = ComparisonRequest(
        destination_ids=args.id or [],
        weights=_weights_from_args(args),
        thresholds=_thresholds_from_args(args),
    )
    result = compare(request, settings=get_settings())

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Generated at: {result.generated_at.isoformat()}")
    print(f"Weights (total {result.weights.total:g}): {result.weights.model_dump()}")
    for item in result.results:
        print(one_line_summary(item))
    filtered_out = result.meta.get("filtered_out_ids") or []
    if filtered_out:
        print(f"Filtered out by score thresholds: {', '.join(filtered_out)}")
    return 0


def _cmd_browse(args: argparse.Namespace) -> int:
    """Handle the `browse` subcommand."""
    query = BrowseQuery(
        query=args.query,
        category=args.category,
        budget=args.budget,
        sort=args.sort,
        weights=_weights_from_args(args),
        thresholds=_thresholds_from_args(args),
        limit=args.limit,
    )
    result = browse(query, settings=get_settings())

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Showing {len(result.results)} of {result.total_count} destinations (sort={result.query.sort})")
    if result.filtered_by_scores_count:
        print(f"({result.filtered_by_scores_count} filtered by score requirements)")
    for item in result.results:
        d = item.destination
        print(f"{one_line_summary(item)}  [{d.country}, {d.budget_tier}]")
    return 0


def _cmd_quality_report(_: argparse.Namespace) -> int:
    report = build_quality_report(get_settings())
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def _cmd_catalog_import(args: argparse.Namespace) -> int:
    settings = get_settings()
    catalog_path = args.catalog or settings.catalog.path

    imported = destinations_from_rows(read_rows(args.source))
    existing = load_destinations(catalog_path)
    merged, summary = merge_catalog(existing, imported, mode=args.merge)

    if args.dry_run:
        print(json.dumps({"imported": len(imported), **summary.as_dict()}, indent=2))
        return 0

    written = write_catalog(catalog_path, merged)
    print("Wrote catalog:", written)
    print("Imported rows:", len(imported))
    print("Added:", len(summary.added), "Updated:", len(summary.updated), "Skipped:", len(summary.skipped))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the DestScore CLI."""
    parser = argparse.ArgumentParser(prog="destscore")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override app.log_level for this run",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    cmp_ = sub.add_parser("compare", help="Compare up to four destinations with weighted scores.")
    cmp_.add_argument("--id", action="append", default=[], help="Destination id (repeatable, max 4)")
    _add_weight_and_threshold_args(cmp_)
    cmp_.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    cmp_.set_defaults(func=_cmd_compare)

    br = sub.add_parser("browse", help="List catalog destinations with filters and sorting.")
    br.add_argument("--query", type=str, default=None, help="Search name, country and description")
    br.add_argument("--category", type=str, default=None)
    br.add_argument("--budget", choices=["all", "Budget", "Mid-range", "Luxury"], default=None)
    br.add_argument(
        "--sort",
        choices=["score", "rating", "name", "country", "places", "safety", "cost"],
        default=None,
    )
    br.add_argument("--limit", type=int, default=None)
    _add_weight_and_threshold_args(br)
    br.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    br.set_defaults(func=_cmd_browse)

    q = sub.add_parser("quality-report", help="Offline data quality report for the catalog.")
    q.set_defaults(func=_cmd_quality_report)

    imp = sub.add_parser("catalog-import", help="Merge destinations from a JSON/CSV file or JSON URL.")
    imp.add_argument("source", help="Path to a .json/.csv file, or an http(s) URL serving a JSON array")
    imp.add_argument("--catalog", type=str, default=None, help="Catalog to merge into (default: configured)")
    imp.add_argument("--merge", choices=["keep-existing", "overwrite"], default="keep-existing")
    imp.add_argument("--dry-run", action="store_true", help="Report what would change without writing")
    imp.set_defaults(func=_cmd_catalog_import)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m destscore.cli`."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
