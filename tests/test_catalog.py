import json

import pytest
from pydantic import ValidationError

from destscore.catalog.importer import (
    destinations_from_rows,
    merge_catalog,
    read_rows,
    rows_from_csv_text,
    rows_from_json_payload,
    slugify,
)
from destscore.catalog.loader import index_by_id, load_destinations, write_catalog
from destscore.config.settings import get_settings
from destscore.domain.models import CostBreakdown, Destination, FilterThresholds, WeightVector
from destscore.scoring.engine import score_filter_rank


def test_packaged_catalog_loads_with_unique_ids():
    destinations = load_destinations(get_settings().catalog.path)
    ids = [d.id for d in destinations]
    assert len(ids) == 13
    assert len(set(ids)) == 13
    paris = index_by_id(destinations)["paris"]
    assert paris.costs is not None and paris.costs.total == 215


def test_slugify():
    assert slugify("New York City") == "new-york-city"
    assert slugify("  Côte d'Azur ") == "c-te-d-azur"
    assert slugify("!!!") == "destination"


def test_import_nested_camel_case_json_rows():
    rows = rows_from_json_payload(
        [
            {
                "name": "Lisbon",
                "country": "Portugal",
                "rating": "4.6",
                "reviewCount": 1200,
                "poiCount": 900,
                "categories": ["Food", " Tiles "],
                "costs": {"accommodation": 80, "food": 25, "activities": 20, "transport": 10},
                "safety": {"overall": 8},
                "climate": {"avgTemp": 18},
                "transportation": {"walkability": 7},
                "budget": "budget",
                "bestTimeToVisit": "Apr-Jun",
            },
            "not a row",
        ]
    )
    (lisbon,) = destinations_from_rows(rows)

    assert lisbon.id == "lisbon"
    assert lisbon.rating == pytest.approx(4.6)
    assert lisbon.review_count == 1200
    assert lisbon.poi_count == 900
    assert lisbon.categories == ["Food", "Tiles"]
    assert lisbon.costs is not None and lisbon.costs.total == pytest.approx(135)
    assert lisbon.safety_overall == 8
    assert lisbon.climate_avg_temp_c == 18
    assert lisbon.walkability == 7
    assert lisbon.budget_tier == "Budget"
    assert lisbon.best_time_to_visit == "Apr-Jun"


def test_import_keeps_zero_values_and_leaves_unknowns_missing():
    (cold, bare) = destinations_from_rows(
        [
            {"id": "cold", "name": "Cold Town", "safety_overall": 0, "avgTemp": 0, "walkability": 0},
            {"name": "Bare", "rating": "n/a", "safety_overall": "unknown"},
        ]
    )
    assert cold.safety_overall == 0
    assert cold.climate_avg_temp_c == 0
    assert cold.walkability == 0

    assert bare.rating == 0
    assert bare.safety_overall is None
    assert bare.climate_avg_temp_c is None
    assert bare.costs is None
    assert bare.budget_tier == "Mid-range"


def test_import_generates_unique_ids_and_names():
    out = destinations_from_rows([{"name": "Porto"}, {"name": "Porto"}, {"country": "Nowhere"}])
    assert [d.id for d in out] == ["porto", "porto-2", "destination-3"]
    assert out[2].name == "Destination 3"


def test_import_csv_rows():
    text = (
        "name,country,rating,accommodation,food,activities,transport,safety,avgTemp,walkability,categories,budget\n"
        "Porto,Portugal,4.5,70,25,15,8,8,17,7,Food;Wine,Mid-range\n"
        ",,,,,,,,,,,\n"
    )
    rows = rows_from_csv_text(text)
    assert len(rows) == 1

    (porto,) = destinations_from_rows(rows)
    assert porto.id == "porto"
    assert porto.costs is not None and porto.costs.total == pytest.approx(118)
    assert porto.safety_overall == 8
    assert porto.climate_avg_temp_c == 17
    assert porto.walkability == 7
    assert porto.categories == ["Food", "Wine"]


def test_read_rows_from_files(tmp_path):
    json_path = tmp_path / "rows.json"
    json_path.write_text(json.dumps([{"name": "Porto"}]), encoding="utf-8")
    assert read_rows(json_path) == [{"name": "Porto"}]

    csv_path = tmp_path / "rows.csv"
    csv_path.write_text("name,country\nPorto,Portugal\n", encoding="utf-8")
    assert read_rows(csv_path) == [{"name": "Porto", "country": "Portugal"}]

    bad = tmp_path / "rows.txt"
    bad.write_text("Porto", encoding="utf-8")
    with pytest.raises(ValueError, match=r"Unsupported file format"):
        read_rows(bad)

    with pytest.raises(ValueError, match=r"array"):
        rows_from_json_payload({"destinations": []})


def test_merge_catalog_modes():
    existing = [Destination(id="paris", name="Paris"), Destination(id="rome", name="Rome")]
    imported = [Destination(id="rome", name="Roma"), Destination(id="porto", name="Porto")]

    merged, summary = merge_catalog(existing, imported)
    assert [(d.id, d.name) for d in merged] == [("paris", "Paris"), ("rome", "Rome"), ("porto", "Porto")]
    assert summary.as_dict() == {"added": ["porto"], "updated": [], "skipped": ["rome"]}

    merged, summary = merge_catalog(existing, imported, mode="overwrite")
    assert [(d.id, d.name) for d in merged] == [("paris", "Paris"), ("rome", "Roma"), ("porto", "Porto")]
    assert summary.updated == ["rome"]


def test_write_catalog_then_load(tmp_path):
    destinations = [Destination(id="porto", name="Porto", rating=4.5), Destination(id="x", name="X")]
    written = write_catalog(tmp_path / "nested" / "catalog.json", destinations)

    assert written.is_file()
    assert "region" not in written.read_text(encoding="utf-8")
    assert load_destinations(written) == destinations


def test_import_treats_non_finite_numbers_as_unparsable():
    (row,) = destinations_from_rows(
        [
            {
                "name": "X",
                "pois": "nan",
                "reviews": "inf",
                "rating": "inf",
                "safety": "nan",
                "avgTemp": "-inf",
                "walkability": "NaN",
                "accommodation": "inf",
                "food": "10",
            }
        ]
    )
    assert row.poi_count == 0
    assert row.review_count == 0
    assert row.rating == 0
    assert row.safety_overall is None
    assert row.climate_avg_temp_c is None
    assert row.walkability is None
    assert row.costs is not None and row.costs.total == 10


def test_imported_nan_does_not_poison_scores():
    rows = [{"id": i, "name": i.upper(), "safety": s} for i, s in zip("abc", ["nan", "8", "3"])]
    ranked = score_filter_rank(destinations_from_rows(rows), WeightVector(safety=100))

    # "a" falls back to the default safety of 5: (5 - 3) / (8 - 3) * 100.
    scores = {r.destination.id: r.category_scores.safety for r in ranked}
    assert scores == pytest.approx({"a": 40.0, "b": 100.0, "c": 0.0})
    assert [r.destination.id for r in ranked] == ["b", "a", "c"]


@pytest.mark.parametrize("field", ["rating", "safety_overall", "climate_avg_temp_c", "walkability"])
def test_destination_rejects_non_finite_numbers(field):
    with pytest.raises(ValidationError):
        Destination(id="x", name="X", **{field: float("nan")})
    with pytest.raises(ValidationError):
        Destination(id="x", name="X", **{field: float("inf")})


def test_weights_and_thresholds_reject_non_finite_numbers():
    with pytest.raises(ValidationError):
        WeightVector(rating=float("inf"))
    with pytest.raises(ValidationError):
        FilterThresholds(cost=float("nan"))
    with pytest.raises(ValidationError):
        CostBreakdown(food=float("inf"))
