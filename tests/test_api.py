import pytest
from starlette.testclient import TestClient

from destscore.api.app import app
from destscore.domain.models import CostBreakdown, Destination

WEIGHTS = {"rating": 20, "safety": 20, "cost": 20, "climate": 15, "activities": 15, "walkability": 10}


def test_healthz():
    with TestClient(app) as c:
        resp = c.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_api_compare_ranks_selected_destinations():
    with TestClient(app) as c:
        resp = c.post("/api/compare", json={"destination_ids": ["paris", "tokyo"], "weights": WEIGHTS})
    assert resp.status_code == 200
    data = resp.json()
    assert [r["destination"]["id"] for r in data["results"]] == ["tokyo", "paris"]
    assert data["results"][0]["weighted_score"] == pytest.approx(68.5)
    assert data["results"][0]["rank"] == 1
    assert data["meta"]["selected_ids"] == ["paris", "tokyo"]


def test_api_compare_error_codes():
    with TestClient(app) as c:
        unknown = c.post("/api/compare", json={"destination_ids": ["atlantis"]})
        too_heavy = c.post("/api/compare", json={"destination_ids": ["paris"], "weights": {"rating": 80}})
        negative = c.post("/api/compare", json={"destination_ids": ["paris"], "weights": {"rating": -1}})
        disallowed = c.post(
            "/api/compare",
            json={"destination_ids": ["paris"], "settings_overrides": {"catalog": {"path": "/etc/passwd"}}},
        )

    assert unknown.status_code == 404
    assert unknown.json()["detail"]["code"] == "NOT_FOUND"
    assert too_heavy.status_code == 400
    assert too_heavy.json()["detail"]["code"] == "VALIDATION_ERROR"
    assert negative.status_code == 422
    assert disallowed.status_code == 400


def test_api_search_applies_filters_and_thresholds():
    with TestClient(app) as c:
        resp = c.post("/api/destinations/search", json={"query": "italy", "thresholds": {"cost": 50}})
    assert resp.status_code == 200
    data = resp.json()
    assert [r["destination"]["id"] for r in data["results"]] == ["rome"]
    assert data["basic_match_count"] == 3
    assert data["filtered_by_scores_count"] == 2
    assert data["query"]["sort"] == "rating"


def test_api_destination_detail():
    with TestClient(app) as c:
        ok = c.get("/api/destinations/tokyo")
        missing = c.get("/api/destinations/atlantis")
    assert ok.status_code == 200
    assert ok.json()["destination"]["name"] == "Tokyo"
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "NOT_FOUND"


def test_api_catalog_meta_and_settings():
    with TestClient(app) as c:
        meta = c.get("/api/catalog/meta").json()
        settings = c.get("/api/settings").json()

    assert meta["destination_count"] == 13
    assert meta["budget_counts"] == {"Budget": 1, "Luxury": 5, "Mid-range": 7}
    assert meta["country_counts"]["Italy"] == 3
    assert "Beach" in meta["categories"]

    assert settings["scoring"]["max_weight"] == 50
    assert settings["comparison"]["max_destinations"] == 4
    assert "catalog" not in settings
    assert "scoring.max_weight" not in settings["overridable"]
    assert "browse.default_sort" in settings["overridable"]


def test_api_uses_injected_catalog(monkeypatch):
    # Patch the cached catalog factory so the test controls the candidate set.
    import destscore.api.routes as routes

    cheap = Destination(
        id="cheap", name="Cheap", rating=4.0, costs=CostBreakdown(accommodation=50), climate_avg_temp_c=20
    )
    dear = Destination(
        id="dear", name="Dear", rating=4.0, costs=CostBreakdown(accommodation=150), climate_avg_temp_c=20
    )
    monkeypatch.setattr(routes, "_catalog", lambda: (cheap, dear))

    with TestClient(app) as c:
        resp = c.post("/api/compare", json={"destination_ids": ["dear", "cheap"], "weights": {"cost": 50}})
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["destination"]["id"] for r in results] == ["cheap", "dear"]
    assert results[0]["weighted_score"] == pytest.approx(50)
    assert results[1]["weighted_score"] == pytest.approx(0)


def test_api_quality_report():
    with TestClient(app) as c:
        resp = c.get("/api/quality/report")
    assert resp.status_code == 200
    assert resp.json()["catalog"]["destination_count"] == 13


def test_api_destination_detail_maps_unexpected_errors_to_500(monkeypatch):
    import destscore.api.routes as routes

    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(routes, "find_destination", broken)

    with TestClient(app) as c:
        resp = c.get("/api/destinations/paris")
    assert resp.status_code == 500
    assert resp.json()["detail"]["code"] == "INTERNAL_ERROR"
