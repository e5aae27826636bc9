from __future__ import annotations

from unittest.mock import patch

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from flavormap.app import app, current_resolver, current_store
from flavormap.countries.resolver import NameResolver
from flavormap.data_ingestion.ingest import CANONICAL_COLUMNS
from flavormap.errors import StoreFailure
from flavormap.store.data_store import RestaurantStore

client = TestClient(app)


def _row(**values) -> dict:
    row = {col: None for col in CANONICAL_COLUMNS}
    row.update(values)
    return row


def _use(rows: list[dict], columns: list[str] = CANONICAL_COLUMNS) -> None:
    store = RestaurantStore(pd.DataFrame(rows, columns=columns))
    app.dependency_overrides[current_store] = lambda: store


@pytest.fixture(autouse=True)
def _overrides():
    app.dependency_overrides[current_resolver] = lambda: NameResolver()
    _use([])
    yield
    app.dependency_overrides.clear()


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_root_message():
    assert client.get("/").status_code == 200


# ── Scenarios ────────────────────────────────────────────────────────────


def test_united_kingdom_count():
    _use([
        _row(country="England"),
        _row(country="England"),
        _row(country="Scotland"),
        _row(country="France"),
    ])
    resp = client.get("/api/restaurant-count", params={"country": "United Kingdom"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 3
    assert sorted(body["country"]) == ["England", "Northern Ireland", "Scotland", "Wales"]


def test_spain_markers_skip_missing_coordinates():
    _use([
        _row(restaurant_name="Casa Lucio", country="Spain", latitude="40.4", longitude="-3.7"),
        _row(restaurant_name="Sin Mapa", country="Spain", latitude=None, longitude="-3.7"),
    ])
    resp = client.get("/api/restaurants", params={"country": "Spain"})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 1
    assert body[0]["lat"] == 40.4
    assert body[0]["lng"] == -3.7
    assert body[0]["name"] == "Casa Lucio"


def test_price_buckets():
    _use([
        _row(country="Spain", price_level="€"),
        _row(country="Spain", price_level="€€-€€€"),
        _row(country="Spain", price_level=""),
        _row(country="Spain", price_level=None),
    ])
    resp = client.get("/api/country-prices", params={"country": "Spain"})
    assert resp.status_code == 200
    assert resp.json() == {"cheap": 1, "medium": 1, "luxury": 0}


def test_country_stats_empty_result():
    resp = client.get("/api/country-stats", params={"country": "Atlantis"})
    assert resp.status_code == 200
    assert resp.json() == {
        "country": "Atlantis",
        "total_restaurants": 0,
        "vegan": 0,
        "gluten_free": 0,
        "empty": True,
    }


def test_views_by_post_body():
    _use([_row(country="Wales"), _row(country="Ireland")])
    resp = client.post("/api/views", json={"country": "United Kingdom", "view_kind": "restaurant-count"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 1


def test_views_by_post_body_camel_case():
    _use([_row(country="Spain")])
    resp = client.post("/api/views", json={"country": "Spain", "viewKind": "restaurant-count"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 1


def test_global_view_without_country():
    _use([_row(country="Spain"), _row(country="Spain"), _row(country="Italy")])
    resp = client.get("/api/top-countries")
    assert resp.status_code == 200
    assert resp.json() == [{"country": "Spain", "count": 2}, {"country": "Italy", "count": 1}]


def test_violin_cuisines_returns_mapping():
    _use([_row(country="Italy", cuisines="Italian, Cafe", avg_rating=4.0)])
    resp = client.get("/api/violin-cuisines")
    assert resp.json() == {"Italian": [4.0], "Cafe": [4.0]}


# ── Country aliases ──────────────────────────────────────────────────────


def test_country_aliases_table():
    resp = client.get("/api/country-aliases")
    assert resp.status_code == 200
    assert resp.json()["Netherlands"] == ["The Netherlands", "Netherlands"]


def test_resolve_country():
    resp = client.get("/api/country-aliases/resolve", params={"country": "Scotland"})
    assert resp.json() == {"country": "Scotland", "variants": ["Scotland"], "canonical": "United Kingdom"}


def test_resolve_country_trims_whitespace():
    resp = client.get("/api/country-aliases/resolve", params={"country": " Spain "})
    assert resp.json() == {"country": "Spain", "variants": ["Spain"], "canonical": "Spain"}


def test_view_country_trims_whitespace():
    _use([_row(country="England"), _row(country="Scotland"), _row(country="Spain")])
    resp = client.get("/api/restaurant-count", params={"country": " United Kingdom "})
    assert resp.status_code == 200
    assert resp.json()["count"] == 2


def test_error_responses_documented():
    schema = client.get("/openapi.json").json()
    responses = schema["paths"]["/api/{view_kind}"]["get"]["responses"]
    assert {"400", "422", "500"} <= set(responses)
    assert responses["422"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")


# ── Errors ───────────────────────────────────────────────────────────────


@pytest.mark.parametrize("params", [{}, {"country": ""}, {"country": "   "}])
def test_missing_country_is_client_error(params):
    resp = client.get("/api/restaurant-count", params=params)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Country is required"


def test_unknown_view_kind():
    resp = client.get("/api/not-a-view", params={"country": "Spain"})
    assert resp.status_code == 400
    assert "not-a-view" in resp.json()["error"]


def test_missing_view_kind_in_body():
    resp = client.post("/api/views", json={"country": "Spain"})
    assert resp.status_code == 400


def test_multi_variant_country_on_map_view():
    resp = client.get("/api/restaurants", params={"country": "United Kingdom"})
    assert resp.status_code == 422
    body = resp.json()
    assert "single country" in body["error"]
    assert "England" in body["detail"]


def test_store_query_failure():
    _use([{"country": "Spain"}], columns=["country"])
    resp = client.get("/api/country-stats", params={"country": "Spain"})
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Query failed"
    assert "vegan_options" in body["detail"]


def test_unexpected_error_is_internal_error():
    def _broken_resolver():
        raise ValueError("alias table unreadable")

    app.dependency_overrides[current_resolver] = _broken_resolver
    lenient = TestClient(app, raise_server_exceptions=False)
    resp = lenient.get("/api/restaurant-count", params={"country": "Spain"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal error"}


@patch("flavormap.app.get_store", side_effect=StoreFailure("Restaurant data unavailable", detail="no such file"))
def test_store_load_failure(mock_get_store):
    app.dependency_overrides.pop(current_store)
    resp = client.get("/api/countries")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Restaurant data unavailable", "detail": "no such file"}
