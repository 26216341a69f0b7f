import pytest

from conftest import bearer


@pytest.fixture
def token(register):
    return register()[0]


# ── market research ──────────────────────────────────────────────────────────
def test_market_research_crud(client, token):
    r = client.post(
        "/api/market-research",
        json={"product_name": "Wireless mouse", "category": "Electronics", "search_data": {"q": "mouse"}},
        headers=bearer(token),
    )
    assert r.status_code == 201
    research = r.json()["research"]
    assert research["results"] is None
    rid = research["id"]

    client.post(
        "/api/market-research",
        json={"product_name": "Desk lamp", "category": "Home"},
        headers=bearer(token),
    )

    r = client.get("/api/market-research?category=Electronics", headers=bearer(token))
    body = r.json()
    assert body["pagination"]["total"] == 1
    assert body["researches"][0]["id"] == rid

    r = client.put(
        f"/api/market-research/{rid}",
        json={"product_name": "Gaming mouse", "category": "Electronics"},
        headers=bearer(token),
    )
    assert r.status_code == 200
    assert r.json()["research"]["product_name"] == "Gaming mouse"
    assert r.json()["research"]["search_data"] is None

    assert client.delete(f"/api/market-research/{rid}", headers=bearer(token)).status_code == 200
    assert client.get(f"/api/market-research/{rid}", headers=bearer(token)).status_code == 404


def test_market_research_validation(client, token):
    r = client.post("/api/market-research", json={"product_name": "x"}, headers=bearer(token))
    assert r.status_code == 400
    r = client.post(
        "/api/market-research",
        json={"product_name": "ok name", "category": "c" * 101},
        headers=bearer(token),
    )
    assert r.status_code == 400


def test_market_research_is_owner_scoped(client, register):
    a, _ = register(email="a@example.com")
    b, _ = register(email="b@example.com")
    rid = client.post(
        "/api/market-research", json={"product_name": "Shoes"}, headers=bearer(a)
    ).json()["research"]["id"]
    r = client.put(
        f"/api/market-research/{rid}", json={"product_name": "Hijacked"}, headers=bearer(b)
    )
    assert r.status_code == 404


# ── saved ads ────────────────────────────────────────────────────────────────
def _ad(**kw):
    return {
        "name": "Summer sale",
        "calculator_type": "pricing",
        "calculation_data": {"cost_price": 10, "final_price": 20},
        **kw,
    }


def test_saved_ad_requires_core_fields(client, token):
    r = client.post("/api/saved-ads", json={"name": "x"}, headers=bearer(token))
    assert r.status_code == 400


def test_saved_ad_crud(client, token):
    r = client.post("/api/saved-ads", json=_ad(tags=["summer"]), headers=bearer(token))
    assert r.status_code == 201
    ad = r.json()["data"]
    assert r.json()["success"] is True
    assert ad["tags"] == ["summer"]
    assert ad["photo_url"] is None

    r = client.put(
        f"/api/saved-ads/{ad['id']}",
        json={"comment": "best seller", "name": None},
        headers=bearer(token),
    )
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["comment"] == "best seller"
    assert updated["name"] == "Summer sale"
    assert updated["tags"] == ["summer"]

    listed = client.get("/api/saved-ads", headers=bearer(token)).json()["data"]
    assert [x["id"] for x in listed] == [ad["id"]]

    assert client.delete(f"/api/saved-ads/{ad['id']}", headers=bearer(token)).status_code == 200
    assert client.get(f"/api/saved-ads/{ad['id']}", headers=bearer(token)).status_code == 404
    assert client.delete(f"/api/saved-ads/{ad['id']}", headers=bearer(token)).status_code == 404


def test_saved_ads_are_owner_scoped(client, register):
    a, _ = register(email="a@example.com")
    b, _ = register(email="b@example.com")
    ad_id = client.post("/api/saved-ads", json=_ad(), headers=bearer(a)).json()["data"]["id"]
    assert client.get(f"/api/saved-ads/{ad_id}", headers=bearer(b)).status_code == 404
    assert client.get("/api/saved-ads", headers=bearer(b)).json()["data"] == []
