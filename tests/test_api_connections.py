import pytest

from sellerdesk.core.errors import DependencyError
from sellerdesk.main import app
from sellerdesk.routers.deps import get_product_feed
from sellerdesk.schemas.connections import FeedProduct

from conftest import bearer

CREDS = {"api_key": "k" * 16}


class FakeFeed:
    def __init__(self, products=None, fail=False):
        self.products = products or []
        self.fail = fail
        self.calls = []

    async def fetch_products(self, store_type, credentials):
        self.calls.append((store_type, credentials["api_key"]))
        if self.fail:
            raise DependencyError("feed down")
        return [FeedProduct.model_validate(p) for p in self.products]


@pytest.fixture
def feed(client):
    f = FakeFeed(
        [
            {"external_id": "1", "name": "Mug", "price": 20, "stock_quantity": 5, "category": "Home"},
            {"external_id": "2", "name": "Cap", "price": 35.5, "category": "Fashion"},
        ]
    )
    app.dependency_overrides[get_product_feed] = lambda: f
    return f


def _create(client, token, store_type="shopee", creds=CREDS):
    return client.post(
        "/api/connections",
        json={"store_type": store_type, "store_name": "My shop", "api_credentials": creds},
        headers=bearer(token),
    )


def test_free_plan_cannot_connect_a_store(client, register):
    token, _ = register()
    r = _create(client, token)
    assert r.status_code == 403
    body = r.json()
    assert body["error"] == "insufficient_tier"
    assert body["current_plan"] == "free"
    assert body["required_plan"] == "premium"


def test_create_hides_credentials(client, premium_user):
    token, _ = premium_user
    r = _create(client, token)
    assert r.status_code == 201
    conn = r.json()["connection"]
    assert conn["store_type"] == "shopee"
    assert conn["is_active"] is True
    assert "api_credentials" not in conn

    listed = client.get("/api/connections", headers=bearer(token)).json()["connections"]
    assert [c["id"] for c in listed] == [conn["id"]]
    assert "api_credentials" not in listed[0]


def test_second_active_connection_of_same_type_conflicts(client, premium_user):
    token, _ = premium_user
    assert _create(client, token).status_code == 201
    assert _create(client, token).status_code == 409


def test_premium_plan_connection_limit(client, premium_user):
    token, _ = premium_user
    for store in ("shopee", "amazon", "shein"):
        assert _create(client, token, store).status_code == 201
    r = _create(client, token, "aliexpress")
    assert r.status_code == 409


def test_short_api_key_is_rejected(client, premium_user):
    token, _ = premium_user
    r = _create(client, token, creds={"api_key": "0123456789"})  # 10 chars
    assert r.status_code == 400
    r = _create(client, token, creds={"api_key": "short"})
    assert r.status_code == 400


def test_unknown_store_type_is_rejected(client, premium_user):
    token, _ = premium_user
    assert _create(client, token, "ebay").status_code == 400


def test_update_and_filter(client, premium_user):
    token, _ = premium_user
    conn_id = _create(client, token).json()["connection"]["id"]

    r = client.put(
        f"/api/connections/{conn_id}",
        json={"store_name": "Renamed", "is_active": False},
        headers=bearer(token),
    )
    assert r.status_code == 200
    assert r.json()["connection"]["store_name"] == "Renamed"
    assert r.json()["connection"]["is_active"] is False

    active = client.get("/api/connections?is_active=true", headers=bearer(token)).json()
    assert active["connections"] == []
    by_type = client.get("/api/connections?store_type=shopee", headers=bearer(token)).json()
    assert len(by_type["connections"]) == 1

    r = client.put(
        f"/api/connections/{conn_id}",
        json={"api_credentials": {"api_key": "tiny-key-1"}},
        headers=bearer(token),
    )
    assert r.status_code == 400


def test_sync_upserts_products(client, premium_user, feed):
    token, _ = premium_user
    conn_id = _create(client, token).json()["connection"]["id"]

    r = client.post(f"/api/connections/{conn_id}/sync", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["synced_products"] == 2
    assert feed.calls == [("shopee", CREDS["api_key"])]

    # second run updates in place
    feed.products[0]["price"] = 25
    client.post(f"/api/connections/{conn_id}/sync", headers=bearer(token))

    r = client.get("/api/connections/products", headers=bearer(token))
    body = r.json()
    assert body["pagination"]["total"] == 2
    prices = {p["external_id"]: p["price"] for p in body["products"]}
    assert prices == {"1": 25.0, "2": 35.5}

    r = client.get("/api/connections/products?category=Home", headers=bearer(token))
    assert [p["name"] for p in r.json()["products"]] == ["Mug"]

    conn = client.get(f"/api/connections/{conn_id}", headers=bearer(token)).json()["connection"]
    assert conn["last_sync"] is not None


def test_sync_requires_active_connection(client, premium_user, feed):
    token, _ = premium_user
    conn_id = _create(client, token).json()["connection"]["id"]
    client.put(f"/api/connections/{conn_id}", json={"is_active": False}, headers=bearer(token))
    r = client.post(f"/api/connections/{conn_id}/sync", headers=bearer(token))
    assert r.status_code == 404
    assert feed.calls == []


def test_sync_feed_failure_is_a_generic_dependency_error(client, premium_user, feed):
    token, _ = premium_user
    feed.fail = True
    conn_id = _create(client, token).json()["connection"]["id"]
    r = client.post(f"/api/connections/{conn_id}/sync", headers=bearer(token))
    assert r.status_code == 503
    assert r.json()["error"] == "dependency_error"
    assert "feed down" not in r.json()["message"]


def test_delete_connection_removes_products(client, premium_user, feed):
    token, _ = premium_user
    conn_id = _create(client, token).json()["connection"]["id"]
    client.post(f"/api/connections/{conn_id}/sync", headers=bearer(token))

    assert client.delete(f"/api/connections/{conn_id}", headers=bearer(token)).status_code == 200
    assert client.get(f"/api/connections/{conn_id}", headers=bearer(token)).status_code == 404
    r = client.get("/api/connections/products", headers=bearer(token))
    assert r.json()["pagination"]["total"] == 0


def test_downgraded_user_cannot_sync(client, premium_user, feed):
    token, _ = premium_user
    conn_id = _create(client, token).json()["connection"]["id"]
    client.put("/api/users/plan", json={"plan": "free"}, headers=bearer(token))
    r = client.post(f"/api/connections/{conn_id}/sync", headers=bearer(token))
    assert r.status_code == 403
    # reading existing connections stays allowed
    assert client.get(f"/api/connections/{conn_id}", headers=bearer(token)).status_code == 200


def test_reactivating_a_duplicate_store_type_conflicts(client, premium_user):
    token, _ = premium_user
    old_id = _create(client, token).json()["connection"]["id"]
    client.put(f"/api/connections/{old_id}", json={"is_active": False}, headers=bearer(token))
    assert _create(client, token).status_code == 201

    r = client.put(f"/api/connections/{old_id}", json={"is_active": True}, headers=bearer(token))
    assert r.status_code == 409
    active = client.get("/api/connections?is_active=true", headers=bearer(token)).json()
    assert len(active["connections"]) == 1


def test_reactivating_past_the_plan_limit_conflicts(client, premium_user):
    token, _ = premium_user
    old_id = _create(client, token, "aliexpress").json()["connection"]["id"]
    client.put(f"/api/connections/{old_id}", json={"is_active": False}, headers=bearer(token))
    for store in ("shopee", "amazon", "shein"):
        assert _create(client, token, store).status_code == 201

    r = client.put(f"/api/connections/{old_id}", json={"is_active": True}, headers=bearer(token))
    assert r.status_code == 409
    active = client.get("/api/connections?is_active=true", headers=bearer(token)).json()
    assert len(active["connections"]) == 3


def test_reactivation_within_limits_is_allowed(client, premium_user):
    token, _ = premium_user
    conn_id = _create(client, token).json()["connection"]["id"]
    client.put(f"/api/connections/{conn_id}", json={"is_active": False}, headers=bearer(token))
    r = client.put(f"/api/connections/{conn_id}", json={"is_active": True}, headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["connection"]["is_active"] is True


def test_sync_counts_repeated_external_ids_once(client, premium_user, feed):
    token, _ = premium_user
    feed.products.append({"external_id": "1", "name": "Mug v2", "price": 21})
    conn_id = _create(client, token).json()["connection"]["id"]

    r = client.post(f"/api/connections/{conn_id}/sync", headers=bearer(token))
    assert r.json()["synced_products"] == 2
    r = client.get("/api/connections/products", headers=bearer(token))
    assert r.json()["pagination"]["total"] == 2
