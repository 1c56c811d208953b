"""API tests for the product and product type routes."""

import pytest
from fastapi.testclient import TestClient

from app.adapters.cache import InMemoryTTLCache
from app.adapters.rate_limit import InMemoryFixedWindowRateLimiter
from app.adapters.repositories import InMemoryProductRepository, InMemoryProductTypeRepository
from app.core.app_factory import create_app
from app.core.config import settings
from app.core.lifecycle import AppServices

PRODUCT = {
    "code": 101,
    "description": "Yerba mate 1kg",
    "productTypeId": 1,
    "costPrice": 1000,
    "publicPrice": 1234.5,
    "stock": 8,
}


@pytest.fixture
def seeded_client(client: TestClient, admin_headers) -> TestClient:
    resp = client.post("/v1/product-types", json={"name": "Infusions"}, headers=admin_headers)
    assert resp.status_code == 201
    resp = client.post("/v1/products", json=PRODUCT, headers=admin_headers)
    assert resp.status_code == 201
    return client


class TestAuth:
    def test_missing_token_is_401(self, client: TestClient) -> None:
        resp = client.get("/v1/products")

        assert resp.status_code == 401
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "unauthorized"

    def test_wrong_token_is_401(self, client: TestClient) -> None:
        resp = client.get("/v1/products", headers={"Authorization": "Bearer nope"})

        assert resp.status_code == 401

    def test_cookie_token_is_accepted(self, client: TestClient) -> None:
        client.cookies.set("auth_token", "test-admin-token")

        resp = client.get("/v1/product-types")

        assert resp.status_code == 200

    def test_health_is_public(self, client: TestClient) -> None:
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestProductListing:
    def test_listing_is_cached_until_mutation(self, seeded_client: TestClient, admin_headers) -> None:
        first = seeded_client.get("/v1/products", headers=admin_headers)
        second = seeded_client.get("/v1/products", headers=admin_headers)

        assert first.headers["X-Cache"] == "MISS"
        assert second.headers["X-Cache"] == "HIT"
        assert first.json() == second.json()

        created = seeded_client.post(
            "/v1/products", json={**PRODUCT, "code": 102}, headers=admin_headers
        )
        assert created.status_code == 201

        third = seeded_client.get("/v1/products", headers=admin_headers)
        assert third.headers["X-Cache"] == "MISS"
        assert third.json()["data"]["total"] == 2

    def test_listing_shape_and_price_format(self, seeded_client: TestClient, admin_headers) -> None:
        body = seeded_client.get("/v1/products", headers=admin_headers).json()

        assert body["success"] is True
        page = body["data"]
        assert page["total"] == 1
        assert page["page"] == 1
        assert page["pageSize"] == 10
        assert page["totalPages"] == 1
        item = page["data"][0]
        assert item["publicPrice"] == "1.234,50"
        assert item["costPrice"] == "1.000,00"
        assert item["productType"]["name"] == "Infusions"

    def test_cached_listing_keeps_price_format(self, seeded_client: TestClient, admin_headers) -> None:
        seeded_client.get("/v1/products", headers=admin_headers)
        hit = seeded_client.get("/v1/products", headers=admin_headers)

        assert hit.headers["X-Cache"] == "HIT"
        assert hit.json()["data"]["data"][0]["publicPrice"] == "1.234,50"

    def test_malformed_query_params_fall_back_to_defaults(
        self, seeded_client: TestClient, admin_headers
    ) -> None:
        resp = seeded_client.get(
            "/v1/products", params={"page": "abc", "pageSize": "1000"}, headers=admin_headers
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["page"] == 1
        assert resp.json()["data"]["pageSize"] == 100

    def test_search_filter(self, seeded_client: TestClient, admin_headers) -> None:
        hit = seeded_client.get("/v1/products", params={"search": "mate"}, headers=admin_headers)
        miss = seeded_client.get("/v1/products", params={"search": "coffee"}, headers=admin_headers)

        assert hit.json()["data"]["total"] == 1
        assert miss.json()["data"]["total"] == 0

    def test_rate_limit_headers_on_allowed_requests(
        self, seeded_client: TestClient, admin_headers
    ) -> None:
        resp = seeded_client.get("/v1/products", headers=admin_headers)

        assert "X-RateLimit-Remaining" in resp.headers
        assert "X-RateLimit-Reset" in resp.headers


    def test_rate_limit_headers_can_be_disabled(
        self, seeded_client: TestClient, admin_headers, monkeypatch
    ) -> None:
        monkeypatch.setattr(settings.app, "rate_limit_include_headers", False)

        resp = seeded_client.get("/v1/products", headers=admin_headers)

        assert resp.status_code == 200
        assert "X-RateLimit-Remaining" not in resp.headers
        assert "X-RateLimit-Reset" not in resp.headers


class TestProductCrud:
    def test_get_product(self, seeded_client: TestClient, admin_headers) -> None:
        resp = seeded_client.get("/v1/products/1", headers=admin_headers)

        assert resp.status_code == 200
        assert resp.json()["data"]["code"] == 101

    def test_get_missing_product_is_404(self, client: TestClient, admin_headers) -> None:
        resp = client.get("/v1/products/999", headers=admin_headers)

        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "product_not_found"

    def test_duplicate_code_is_409(self, seeded_client: TestClient, admin_headers) -> None:
        resp = seeded_client.post("/v1/products", json=PRODUCT, headers=admin_headers)

        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "product_code_taken"

    def test_invalid_body_is_400(self, seeded_client: TestClient, admin_headers) -> None:
        resp = seeded_client.post(
            "/v1/products", json={**PRODUCT, "code": 0}, headers=admin_headers
        )

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"]["code"] == "validation_failed"
        assert body["error"]["details"]["errors"]

    def test_update_product(self, seeded_client: TestClient, admin_headers) -> None:
        resp = seeded_client.put(
            "/v1/products/1", json={"publicPrice": 2000}, headers=admin_headers
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["publicPrice"] == "2.000,00"
        assert resp.json()["data"]["stock"] == 8

    def test_soft_delete_restore_and_hard_delete(
        self, seeded_client: TestClient, admin_headers
    ) -> None:
        assert seeded_client.delete("/v1/products/1", headers=admin_headers).status_code == 200
        assert seeded_client.get("/v1/products/1", headers=admin_headers).status_code == 404
        deleted = seeded_client.get(
            "/v1/products/1", params={"includeDeleted": "true"}, headers=admin_headers
        )
        assert deleted.json()["data"]["deletedAt"] is not None

        restored = seeded_client.post("/v1/products/1/restore", headers=admin_headers)
        assert restored.status_code == 200
        assert restored.json()["data"]["deletedAt"] is None

        hard = seeded_client.delete("/v1/products/1/hard-delete", headers=admin_headers)
        assert hard.status_code == 200
        assert hard.json()["data"]["message"] == "Product permanently deleted"
        assert seeded_client.get(
            "/v1/products/1", params={"includeDeleted": "true"}, headers=admin_headers
        ).status_code == 404


class TestProductTypeRoutes:
    def test_crud(self, client: TestClient, admin_headers) -> None:
        created = client.post(
            "/v1/product-types", json={"name": "Snacks"}, headers=admin_headers
        )
        assert created.status_code == 201
        type_id = created.json()["data"]["id"]

        updated = client.put(
            f"/v1/product-types/{type_id}",
            json={"description": "Salty"},
            headers=admin_headers,
        )
        assert updated.json()["data"]["description"] == "Salty"

        listed = client.get("/v1/product-types", headers=admin_headers)
        assert [pt["name"] for pt in listed.json()["data"]] == ["Snacks"]

        assert client.delete(f"/v1/product-types/{type_id}", headers=admin_headers).status_code == 200
        assert client.get(f"/v1/product-types/{type_id}", headers=admin_headers).status_code == 404

    def test_delete_type_in_use_is_409(self, seeded_client: TestClient, admin_headers) -> None:
        resp = seeded_client.delete("/v1/product-types/1", headers=admin_headers)

        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "product_type_in_use"

    def test_renaming_type_invalidates_listing(
        self, seeded_client: TestClient, admin_headers
    ) -> None:
        seeded_client.get("/v1/products", headers=admin_headers)
        seeded_client.put("/v1/product-types/1", json={"name": "Herbs"}, headers=admin_headers)

        resp = seeded_client.get("/v1/products", headers=admin_headers)

        assert resp.headers["X-Cache"] == "MISS"
        assert resp.json()["data"]["data"][0]["productType"]["name"] == "Herbs"


class TestRateLimiting:
    @pytest.fixture
    def limited_client(self, clock) -> TestClient:
        services = AppServices(
            cache=InMemoryTTLCache(clock=clock),
            rate_limiter=InMemoryFixedWindowRateLimiter(max_requests=2, window_ms=1000, clock=clock),
            products=InMemoryProductRepository(),
            product_types=InMemoryProductTypeRepository(),
        )
        return TestClient(create_app(services))

    def test_exceeding_limit_returns_429(self, limited_client: TestClient, admin_headers, clock) -> None:
        headers = {**admin_headers, "X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

        assert limited_client.get("/v1/products", headers=headers).status_code == 200
        assert limited_client.get("/v1/products", headers=headers).status_code == 200

        blocked = limited_client.get("/v1/products", headers=headers)
        assert blocked.status_code == 429
        body = blocked.json()
        assert body["success"] is False
        assert body["error"]["code"] == "rate_limit_exceeded"
        assert body["error"]["details"] == {"reset_at": 1_001_000}
        assert blocked.headers["Retry-After"] == "1"
        assert blocked.headers["X-RateLimit-Limit"] == "2"
        assert blocked.headers["X-RateLimit-Remaining"] == "0"

        other_client = {**admin_headers, "X-Forwarded-For": "198.51.100.1"}
        assert limited_client.get("/v1/products", headers=other_client).status_code == 200

        clock.advance(1.5)
        assert limited_client.get("/v1/products", headers=headers).status_code == 200

    def test_single_product_routes_are_not_limited(self, limited_client: TestClient, admin_headers) -> None:
        for _ in range(5):
            assert limited_client.get("/v1/products/1", headers=admin_headers).status_code == 404
