"""
tests/test_api.py

Pytest API tests for the product, order, cart and quote endpoints.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from factories import make_ledger
from tirestock import __version__
from tirestock.main import create_app
from tirestock.services.inventory import InventoryStore
from tirestock.services.reconciliation_service import (
    ReconciliationService,
    get_reconciliation_service,
)
from tirestock.sources.ledger import StaticLedgerSource
from tirestock.sources.stock import StaticStockSource


@pytest.fixture()
def service(sample_document: str) -> ReconciliationService:
    ledger = (
        make_ledger("AB12", factory_price=150000, season="Summer"),
        make_ledger("MX77", brand="Michelin", model="Pilot Sport 4", factory_price=210000),
        make_ledger("ZZ99", model="Kinergy 4S2", factory_price=120000),
    )
    return ReconciliationService(
        stock_source=StaticStockSource(sample_document),
        ledger_source=StaticLedgerSource(ledger),
        inventory_store=InventoryStore(default_reorder_point=4),
    )


@pytest.fixture()
def client(service: ReconciliationService) -> Iterator[TestClient]:
    app = create_app()
    app.dependency_overrides[get_reconciliation_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _load(client: TestClient) -> list[dict]:
    response = client.get("/products", params={"size": "245/45R18"})
    assert response.status_code == 200
    return response.json()


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class TestProductsEndpoint:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}

    def test_size_query_loads_and_orders_products(self, client: TestClient) -> None:
        body = _load(client)

        assert [item["part_no"] for item in body] == ["AB12", "MX77", "ZZ99"]
        assert body[0]["total_stock"] == 12
        assert body[0]["brand_display_name"] == "한국"
        assert body[1]["discounted_price"] == 210000

    def test_filters_apply_to_loaded_products(self, client: TestClient) -> None:
        _load(client)

        by_brand = client.get("/products", params={"brand": "Michelin"}).json()
        by_season = client.get("/products", params={"season": "Summer"}).json()

        assert [item["part_no"] for item in by_brand] == ["MX77"]
        assert [item["part_no"] for item in by_season] == ["AB12"]

    def test_explicit_sort(self, client: TestClient) -> None:
        _load(client)

        body = client.get("/products", params={"sort_key": "factory_price", "direction": "asc"}).json()

        assert [item["factory_price"] for item in body] == [120000, 150000, 210000]

    def test_unknown_sort_key_is_rejected(self, client: TestClient) -> None:
        response = client.get("/products", params={"sort_key": "colour"})

        assert response.status_code == 400


class TestPricingEndpoint:
    def test_discount_override(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]

        response = client.patch(f"/products/{product_id}/pricing", json={"discount_rate": 15})

        assert response.status_code == 200
        assert response.json()["discounted_price"] == 127500

    def test_unknown_product(self, client: TestClient) -> None:
        response = client.patch("/products/missing/pricing", json={"discount_rate": 15})

        assert response.status_code == 404

    def test_invalid_factory_price(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]

        response = client.patch(f"/products/{product_id}/pricing", json={"factory_price": "0"})

        assert response.status_code == 400

    @pytest.mark.parametrize("field", ["discount_rate", "factory_price"])
    def test_non_numeric_value_is_rejected(self, client: TestClient, field: str) -> None:
        product_id = _load(client)[0]["product_id"]

        response = client.patch(f"/products/{product_id}/pricing", json={field: "abc"})
        listed = client.get("/products").json()[0]

        assert response.status_code == 400
        assert (listed["discount_rate"], listed["factory_price"]) == (0, 150000)

    def test_blank_discount_resets_to_zero(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]
        client.patch(f"/products/{product_id}/pricing", json={"discount_rate": 20})

        response = client.patch(f"/products/{product_id}/pricing", json={"discount_rate": " "})

        assert response.status_code == 200
        assert response.json()["discounted_price"] == 150000


class TestBrandOptionsEndpoint:
    def test_lists_filter_options_with_labels(self, client: TestClient) -> None:
        response = client.get("/brands")

        assert response.status_code == 200
        body = response.json()
        assert body[0] == {"value": "All", "label": "All"}
        assert {"value": "Hankook", "label": "한국+라우펜"} in body
        assert {"value": "Michelin", "label": "미쉐린"} in body


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


class TestSelectionEndpoints:
    def test_toggle_selection_flips_state(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]

        first = client.post(f"/products/{product_id}/selection").json()
        second = client.post(f"/products/{product_id}/selection").json()

        assert (first["selected"], first["selected_ids"]) == (True, [product_id])
        assert (second["selected"], second["selected_ids"]) == (False, [])

    def test_toggle_unknown_product(self, client: TestClient) -> None:
        _load(client)

        assert client.post("/products/missing/selection").status_code == 404

    def test_select_all_then_clear(self, client: TestClient) -> None:
        ids = [item["product_id"] for item in _load(client)]

        selected = client.post("/products/selection/all", json={"product_ids": ids}).json()
        cleared = client.post("/products/selection/all", json={"product_ids": ids}).json()

        assert selected["selected_ids"] == ids
        assert cleared["selected_ids"] == []


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class TestOrdersEndpoint:
    def test_order_reports_low_stock(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]

        response = client.post("/orders", json={"product_id": product_id, "quantity": 9})

        assert response.status_code == 200
        body = response.json()
        assert body["remaining"] == 3
        assert body["source"] == "store"
        assert body["low_stock_alert"] == {"remaining": 3, "reorder_point": 4}

    def test_insufficient_stock_conflict(self, client: TestClient) -> None:
        product_id = _load(client)[1]["product_id"]

        response = client.post("/orders", json={"product_id": product_id, "quantity": 4})

        assert response.status_code == 409

    def test_missing_record(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]

        response = client.post(
            "/orders",
            json={"product_id": product_id, "quantity": 1, "source": "warehouse"},
        )

        assert response.status_code == 404

    def test_quantity_must_be_positive(self, client: TestClient) -> None:
        response = client.post("/orders", json={"product_id": "x", "quantity": 0})

        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Cart and quote
# ---------------------------------------------------------------------------


class TestCartEndpoints:
    def test_add_to_cart_returns_quote(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]

        response = client.post("/cart", json={"product_ids": [product_id]})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 600000
        assert body["lines"][0]["quantity"] == 4
        assert "총 합계금액: 600,000원" in body["text"]

    def test_unknown_ids_are_rejected(self, client: TestClient) -> None:
        _load(client)

        response = client.post("/cart", json={"product_ids": ["missing"]})

        assert response.status_code == 404

    def test_empty_quote(self, client: TestClient) -> None:
        response = client.get("/quote")

        assert response.status_code == 200
        assert response.json()["total"] == 0
        assert response.json()["lines"] == []

    def test_selection_moves_into_cart(self, client: TestClient, service: ReconciliationService) -> None:
        ids = [item["product_id"] for item in _load(client)]
        client.post(f"/products/{ids[0]}/selection")
        client.post(f"/products/{ids[1]}/selection")

        response = client.post("/cart/selection")

        assert response.status_code == 200
        assert [line["product_id"] for line in response.json()["lines"]] == ids[:2]
        assert response.json()["total"] == (150000 + 210000) * 4
        assert service.products.selected_ids() == frozenset()

    def test_quantity_change_keeps_at_least_one(self, client: TestClient) -> None:
        product_id = _load(client)[0]["product_id"]
        client.post("/cart", json={"product_ids": [product_id]})

        raised = client.patch(f"/cart/{product_id}", json={"delta": 2}).json()
        lowered = client.patch(f"/cart/{product_id}", json={"delta": -10}).json()

        assert raised["lines"][0]["quantity"] == 6
        assert raised["total"] == 900000
        assert lowered["lines"][0]["quantity"] == 1

    def test_quantity_change_for_missing_line(self, client: TestClient) -> None:
        _load(client)

        response = client.patch("/cart/missing", json={"delta": 1})

        assert response.status_code == 404

    def test_remove_and_clear(self, client: TestClient) -> None:
        ids = [item["product_id"] for item in _load(client)]
        client.post("/cart", json={"product_ids": ids[:2]})

        removed = client.delete(f"/cart/{ids[0]}").json()
        cleared = client.delete("/cart").json()

        assert [line["product_id"] for line in removed["lines"]] == [ids[1]]
        assert cleared["lines"] == []
        assert cleared["total"] == 0
