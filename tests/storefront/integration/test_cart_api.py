"""Integration tests for the cart endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import cart_router, register_error_handlers

USER = {"X-User-Id": "user-1"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    register_error_handlers(app)
    return TestClient(app)


def _add(client, product_id, quantity=1):
    response = client.post("/cart/items", json={"product_id": product_id, "quantity": quantity}, headers=USER)
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestGetCartAPI:
    def test_no_cart_yet(self, client):
        response = client.get("/cart", headers=USER)
        assert response.status_code == 200
        assert response.json() == {"id": None, "items": [], "subtotal_cents": 0}

    def test_cart_shows_live_product_data(self, client, make_product):
        product = make_product(name="Harissa", price_cents=799, stock=5, discount=("PERCENTAGE", 10))
        _add(client, product.id, 2)

        body = client.get("/cart", headers=USER).json()
        item = body["items"][0]
        assert item["quantity"] == 2
        assert item["product"]["name"] == "Harissa"
        assert item["product"]["unit_price_cents"] == 719
        assert item["product"]["stock"] == 5
        assert body["subtotal_cents"] == 1438

    def test_requires_identity(self, client):
        assert client.get("/cart").status_code == 401


class TestCartItemsAPI:
    def test_add_merges_quantities(self, client, make_product):
        product = make_product(stock=5)
        first = _add(client, product.id, 1)
        response = client.post("/cart/items", json={"product_id": product.id, "quantity": 2}, headers=USER)

        assert response.status_code == 201
        assert response.json() == {"id": first, "quantity": 3}

    def test_add_beyond_stock_returns_400(self, client, make_product):
        product = make_product(stock=1)
        response = client.post("/cart/items", json={"product_id": product.id, "quantity": 2}, headers=USER)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "OUT_OF_STOCK"

    def test_add_unknown_product_returns_404(self, client):
        response = client.post("/cart/items", json={"product_id": "nope", "quantity": 1}, headers=USER)
        assert response.status_code == 404

    def test_update_quantity(self, client, make_product):
        item_id = _add(client, make_product(stock=5).id)
        response = client.patch(f"/cart/items/{item_id}", json={"quantity": 4}, headers=USER)
        assert response.status_code == 200
        assert response.json()["quantity"] == 4

    def test_update_unknown_item_returns_404(self, client):
        response = client.patch("/cart/items/nope", json={"quantity": 1}, headers=USER)
        assert response.status_code == 404

    def test_remove_item(self, client, make_product):
        item_id = _add(client, make_product().id)
        assert client.delete(f"/cart/items/{item_id}", headers=USER).status_code == 204
        assert client.get("/cart", headers=USER).json()["items"] == []

    def test_clear(self, client, make_product):
        _add(client, make_product(name="Harissa").id)
        _add(client, make_product(name="Couscous").id)

        response = client.delete("/cart/clear", headers=USER)
        assert response.status_code == 200
        assert response.json() == {"removed": 2}
