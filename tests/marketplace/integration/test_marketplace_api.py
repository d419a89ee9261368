"""Integration tests for the Marketplace API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from marketplace.api import cart_router, order_router, product_router, trade_router
from protean.integrations.fastapi import register_exception_handlers
from shared.access import register_access_handlers

SELLER = {"X-User-Id": "seller-api-001", "X-User-Role": "seller"}
OTHER_SELLER = {"X-User-Id": "seller-api-002", "X-User-Role": "seller"}
BUYER = {"X-User-Id": "buyer-api-001", "X-User-Role": "buyer"}
ADMIN = {"X-User-Id": "admin-api-001", "X-User-Role": "admin"}

ADDRESS = {"street": "12 Farm Road", "city": "Davao", "zipcode": "8000", "country": "PH"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(trade_router)
    register_exception_handlers(app)
    register_access_handlers(app)
    return TestClient(app)


def _list_product(client, headers=SELLER, **overrides):
    payload = {
        "name": "Organic Tomatoes",
        "description": "Vine-ripened",
        "price": 3.5,
        "images": ["https://cdn.example.com/tomatoes.jpg"],
        "category": "Vegetables",
        "unit_of_measurement": "kg",
        "stock": 5,
    }
    payload.update(overrides)
    response = client.post("/products", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


def _place_order(client, product_id, quantity=2):
    response = client.post(
        "/orders",
        json={"items": [{"product_id": product_id, "quantity": quantity}], "address": ADDRESS},
        headers=BUYER,
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestProductAPI:
    def test_list_and_fetch(self, client):
        product_id = _list_product(client)
        response = client.get(f"/products/{product_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Organic Tomatoes"
        assert body["stock"] == 5
        assert body["is_active"] is True

    def test_buyers_cannot_list_products(self, client):
        response = client.post(
            "/products",
            json={
                "name": "X",
                "description": "Y",
                "price": 1.0,
                "images": ["https://cdn.example.com/x.jpg"],
                "category": "Vegetables",
                "unit_of_measurement": "kg",
                "stock": 1,
            },
            headers=BUYER,
        )
        assert response.status_code == 403

    def test_missing_identity_is_unauthorized(self, client):
        assert client.get("/products/mine").status_code == 401

    def test_invalid_category_is_bad_request(self, client):
        response = client.post(
            "/products",
            json={
                "name": "X",
                "description": "Y",
                "price": 1.0,
                "images": ["https://cdn.example.com/x.jpg"],
                "category": "Livestock",
                "unit_of_measurement": "kg",
                "stock": 1,
            },
            headers=SELLER,
        )
        assert response.status_code == 400

    def test_unknown_product_is_not_found(self, client):
        assert client.get("/products/does-not-exist").status_code == 404

    def test_only_owner_can_update(self, client):
        product_id = _list_product(client)
        response = client.put(f"/products/{product_id}", json={"price": 9.0}, headers=OTHER_SELLER)
        assert response.status_code == 403

        response = client.put(f"/products/{product_id}", json={"price": 9.0}, headers=SELLER)
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["price"] == 9.0

    def test_delisted_product_leaves_browse(self, client):
        product_id = _list_product(client)
        assert client.delete(f"/products/{product_id}", headers=SELLER).status_code == 200

        listed = [p["product_id"] for p in client.get("/products").json()["products"]]
        assert product_id not in listed


class TestOrderAPI:
    def test_place_and_reject_restores_stock(self, client):
        product_id = _list_product(client, stock=5)
        order_id = _place_order(client, product_id, quantity=2)
        assert client.get(f"/products/{product_id}").json()["stock"] == 3

        response = client.put(f"/orders/{order_id}/reject", json={"reason": "Out of season"}, headers=SELLER)
        assert response.status_code == 200

        order = client.get(f"/orders/{order_id}", headers=BUYER).json()
        assert order["status"] == "Rejected"
        assert client.get(f"/products/{product_id}").json()["stock"] == 5

    def test_order_hidden_from_strangers(self, client):
        product_id = _list_product(client)
        order_id = _place_order(client, product_id)
        response = client.get(f"/orders/{order_id}", headers=OTHER_SELLER)
        assert response.status_code == 403

    def test_seller_inbox_and_confirm(self, client):
        product_id = _list_product(client)
        order_id = _place_order(client, product_id)

        inbox = client.get("/orders/seller", headers=SELLER).json()["orders"]
        assert [o["order_id"] for o in inbox] == [order_id]

        assert client.put(f"/orders/{order_id}/confirm", headers=SELLER).status_code == 200
        assert client.get(f"/orders/{order_id}", headers=BUYER).json()["status"] == "Confirmed"

    def test_cancellation_window_and_cancel(self, client):
        product_id = _list_product(client)
        order_id = _place_order(client, product_id)

        window = client.get(f"/orders/{order_id}/cancellation-window", headers=BUYER).json()
        assert window["can_cancel"] is True

        response = client.put(f"/orders/{order_id}/cancel", json={"reason": "Changed my mind"}, headers=BUYER)
        assert response.status_code == 200
        assert client.get(f"/orders/{order_id}", headers=BUYER).json()["status"] == "Cancelled"

    def test_overselling_is_bad_request(self, client):
        product_id = _list_product(client, stock=1)
        response = client.post(
            "/orders",
            json={"items": [{"product_id": product_id, "quantity": 3}], "address": ADDRESS},
            headers=BUYER,
        )
        assert response.status_code == 400

    def test_status_only_moves_through_shipments(self, client):
        product_id = _list_product(client)
        order_id = _place_order(client, product_id)
        client.put(f"/orders/{order_id}/confirm", headers=SELLER)

        for step in ("processing", "shipped", "delivered"):
            response = client.put(f"/orders/{order_id}/{step}", json={}, headers=ADMIN)
            assert response.status_code in (404, 405)

        order = client.get(f"/orders/{order_id}", headers=BUYER).json()
        assert order["status"] == "Confirmed"
        assert order["is_paid"] is False


class TestCartAPI:
    def test_add_and_checkout(self, client):
        product_id = _list_product(client, stock=5)
        response = client.post("/cart/items", json={"product_id": product_id, "quantity": 2}, headers=BUYER)
        assert response.status_code == 200
        assert response.json()["total"] == 7.0

        response = client.post("/cart/checkout", json={"address": ADDRESS}, headers=BUYER)
        assert response.status_code == 201
        assert client.get("/cart", headers=BUYER).json()["items"] == []
        assert client.get(f"/products/{product_id}").json()["stock"] == 3


class TestTradeAPI:
    def test_full_trade(self, client):
        offered = _list_product(client, name="Mangoes", price=50.0, stock=10, available_for_trade=True)
        wanted = _list_product(
            client, headers=OTHER_SELLER, name="Bananas", price=20.0, stock=10, available_for_trade=True
        )

        response = client.post(
            "/trades",
            json={
                "seller_to": "seller-api-002",
                "product_from_id": offered,
                "product_to_id": wanted,
                "quantity_from": 2,
                "quantity_to": 5,
            },
            headers=SELLER,
        )
        assert response.status_code == 201
        trade_id = response.json()["id"]

        assert client.put(f"/trades/{trade_id}/complete", headers=SELLER).status_code == 400
        assert client.put(f"/trades/{trade_id}/accept", headers=SELLER).status_code == 403
        assert client.put(f"/trades/{trade_id}/accept", headers=OTHER_SELLER).status_code == 200
        assert client.put(f"/trades/{trade_id}/complete", headers=OTHER_SELLER).status_code == 200

        trade = client.get(f"/trades/{trade_id}", headers=SELLER).json()
        assert trade["status"] == "completed"
        assert len(trade["audit_entries"]) == 4
        assert client.get(f"/products/{offered}").json()["stock"] == 8
        assert client.get(f"/products/{wanted}").json()["stock"] == 5

        received = client.get("/products/received", headers=OTHER_SELLER).json()["products"]
        assert [p["name"] for p in received] == ["Mangoes"]
