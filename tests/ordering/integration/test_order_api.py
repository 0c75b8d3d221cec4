"""Integration tests for Order API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import cart_router, order_router
from protean.integrations.fastapi import register_exception_handlers

USER = {"X-User-Id": "user-001"}
OTHER = {"X-User-Id": "user-009"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}
WHOLESALER = {"X-User-Id": "user-002", "X-User-Type": "wholesale"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(cart_router)
    app.include_router(order_router)
    return TestClient(app)


@pytest.fixture()
def order_body(shipping_details):
    return {
        "items": [{"productId": "lamp", "name": "Brass Lamp", "quantity": 1, "unitPrice": 500}],
        "subtotal": 500,
        "shippingCost": 80,
        "tax": 90,
        "total": 670,
        "shippingDetails": shipping_details,
        "deliveryOption": "normal",
    }


def _place(client, body, headers=USER):
    response = client.post("/orders", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateOrder:
    def test_direct_order_is_pending(self, client, order_body):
        body = _place(client, order_body)
        assert body["status"] == "pending"
        assert body["paymentStatus"] == "pending"
        assert body["total"] == 670
        assert body["shippingDetails"]["pincode"] == "560001"

    def test_direct_order_retires_cart(self, client, order_body, catalog):
        catalog.add_product("lamp", "Brass Lamp", 500, stock=3)
        client.post("/cart", json={"productId": "lamp"}, headers=USER)
        _place(client, order_body)
        assert client.get("/cart", headers=USER).json()["items"] == []

    def test_inconsistent_totals_are_400(self, client, order_body):
        response = client.post("/orders", json={**order_body, "total": 100}, headers=USER)
        assert response.status_code == 400

    def test_invalid_phone_is_400(self, client, order_body, shipping_details):
        body = {**order_body, "shippingDetails": {**shipping_details, "phone": "12345"}}
        assert client.post("/orders", json=body, headers=USER).status_code == 400

    def test_wholesale_below_minimum_is_400(self, client, order_body):
        body = {
            **order_body,
            "items": [{"productId": "bulk", "quantity": 1, "unitPrice": 9999, "isWholesale": True}],
            "subtotal": None,
            "shippingCost": None,
            "tax": None,
            "total": None,
        }
        assert client.post("/orders", json=body, headers=WHOLESALER).status_code == 400


class TestReadOrders:
    def test_owner_sees_only_their_orders(self, client, order_body):
        mine = _place(client, order_body)
        _place(client, order_body, headers=OTHER)

        listed = client.get("/orders", headers=USER).json()
        assert [o["id"] for o in listed] == [mine["id"]]

    def test_fetch_own_order(self, client, order_body):
        mine = _place(client, order_body)
        response = client.get(f"/orders/{mine['id']}", headers=USER)
        assert response.status_code == 200
        assert response.json()["id"] == mine["id"]

    def test_someone_elses_order_is_404(self, client, order_body):
        theirs = _place(client, order_body, headers=OTHER)
        assert client.get(f"/orders/{theirs['id']}", headers=USER).status_code == 404

    def test_admin_lists_everything(self, client, order_body):
        _place(client, order_body)
        _place(client, order_body, headers=OTHER)
        response = client.get("/orders/admin", headers=ADMIN)
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_admin_fetches_any_order(self, client, order_body):
        theirs = _place(client, order_body, headers=OTHER)
        assert client.get(f"/orders/admin/{theirs['id']}", headers=ADMIN).status_code == 200

    def test_admin_routes_need_admin(self, client):
        assert client.get("/orders/admin", headers=USER).status_code == 403


class TestAdminUpdate:
    def test_status_and_tracking(self, client, order_body):
        order = _place(client, order_body)
        response = client.put(
            f"/orders/{order['id']}",
            json={"status": "shipped", "trackingNumber": "AWB-77"},
            headers=ADMIN,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "shipped"
        assert body["trackingNumber"] == "AWB-77"

    def test_backward_transition_is_400(self, client, order_body):
        order = _place(client, order_body)
        client.put(f"/orders/{order['id']}", json={"status": "delivered"}, headers=ADMIN)
        response = client.put(f"/orders/{order['id']}", json={"status": "processing"}, headers=ADMIN)
        assert response.status_code == 400

    def test_non_admin_is_403(self, client, order_body):
        order = _place(client, order_body)
        response = client.put(f"/orders/{order['id']}", json={"status": "confirmed"}, headers=USER)
        assert response.status_code == 403

    def test_unknown_order_is_404(self, client):
        response = client.put("/orders/missing", json={"status": "confirmed"}, headers=ADMIN)
        assert response.status_code == 404
