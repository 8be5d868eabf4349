"""Integration tests for Ordering API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.errors import register_error_handlers
from ordering.api.routes import order_item_router, order_router
from ordering.order.order import Order
from ordering.publisher.messages import OrderCreated, OrderDeleted, OrderUpdated
from protean import current_domain

BUYER = {"X-User-Id": "user-001"}
STRANGER = {"X-User-Id": "user-999"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "Admin"}
PAYMENTS = {"X-User-Id": "payments", "X-User-Role": "System"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(order_item_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def menu(catalog_service, cart_service, buyer):
    catalog_service.put_product("P1", "Margherita", 100.0)
    catalog_service.put_product("P2", "Quattro Formaggi", 150.0)
    cart_service.put_items(buyer, [("P1", 2), ("P2", 1)])


def _create_from_cart(client):
    response = client.post("/orders/from-cart", headers=BUYER)
    assert response.status_code == 201
    return response.json()


def _confirm(client, order_id, payment_type="OnPickup", headers=BUYER):
    return client.put(
        f"/orders/{order_id}/confirm",
        json={
            "contact_name": "Olena Koval",
            "contact_phone": "+380501112233",
            "payment_type": payment_type,
        },
        headers=headers,
    )


class TestCreateFromCartAPI:
    def test_returns_draft(self, client, menu):
        body = _create_from_cart(client)

        assert body["status"] == "Draft"
        assert body["user_id"] == "user-001"
        assert body["total_amount"] == 350.0
        assert len(body["items"]) == 2

    def test_empty_cart_is_409(self, client, buyer):
        response = client.post("/orders/from-cart", headers=BUYER)
        assert response.status_code == 409

    def test_missing_identity_is_422(self, client):
        response = client.post("/orders/from-cart")
        assert response.status_code == 422

    def test_catalog_down_is_503(self, client, menu, catalog_service):
        catalog_service.configure(should_succeed=False)
        response = client.post("/orders/from-cart", headers=BUYER)
        assert response.status_code == 503


class TestConfirmAPI:
    def test_confirm_on_pickup(self, client, menu, publisher, cart_service):
        order_id = _create_from_cart(client)["id"]

        response = _confirm(client, order_id)

        assert response.status_code == 200
        assert response.json()["status"] == "Pending"
        assert len(publisher.of_type(OrderCreated)) == 1
        assert cart_service.cleared_for == ["user-001"]

    def test_confirm_by_stranger_is_403(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        response = _confirm(client, order_id, headers=STRANGER)
        assert response.status_code == 403

    def test_confirm_twice_is_409(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        _confirm(client, order_id)
        response = _confirm(client, order_id)
        assert response.status_code == 409

    def test_racing_confirmation_is_409(self, client, menu, serve_stale_order, publisher):
        order_id = _create_from_cart(client)["id"]
        stale = current_domain.repository_for(Order).get(order_id)
        assert _confirm(client, order_id).status_code == 200

        serve_stale_order(stale)
        response = _confirm(client, order_id)

        assert response.status_code == 409
        assert client.get(f"/orders/{order_id}", headers=BUYER).json()["status"] == "Pending"
        assert len(publisher.of_type(OrderCreated)) == 1

    def test_confirm_missing_is_404(self, client):
        response = _confirm(client, "does-not-exist")
        assert response.status_code == 404

    def test_unknown_payment_type_is_422(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        response = _confirm(client, order_id, payment_type="Barter")
        assert response.status_code == 422


class TestPaidAPI:
    def test_payments_service_marks_paid(self, client, menu, publisher):
        order_id = _create_from_cart(client)["id"]
        _confirm(client, order_id, payment_type="Online")

        response = client.put(f"/orders/{order_id}/paid", headers=PAYMENTS)

        assert response.status_code == 200
        assert response.json()["status"] == "Paid"
        assert len(publisher.of_type(OrderCreated)) == 1

    def test_paying_a_draft_is_409(self, client, menu, publisher):
        order_id = _create_from_cart(client)["id"]
        response = client.put(f"/orders/{order_id}/paid", headers=PAYMENTS)
        assert response.status_code == 409
        assert publisher.messages == []

    def test_buyer_cannot_mark_paid(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        response = client.put(f"/orders/{order_id}/paid", headers=BUYER)
        assert response.status_code == 403


class TestReadAPI:
    def test_owner_reads_order(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        response = client.get(f"/orders/{order_id}", headers=BUYER)
        assert response.status_code == 200
        assert response.json()["id"] == order_id

    def test_stranger_cannot_read(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        response = client.get(f"/orders/{order_id}", headers=STRANGER)
        assert response.status_code == 403

    def test_list_is_scoped_to_caller(self, client, menu):
        _create_from_cart(client)

        mine = client.get("/orders", headers=BUYER).json()
        theirs = client.get("/orders", headers=STRANGER).json()

        assert mine["total"] == 1
        assert theirs["total"] == 0

    def test_admin_lists_everything(self, client, menu):
        _create_from_cart(client)
        body = client.get("/orders", headers=ADMIN).json()
        assert body["total"] == 1
        assert body["has_next"] is False

    def test_items_listing(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        response = client.get(f"/orders/{order_id}/items", headers=BUYER)
        assert response.status_code == 200
        assert [i["product_id"] for i in response.json()] == ["P1", "P2"]


class TestAdminAPI:
    def test_create_draft(self, client):
        response = client.post(
            "/orders/draft",
            json={
                "user_id": "user-005",
                "items": [
                    {
                        "product_id": "prod-001",
                        "product_name_snapshot": "Margherita",
                        "unit_price_snapshot": 100.0,
                        "quantity": 2,
                    }
                ],
                "total_amount": 200.0,
            },
            headers=ADMIN,
        )
        assert response.status_code == 201
        assert response.json()["status"] == "Draft"

    def test_create_draft_with_wrong_total_is_422(self, client):
        response = client.post(
            "/orders/draft",
            json={
                "user_id": "user-005",
                "items": [
                    {
                        "product_id": "prod-001",
                        "product_name_snapshot": "Margherita",
                        "unit_price_snapshot": 100.0,
                        "quantity": 2,
                    }
                ],
                "total_amount": 10.0,
            },
            headers=ADMIN,
        )
        assert response.status_code == 422

    def test_create_draft_requires_admin(self, client):
        response = client.post("/orders/draft", json={"user_id": "u", "items": []}, headers=BUYER)
        assert response.status_code == 403

    def test_update(self, client, menu, publisher):
        order_id = _create_from_cart(client)["id"]

        response = client.put(f"/orders/{order_id}", json={"notes": "VIP"}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["notes"] == "VIP"
        assert len(publisher.of_type(OrderUpdated)) == 1

    def test_update_requires_admin(self, client, menu):
        order_id = _create_from_cart(client)["id"]
        response = client.put(f"/orders/{order_id}", json={"notes": "VIP"}, headers=BUYER)
        assert response.status_code == 403

    def test_delete(self, client, menu, publisher):
        order_id = _create_from_cart(client)["id"]

        response = client.delete(f"/orders/{order_id}", headers=ADMIN)

        assert response.status_code == 200
        assert client.get(f"/orders/{order_id}", headers=ADMIN).status_code == 404
        assert len(publisher.of_type(OrderDeleted)) == 1

    def test_delete_missing_is_404(self, client):
        response = client.delete("/orders/does-not-exist", headers=ADMIN)
        assert response.status_code == 404


class TestOrderItemAPI:
    def test_get_item(self, client, menu):
        order = _create_from_cart(client)
        item_id = order["items"][0]["id"]

        response = client.get(f"/order-items/{item_id}", headers=BUYER)

        assert response.status_code == 200
        assert response.json()["product_name_snapshot"] == "Margherita"

    def test_get_missing_item_is_404(self, client):
        response = client.get("/order-items/does-not-exist", headers=ADMIN)
        assert response.status_code == 404

    def test_correct_quantity(self, client, menu):
        order = _create_from_cart(client)
        item_id = order["items"][0]["id"]

        response = client.put(f"/order-items/{item_id}/quantity", json={"quantity": 0}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["quantity"] == 0
        refreshed = client.get(f"/orders/{order['id']}", headers=ADMIN).json()
        assert refreshed["total_amount"] == 350.0

    def test_correct_quantity_requires_admin(self, client, menu):
        order = _create_from_cart(client)
        item_id = order["items"][0]["id"]
        response = client.put(f"/order-items/{item_id}/quantity", json={"quantity": 1}, headers=BUYER)
        assert response.status_code == 403
