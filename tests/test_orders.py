"""Tests for order placement and order reads."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.data.models import OrderItemModel, OrderModel
from storefront.repos.order_repo import OrderRepo
from storefront.utils import settings

from conftest import SHIPPING, add_to_cart, cart_quantities


def order_payload(**overrides):
    payload = {
        "cartItems": [
            {"productId": 1, "name": "Heirloom Tomato Seeds", "price": "4.99", "quantity": 2},
            {"productId": 4, "name": "Hand Trowel", "price": "12.75", "quantity": 1},
        ],
        "totalAmount": "22.73",
        "shippingInfo": dict(SHIPPING),
        "paymentMethod": "Card",
        "transactionId": "txn_123",
    }
    payload.update(overrides)
    return payload


class TestCreateOrder:
    def test_create_success(self, client, auth_headers, db_session):
        response = client.post("/api/orders", json=order_payload(), headers=auth_headers(1))
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Order placed successfully!"
        assert data["status"] == "Processing"
        assert "orderId" in data
        assert "createdAt" in data

        order = db_session.get(OrderModel, data["orderId"])
        assert order.user_id == 1
        assert order.payment_status == "Paid"
        assert order.payment_method == "Card"
        assert order.transaction_id == "txn_123"
        assert order.shipping_city == "Springfield"
        assert Decimal(order.total_amount) == Decimal("22.73")

        items = db_session.execute(select(OrderItemModel).where(OrderItemModel.order_id == order.id)).scalars().all()
        assert sorted((i.product_id, i.quantity) for i in items) == [(1, 2), (4, 1)]
        assert sum(Decimal(i.product_price) * i.quantity for i in items) == Decimal(order.total_amount)

    def test_without_transaction_is_pending(self, client, auth_headers, db_session):
        payload = order_payload()
        del payload["transactionId"]
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 201

        order = db_session.get(OrderModel, response.json()["orderId"])
        assert order.payment_status == "Pending"

    def test_clears_cart(self, client, auth_headers):
        headers = auth_headers(1)
        add_to_cart(client, headers, 1, 2)
        add_to_cart(client, headers, 4, 1)

        response = client.post("/api/orders", json=order_payload(), headers=headers)
        assert response.status_code == 201
        assert cart_quantities(client, headers) == {}

    def test_missing_items(self, client, auth_headers, db_session):
        response = client.post("/api/orders", json=order_payload(cartItems=[]), headers=auth_headers(1))
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required order details."
        assert db_session.execute(select(OrderModel)).scalars().all() == []

    def test_missing_total(self, client, auth_headers):
        payload = order_payload()
        del payload["totalAmount"]
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required order details."

    @pytest.mark.parametrize("field", ["fullName", "address", "city", "state", "zip", "country"])
    def test_missing_shipping_field(self, client, auth_headers, db_session, field):
        shipping = dict(SHIPPING)
        shipping[field] = ""
        response = client.post("/api/orders", json=order_payload(shippingInfo=shipping), headers=auth_headers(1))
        assert response.status_code == 400
        assert response.json()["message"] == f"Shipping {field} is required."
        assert db_session.execute(select(OrderModel)).scalars().all() == []

    def test_total_must_match_catalog_prices(self, client, auth_headers, db_session):
        payload = order_payload(
            cartItems=[{"productId": 3, "name": "Raised Bed Kit", "price": "1.00", "quantity": 1}],
            totalAmount="1.00",
        )
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 400
        assert response.json()["message"] == "Order total does not match current prices."
        assert db_session.execute(select(OrderModel)).scalars().all() == []

    def test_catalog_names_and_prices_are_stored(self, client, auth_headers, db_session):
        payload = order_payload(
            cartItems=[{"productId": 3, "name": "Something else", "price": "129.00", "quantity": 1}],
            totalAmount="129.00",
        )
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 201

        item = db_session.execute(select(OrderItemModel)).scalar_one()
        assert item.product_name == "Raised Bed Kit"

    def test_unknown_product(self, client, auth_headers):
        payload = order_payload(
            cartItems=[{"productId": 404, "name": "Ghost", "price": "1.00", "quantity": 1}],
            totalAmount="1.00",
        )
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 400
        assert response.json()["message"] == "Product 404 not found."


class TestClientPricedOrders:
    @pytest.fixture(autouse=True)
    def trust_client(self, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_CLIENT_PRICING", True)

    def test_client_prices_kept_verbatim(self, client, auth_headers, db_session):
        payload = order_payload(
            cartItems=[{"productId": 3, "name": "Raised Bed (sale)", "price": "99.00", "quantity": 2}],
            totalAmount="198.00",
        )
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 201

        item = db_session.execute(select(OrderItemModel)).scalar_one()
        assert item.product_name == "Raised Bed (sale)"
        assert Decimal(item.product_price) == Decimal("99.00")

    def test_total_must_equal_sum_of_lines(self, client, auth_headers):
        payload = order_payload(totalAmount="10.00")
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 400
        assert response.json()["message"] == "Order total does not match its items."

    def test_lines_need_name_and_price(self, client, auth_headers):
        payload = order_payload(cartItems=[{"productId": 1, "quantity": 1}], totalAmount="4.99")
        response = client.post("/api/orders", json=payload, headers=auth_headers(1))
        assert response.status_code == 400


class TestOrderAtomicity:
    def test_item_failure_rolls_back_everything(self, client, auth_headers, db_session, monkeypatch):
        headers = auth_headers(1)
        add_to_cart(client, headers, 1, 2)
        add_to_cart(client, headers, 4, 1)

        original = OrderRepo.add_order_item
        calls = {"n": 0}

        def failing_add_order_item(self, item):
            calls["n"] += 1
            if calls["n"] == 2:
                raise RuntimeError("simulated store fault")
            return original(self, item)

        monkeypatch.setattr(OrderRepo, "add_order_item", failing_add_order_item)

        response = client.post("/api/orders", json=order_payload(), headers=headers)
        assert response.status_code == 500
        assert response.json()["message"] == "Failed to place order. Please try again."

        db_session.expire_all()
        assert db_session.execute(select(OrderModel)).scalars().all() == []
        assert db_session.execute(select(OrderItemModel)).scalars().all() == []
        assert cart_quantities(client, headers) == {1: 2, 4: 1}


class TestGetOrder:
    def test_owner_gets_order_with_items(self, client, auth_headers):
        order_id = client.post("/api/orders", json=order_payload(), headers=auth_headers(1)).json()["orderId"]

        response = client.get(f"/api/orders/{order_id}", headers=auth_headers(1))
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == order_id
        assert data["order_status"] == "Processing"
        assert data["payment_status"] == "Paid"
        assert data["shipping_full_name"] == "Ada Gardener"
        assert Decimal(data["total_amount"]) == Decimal("22.73")
        assert {i["product_id"] for i in data["items"]} == {1, 4}

    def test_foreign_and_missing_orders_look_the_same(self, client, auth_headers):
        order_id = client.post("/api/orders", json=order_payload(), headers=auth_headers(1)).json()["orderId"]

        foreign = client.get(f"/api/orders/{order_id}", headers=auth_headers(2))
        missing = client.get("/api/orders/99999", headers=auth_headers(2))

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json() == {"message": "Order not found or not authorized."}

    def test_snapshot_survives_price_change(self, client, auth_headers, db_session):
        from storefront.data.models import ProductModel

        order_id = client.post("/api/orders", json=order_payload(), headers=auth_headers(1)).json()["orderId"]

        product = db_session.get(ProductModel, 1)
        product.price = Decimal("9.99")
        db_session.commit()

        data = client.get(f"/api/orders/{order_id}", headers=auth_headers(1)).json()
        line = next(i for i in data["items"] if i["product_id"] == 1)
        assert Decimal(line["product_price"]) == Decimal("4.99")


class TestListOrders:
    def test_only_own_orders(self, client, auth_headers):
        client.post("/api/orders", json=order_payload(), headers=auth_headers(1))
        client.post("/api/orders", json=order_payload(), headers=auth_headers(1))
        client.post("/api/orders", json=order_payload(), headers=auth_headers(2))

        response = client.get("/api/orders", headers=auth_headers(1))
        assert response.status_code == 200
        assert len(response.json()) == 2
