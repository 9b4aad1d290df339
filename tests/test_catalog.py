"""Tests for catalog reads, health and the payment provider client."""

from decimal import Decimal

import pytest
import requests
from sqlalchemy import select

from storefront.data.models import PaymentIntentModel
from storefront.data.seed import seed
from storefront.domain.errors import ExternalServiceError, NotFoundError
from storefront.services import payment_client
from storefront.services.catalog_service import CatalogService
from storefront.services.payment_client import PaymentClient


class TestProducts:
    def test_list(self, client):
        response = client.get("/api/products_s")
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data] == [1, 2, 3, 4, 5]
        assert data[0]["name"] == "Heirloom Tomato Seeds"

    def test_get(self, client):
        response = client.get("/api/products_s/3")
        assert response.status_code == 200
        assert Decimal(response.json()["price"]) == Decimal("129.00")

    def test_get_missing(self, client):
        response = client.get("/api/products_s/999")
        assert response.status_code == 404
        assert response.json() == {"message": "Product not found."}

    def test_seed_only_fills_empty_catalog(self, db_session):
        assert seed(db_session) == 0


class TestCatalogService:
    def test_get_price(self, db_session):
        name, price = CatalogService(db_session).get_price(4)
        assert name == "Hand Trowel"
        assert price == Decimal("12.75")

    def test_get_prices_reports_missing(self, db_session):
        with pytest.raises(NotFoundError):
            CatalogService(db_session).get_prices([1, 42])


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "connected"}


class TestPaymentClient:
    def test_known_signature(self):
        import hashlib
        import hmac

        client = PaymentClient(key_secret="secret")
        expected = hmac.new(b"secret", b"order_1|pay_1", hashlib.sha256).hexdigest()
        assert client.verify_signature("order_1", "pay_1", expected)
        assert not client.verify_signature("order_1", "pay_2", expected)

    def test_no_secret_rejects_everything(self):
        client = PaymentClient(key_id="", key_secret="")
        assert not client.verify_signature("order_1", "pay_1", "anything")

    def test_mock_mode_without_keys(self):
        client = PaymentClient(key_id="", key_secret="")
        order = client.create_order(500, "INR", "receipt_1_1", user_id=1)
        assert order["amount"] == 500
        assert order["status"] == "created"

    def test_live_mode_provider_down(self, monkeypatch):
        calls = []

        def unreachable(url, **kwargs):
            calls.append(url)
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(payment_client.requests, "post", unreachable)

        client = PaymentClient(key_id="rzp_test_key", key_secret="secret", base_url="https://razorpay.test/v1")
        assert client.live
        with pytest.raises(ExternalServiceError) as exc:
            client.create_order(500, "INR", "receipt_1_1", user_id=1)

        assert exc.value.status_code == 502
        # retried by http_retry before giving up
        assert calls == ["https://razorpay.test/v1/orders"] * 3

    def test_live_mode_provider_down_over_http(self, client, auth_headers, db_session, monkeypatch):
        def unreachable(url, **kwargs):
            raise requests.Timeout("read timed out")

        monkeypatch.setattr(payment_client, "RAZORPAY_KEY_ID", "rzp_test_key")
        monkeypatch.setattr(payment_client, "RAZORPAY_KEY_SECRET", "secret")
        monkeypatch.setattr(payment_client.requests, "post", unreachable)

        response = client.post(
            "/api/create-razorpay-order",
            json={"amount": 10, "currency": "INR"},
            headers=auth_headers(1),
        )
        assert response.status_code == 502
        assert response.json() == {"message": "Payment provider is unavailable."}
        assert db_session.execute(select(PaymentIntentModel)).scalars().all() == []
