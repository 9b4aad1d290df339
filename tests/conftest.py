"""Pytest fixtures for storefront tests."""

import os

# must be set before any storefront module reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["RAZORPAY_KEY_ID"] = ""
os.environ["RAZORPAY_KEY_SECRET"] = "test_razorpay_secret"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["TRUST_CLIENT_PRICING"] = "false"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.api.auth import create_access_token
from storefront.data.database import Base, SessionLocal, engine, init_db
from storefront.data.models import ProductModel
from storefront.data.seed import seed
from storefront.main import app
from storefront.services.payment_client import PaymentClient

SHIPPING = {
    "fullName": "Ada Gardener",
    "address": "12 Orchard Lane",
    "city": "Springfield",
    "state": "IL",
    "zip": "62701",
    "country": "USA",
}


@pytest.fixture(autouse=True)
def database():
    """Fresh schema with the starter catalog (ids 1-5) for every test."""
    init_db()
    session = SessionLocal()
    seed(session)
    session.close()

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Factory for bearer headers of a given user."""

    def _headers(user_id: int = 1):
        return {"Authorization": f"Bearer {create_access_token(user_id, email=f'user{user_id}@example.com')}"}

    return _headers


@pytest.fixture
def product_7(db_session):
    """The 50.00 product used by the checkout examples."""
    product = ProductModel(id=7, name="Compost Bin", price=Decimal("50.00"), image_url="/images/bin.jpg")
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture
def sign():
    client = PaymentClient()

    def _sign(order_id: str, payment_id: str) -> str:
        return client.expected_signature(order_id, payment_id)

    return _sign


def add_to_cart(client, headers, product_id: int, quantity: int):
    return client.post("/api/cart/add", json={"productId": product_id, "quantity": quantity}, headers=headers)


def cart_quantities(client, headers) -> dict:
    items = client.get("/api/cart", headers=headers).json()["items"]
    return {i["product_id"]: i["quantity"] for i in items}
