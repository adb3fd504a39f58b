"""
Shared fixtures.

Settings are read at import time, so the environment is pinned to an
in-memory SQLite database before anything from `storefront` is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_EMAIL"] = "admin@lalithamall.com"
os.environ["ADMIN_PASSWORD"] = "admin-pass"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from storefront.core.auth import create_access_token
from storefront.database import engine
from storefront.main import app
from storefront.models.product import Product
from storefront.models.user import User


@pytest.fixture(autouse=True)
def _tables():
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session():
    with Session(engine, expire_on_commit=False) as s:
        yield s


@pytest.fixture
def test_client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def sent_otps(monkeypatch) -> dict[str, str]:
    """Capture OTP e-mails instead of talking to SMTP; maps email -> code."""
    sent: dict[str, str] = {}

    def fake_send(to_email: str, otp: str, valid_minutes: int) -> None:
        sent[to_email] = otp

    monkeypatch.setattr("storefront.services.auth_service.send_otp_email", fake_send)
    return sent


@pytest.fixture
def make_user(session):
    def _make(email: str = "asha@example.com", role: str = "customer", name: str = "Asha"):
        user = User(email=email, name=name, role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(session):
    def _make(**fields) -> Product:
        data = {"name": "Basmati Rice 5kg", "category": "groceries", "price": 100.0, "stock": 25}
        data.update(fields)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def customer_headers(customer) -> dict[str, str]:
    return bearer(customer)


@pytest.fixture
def admin_headers(make_user) -> dict[str, str]:
    return bearer(make_user(email="admin@lalithamall.com", role="admin", name="Admin"))


@pytest.fixture
def headers_for():
    return bearer
