import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import email_service
from auth import create_access_token, hash_password
from database import create_document
from main import app


@pytest.fixture
def db():
    mock_db = mongomock.MongoClient()["fcl_test"]
    database.ensure_indexes(mock_db)
    return mock_db


@pytest.fixture
def client(db):
    app.dependency_overrides[database.get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP."""
    sent = []

    def fake_send(to, subject, html_content):
        sent.append({"to": to, "subject": subject, "html": html_content})
        return True

    monkeypatch.setattr(email_service, "send_email", fake_send)
    return sent


def make_user(db, email, role="USER", password="secret123", is_active=True):
    return create_document(db, "user", {
        "email": email,
        "display_name": email.split("@")[0],
        "password_hash": hash_password(password),
        "role": role,
        "is_active": is_active,
    })


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user['email'], 'role': user['role']})}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", role="ADMIN")


@pytest.fixture
def customer(db):
    return make_user(db, "buyer@example.com")


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def customer_headers(customer):
    return bearer(customer)


@pytest.fixture
def initiative(db):
    return create_document(db, "initiative", {
        "title": "Quantum Computing Interface",
        "slug": "quantum",
        "summary": "Quantum platform for developers",
        "gallery": [],
        "featured": True,
        "order": 1,
        "status": "active",
    })


ORDER_BODY = {
    "items": [{"sku": "QCS-001", "title": "Starter Kit", "price": 299.99, "quantity": 1}],
    "total": 299.99,
    "billing_info": {"name": "Ada Lovelace", "email": "ada@example.com"},
    "shipping_info": {"address": "1 Analytical Way"},
    "payment_method": "stripe",
}


@pytest.fixture
def order(client, customer_headers):
    res = client.post("/orders", json=ORDER_BODY, headers=customer_headers)
    assert res.status_code == 201
    return res.json()["data"]
