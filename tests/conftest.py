from __future__ import annotations

import pytest

from expense_tracker import create_app
from expense_tracker.db import get_db

TEST_SETTINGS = {
    "TESTING": True,
    "APP_ENV": "testing",
    "JWT_SECRET_KEY": "test-secret-key-long-enough-for-hs256-signing",
    # cheap hash keeps the suite fast; production cost comes from config
    "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000",
    "CORS_ORIGINS": "http://localhost:3000",
}

COFFEE = {
    "title": "Coffee",
    "amount": 4.50,
    "type": "expense",
    "category": "Food & Dining",
    "date": "2024-03-01",
}


def build_app(tmp_path, **overrides):
    settings = {**TEST_SETTINGS, "DB_PATH": str(tmp_path / "expense-test.db"), **overrides}
    return create_app(settings)


def register(client, name="Alice", email="alice@example.com", password="secret123"):
    return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def app(tmp_path):
    return build_app(tmp_path)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db(app):
    with app.app_context():
        yield get_db()


@pytest.fixture()
def alice(client):
    body = register(client).get_json()
    return {"user": body["data"]["user"], "headers": bearer(body["data"]["token"])}


@pytest.fixture()
def bob(client):
    body = register(client, name="Bob", email="bob@example.com").get_json()
    return {"user": body["data"]["user"], "headers": bearer(body["data"]["token"])}


@pytest.fixture()
def add_expense(client):
    def _add(headers, **fields):
        response = client.post("/api/expenses", json={**COFFEE, **fields}, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]["expense"]

    return _add
