"""Test fixtures: a fresh in-memory SQLite database and Flask app per test.

APP_ENV must be set before `models` is imported, because the DBStorage
singleton picks its engine at import time.
"""

import os

os.environ["APP_ENV"] = "test"

import uuid  # noqa: E402

import pytest  # noqa: E402

from api import create_app  # noqa: E402
from models import storage  # noqa: E402
from services.auth_service import AuthService  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture()
def app():
    """Flask app in testing mode on top of freshly created tables."""
    storage.drop_all()
    storage.reload()
    app = create_app("test")
    yield app
    storage.close()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def codecs(app):
    return app.extensions["token_codecs"]


@pytest.fixture()
def auth_service(codecs):
    return AuthService(codecs)


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@test.com"


def register(client, email=None, password=PASSWORD, name="Test User"):
    """Register through the HTTP API and return the parsed body."""
    r = client.post(
        "/api/v1/auth/register",
        json={"email": email or unique_email(), "password": password, "name": name},
    )
    assert r.status_code == 201, r.get_json()
    return r.get_json()


def bearer(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture()
def session_body(client):
    """A registered user with a live token pair."""
    return register(client, email="alice@test.com", name="Alice")


@pytest.fixture()
def auth_headers(session_body):
    return bearer(session_body["accessToken"])
