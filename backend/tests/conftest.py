"""
Shared fixtures: every test gets its own app over a fresh SQLite file and a TestClient.
bcrypt rounds are lowered so the suite stays fast; token lifetime stays at the 60 minute default.
"""
import pytest
from fastapi.testclient import TestClient

from gradestats.config import Settings
from gradestats.main import create_app

TEST_SECRET = "test-secret-key"


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        restrict_user_admin=False,
        expose_errors=True,
        env="",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def register(client, email, password="pass123", username=None, **extra):
    body = {"username": username or email.split("@")[0], "email": email, "password": password}
    body.update(extra)
    return client.post("/register", json=body)


def login(client, email, password="pass123") -> str:
    r = client.post("/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


def auth_headers(token: str) -> dict:
    # raw token, no Bearer prefix
    return {"authorization": token}


@pytest.fixture
def user_token(client):
    """Register and log in one user; return the token."""
    register(client, "alice@uni.edu")
    return login(client, "alice@uni.edu")
