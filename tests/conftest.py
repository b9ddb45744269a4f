"""Shared fixtures.

Each test gets a fresh in-memory mongomock database and an app built with
a test secret and cheap bcrypt rounds.
"""
from datetime import timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from main import create_app
from settings import Settings


@pytest.fixture
def secret():
    return "testing_secret"


@pytest.fixture
def settings(secret):
    return Settings(jwt_secret=secret, token_ttl=timedelta(hours=100), bcrypt_rounds=4,
                    database_name="devconnector_test")


@pytest.fixture
def db():
    return mongomock.MongoClient()["devconnector_test"]


@pytest.fixture
def app(settings, db):
    return create_app(settings, db)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register an account and return its token."""

    def _register(username="a1", email=None, name="A", password="secret1"):
        res = client.post("/api/users", json={
            "name": name,
            "username": username,
            "email": email or f"{username}@x.com",
            "password": password,
        })
        assert res.status_code == 200, res.json()
        return res.json()["token"]

    return _register
