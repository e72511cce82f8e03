"""Shared fixtures: settings, both storage backends, app and clients."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import itertools

import pytest
from fastapi.testclient import TestClient

from ideascore.config import Settings
from ideascore.main import create_app
from ideascore.storage import MemoryStorage, SQLStorage

# Password that passes the registration policy
STRONG_PW = "Str0ngPass"

TEST_SECRET = "test-session-secret"

IDEA_PAYLOAD = {
    "title": "MealMate",
    "problem": "Busy parents waste hours every week planning healthy family meals.",
    "solution": "An app that builds a weekly meal plan from the fridge contents and orders the missing groceries.",
    "targetMarket": "Dual-income families with young children in large cities",
    "businessModel": "Monthly subscription plus grocery partner commissions",
    "competition": "Mealime, Paprika and generic recipe sites",
    "team": "Two ex-Instacart engineers and a nutritionist",
}

_counter = itertools.count(1)


def next_username(prefix="user"):
    return f"{prefix}_{next(_counter)}"


def make_settings(**overrides) -> Settings:
    values = dict(
        database_url="sqlite://",
        storage_backend="memory",
        session_secret=TEST_SECRET,
        bcrypt_rounds=10,
        cors_origins=("http://localhost:3000",),
    )
    values.update(overrides)
    return Settings(**values)


def build_backend(kind: str):
    if kind == "sql":
        return SQLStorage.from_url("sqlite://")
    return MemoryStorage()


@pytest.fixture(params=["sql", "memory"])
def backend_kind(request):
    return request.param


@pytest.fixture()
def storage(backend_kind):
    """An initialised storage backend, closed after the test."""
    backend = build_backend(backend_kind)
    backend.init()
    yield backend
    if isinstance(backend, SQLStorage):
        backend.db.drop_all()
    backend.close()


@pytest.fixture()
def settings(backend_kind):
    return make_settings(storage_backend=backend_kind)


@pytest.fixture()
def app(settings, backend_kind):
    return create_app(settings, storage=build_backend(backend_kind))


@pytest.fixture()
def client(app):
    """TestClient with the app lifespan running (storage initialised)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def other_client(app, client):
    """A second browser: same app, separate cookie jar."""
    return TestClient(app)


def register(client, username=None, password=STRONG_PW, **extra):
    """Register (and thereby log in) a user through the API."""
    body = {"username": username or next_username(), "password": password}
    body.update(extra)
    resp = client.post("/api/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def submit_idea(client, **overrides):
    body = dict(IDEA_PAYLOAD)
    body.update(overrides)
    resp = client.post("/api/ideas", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()
