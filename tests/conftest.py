"""
Shared fixtures: an in-memory store, fake geocoder and file storage, seeded
users, and a TestClient whose acting user can be switched per test.
"""

import os

os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from database import get_store
from errors import AuthenticationError
from geocoder import get_geocoder
from schemas import User
from security import get_current_user
from storage import get_storage
from tests.support.factories import (
    BOSTON,
    BOSTON_ADDRESS,
    LOWELL,
    LOWELL_ADDRESS,
    SEATTLE,
    SEATTLE_ADDRESS,
)
from tests.support.mongo import make_store
from tests.support.services import FakeFileStorage, FakeGeocoder


@pytest.fixture
def store():
    return make_store()


@pytest.fixture
def geocoder():
    return FakeGeocoder(
        {
            "02215": BOSTON,
            BOSTON_ADDRESS: BOSTON,
            "01854": LOWELL,
            LOWELL_ADDRESS: LOWELL,
            "98101": SEATTLE,
            SEATTLE_ADDRESS: SEATTLE,
        }
    )


@pytest.fixture
def storage():
    return FakeFileStorage()


def _make_user(store, name: str, role: str) -> dict:
    doc = User(name=name, email=f"{name.lower()}@devcamper.io", password_hash="unused", role=role).model_dump()
    return store.users.create(doc)


@pytest.fixture
def admin(store):
    return _make_user(store, "Admin", "admin")


@pytest.fixture
def publisher(store):
    return _make_user(store, "Publisher", "publisher")


@pytest.fixture
def other_publisher(store):
    return _make_user(store, "Rival", "publisher")


@pytest.fixture
def reviewer(store):
    return _make_user(store, "Reviewer", "user")


@pytest.fixture
def other_reviewer(store):
    return _make_user(store, "Critic", "user")


@pytest.fixture
def acting():
    """Holds the user the test client authenticates as (None = anonymous)."""
    return {"user": None}


@pytest.fixture
def app(store, geocoder, storage):
    from main import app as fastapi_app

    fastapi_app.dependency_overrides[get_store] = lambda: store
    fastapi_app.dependency_overrides[get_geocoder] = lambda: geocoder
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app, acting):
    def _current_user():
        if acting["user"] is None:
            raise AuthenticationError("Not authorized to access this route")
        return acting["user"]

    app.dependency_overrides[get_current_user] = _current_user
    return TestClient(app)


@pytest.fixture
def auth_client(app):
    """Client that authenticates with real bearer tokens."""
    return TestClient(app)
