"""
Pytest fixtures for API tests.

The store is a mongomock collection and the response cache a fresh
ResponseCache, both injected through app.dependency_overrides.
"""
import os

os.environ.setdefault("ENSURE_INDEXES", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CACHE_ENABLED", "false")

from datetime import datetime

import mongomock
import pytest
from fastapi.testclient import TestClient

from uniportal.cache import ResponseCache, get_response_cache
from uniportal.dependencies import get_collection
from uniportal.main import app


def build_university(
    name: str,
    *,
    short_name: str | None = None,
    iau_id: str | None = None,
    country: str | None = None,
    city: str | None = None,
    type: str | None = None,
    status: str | None = None,
    established: int | None = None,
    updated_on: datetime | None = None,
    **extra,
) -> dict:
    """Build a university document; None arguments leave the field absent."""
    institution = {
        "name": name,
        "short_name": short_name,
        "iau_id": iau_id,
        "country_line": country,
        "updated_on": updated_on,
    }
    general = {"type": type, "status": status, "established": established}
    doc = {"institution": {k: v for k, v in institution.items() if v is not None}}
    general = {k: v for k, v in general.items() if v is not None}
    if city is not None:
        general["address"] = {"city": city}
    if general:
        doc["general_information"] = general
    doc.update(extra)
    return doc


@pytest.fixture
def collection():
    """Empty in-memory universities collection."""
    return mongomock.MongoClient()["university_db"]["universities"]


@pytest.fixture
def response_cache():
    return ResponseCache(default_ttl=60, maxsize=64)


@pytest.fixture
def client(collection, response_cache):
    """Test client wired to the in-memory collection and a fresh cache."""
    app.dependency_overrides[get_collection] = lambda: collection
    app.dependency_overrides[get_response_cache] = lambda: response_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def override_collection():
    """Install an arbitrary collection object (e.g. a MagicMock) for one test."""

    def install(obj):
        app.dependency_overrides[get_collection] = lambda: obj
        return obj

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def base_url():
    """Base URL for API endpoints."""
    return "/api"


@pytest.fixture
def make_university():
    """Factory for university documents."""
    return build_university
