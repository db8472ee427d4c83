"""
Notes Backend: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── data_file:     Path of a JSON document inside tmp_path
    ├── store:         Loaded JsonStore backed by data_file
    ├── app:           FastAPI app serving that store
    ├── client:        HTTPX AsyncClient for API endpoint testing
    ├── register:      Factory that registers a user through the API
    └── ticking_clock: Patches utils.utcnow with a strictly increasing clock
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from itertools import count
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
os.environ["DATA_FILE"] = os.path.join(tempfile.mkdtemp(prefix="notes_test_"), "store.json")
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum; keeps the suite fast
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from notes_backend.main import create_app  # noqa: E402
from notes_backend.store import JsonStore  # noqa: E402

DEFAULT_PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "store.json"


@pytest_asyncio.fixture
async def store(data_file):
    """A loaded, empty store writing to tmp_path."""
    json_store = JsonStore(data_file)
    await json_store.load()
    return json_store


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient routed straight into the app.

    ASGITransport does not run the lifespan; the `store` fixture has already
    loaded the document.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def register(client):
    """
    Register a user through the API.

    Usage:
        token, user = await register("alice@example.com")
        headers = {"Authorization": f"Bearer {token}"}
    """
    async def _register(email, password=DEFAULT_PASSWORD, name=None):
        body = {"email": email, "password": password}
        if name is not None:
            body["name"] = name
        response = await client.post("/auth/register", json=body)
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return data["token"], data["user"]

    return _register


@pytest.fixture
def auth_headers():
    def _headers(token):
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def ticking_clock():
    """
    Replace utils.utcnow with a clock that advances one second per call, so
    records created in sequence get distinct, ordered timestamps.
    """
    start = datetime.now(timezone.utc)
    ticks = count()

    def _now():
        return start + timedelta(seconds=next(ticks))

    with patch("notes_backend.utils.utcnow", side_effect=_now):
        yield start
