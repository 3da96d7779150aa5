import os
import tempfile

# configuration has to be in the environment before habit_tracker is imported
_DB_DIR = tempfile.mkdtemp(prefix="habit_tracker_tests_")
DB_PATH = os.path.join(_DB_DIR, "habits_test.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["JWT_SECRET"] = "test-signing-key-" + "0123456789abcdef" * 4
os.environ["JWT_ISSUER"] = "habit-tracker-tests"
os.environ["JWT_AUDIENCE"] = "habit-tracker-clients"

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)
    from habit_tracker.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    def _register(username, password):
        return client.post("/auth/register", json={"username": username, "password": password})
    return _register


@pytest.fixture
def auth_headers(client, register):
    """Register (if needed) and log in, returning an Authorization header dict."""
    def _auth_headers(username, password="pw1"):
        register(username, password)
        r = client.post("/auth/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}
    return _auth_headers


@pytest.fixture
def db_path(client):
    return DB_PATH
