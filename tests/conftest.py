"""
Shared fixtures: a throwaway SQLite database and upload directory per run,
and helpers for registering users and seeding admin codes.
"""

import asyncio
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="animez-tests-")
DB_PATH = os.path.join(_TMP_DIR, "animez.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["SECRET_KEY"] = "animez-test-secret"
os.environ["AUTO_APPROVE_POSTS"] = "false"

import pytest
from fastapi.testclient import TestClient

from animez.app import app
from animez.core import database, settings
from animez.core.db.user_crud import create_admin_key


@pytest.fixture
def client():
    """Test client backed by a fresh database."""
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auto_approve(monkeypatch):
    monkeypatch.setattr(settings, "AUTO_APPROVE_POSTS", True)


@pytest.fixture
def register(client):
    """Factory: register a user and return (user_json, auth_headers)."""

    def _register(username: str, password: str = "secret123"):
        email = f"{username}@example.com"
        response = client.post(
            "/users/register",
            json={"email": email, "username": username, "password": password},
        )
        assert response.status_code == 201, response.text
        login = client.post("/users/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
        return response.json(), headers

    return _register


async def _seed_admin_key(code: str):
    async with database.async_session_maker() as session:
        await create_admin_key(session, code)


@pytest.fixture
def admin(client, register):
    """An admin user, promoted by redeeming a seeded admin code."""
    user, headers = register("moderator")
    asyncio.run(_seed_admin_key("ADMIN-CODE-1"))
    response = client.post("/users/me/admin-key", json={"key_code": "ADMIN-CODE-1"}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json(), headers


@pytest.fixture
def seed_admin_key(client):
    def _seed(code: str):
        asyncio.run(_seed_admin_key(code))

    return _seed
