"""Pytest configuration and fixtures"""
from typing import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fakes import FakeDatabase
from zenovia.config import Settings
from zenovia.main import create_app

ADMIN_EMAIL = "root@zenovia.com"
ADMIN_PASSWORD = "root-password"


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., Settings]:
    """Settings isolated from the environment and any .env file"""

    def _make(**overrides) -> Settings:
        values = {
            "NODE_ENV": "test",
            "UPLOADS_DIR": tmp_path / "uploads",
            "LOG_LEVEL": "DEBUG",
            "FRONTEND_URL": "https://app.zenovia.com",
            "CORS_ALLOWED_ORIGINS": "http://localhost:3000",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings(INIT_ADMIN_EMAIL=ADMIN_EMAIL, INIT_ADMIN_PASSWORD=ADMIN_PASSWORD)


@pytest.fixture
def db() -> FakeDatabase:
    """Create a fresh in-memory database for each test"""
    return FakeDatabase()


@pytest.fixture
def app(settings: Settings, db: FakeDatabase) -> FastAPI:
    return create_app(settings, database=db)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client with startup (connect, index, seed) already run"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_token(client: TestClient) -> str:
    response = client.post(
        "/api/auth/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def admin_headers(admin_token: str) -> dict:
    """Superadmin authentication headers"""
    return {"Authorization": f"Bearer {admin_token}"}
