# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from task_platform.api.server import create_app
from task_platform.config import Config

TEST_SECRET = "test-secret-0123456789"
DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture()
def cfg(tmp_path: Path) -> Config:
    """
    Explicit config pointing at a fresh SQLite file per test.

    We build Config directly rather than calling load_config(), so tests do not
    depend on the process environment or a local .env file.
    """
    return Config(
        DB_DSN=str(tmp_path / "tasks.sqlite3"),
        JWT_SECRET=TEST_SECRET,
        APP_ENV="test",
    )


@pytest.fixture()
def app(cfg: Config) -> FastAPI:
    return create_app(cfg)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    # Context manager so startup (schema creation) runs.
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth_headers(client: TestClient) -> Callable[..., Dict[str, str]]:
    """Register + log in an account, returning its Authorization header."""

    def _make(email: str, password: str = DEFAULT_PASSWORD) -> Dict[str, str]:
        r = client.post("/auth/signup", json={"email": email, "password": password})
        assert r.status_code == 201, r.text
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _make
