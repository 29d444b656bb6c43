# tests/test_app.py

from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from task_platform.api.server import create_app
from task_platform.auth.security import dummy_password_hash
from task_platform.config import Config
from task_platform.errors import Conflict, Internal


def _with_failing_routes(app: FastAPI) -> FastAPI:
    @app.get("/_boom")
    def _boom() -> None:
        raise RuntimeError("store exploded at 10.0.0.5")

    @app.get("/_internal")
    def _internal() -> None:
        raise Internal("pool exhausted")

    @app.get("/_conflict")
    def _conflict() -> None:
        raise Conflict("email_exists")

    return app


def test_root_and_health(client: TestClient) -> None:
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["health"] == "/health"

    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy", "database": "connected"}


def test_health_reports_unreachable_store(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _down(*args, **kwargs) -> None:
        raise OSError("connection refused")

    monkeypatch.setattr("task_platform.api.server.ping", _down)
    r = client.get("/health")
    assert r.status_code == 503
    assert r.json() == {"status": "unhealthy", "error": "database_unavailable"}


def test_security_headers(client: TestClient) -> None:
    r = client.get("/")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "no-referrer"


def test_cors_preflight(client: TestClient) -> None:
    r = client.options(
        "/api/tasks",
        headers={"Origin": "https://app.example", "Access-Control-Request-Method": "GET"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json()["status"] == "error"
    assert r.json()["error"] == "not_found"


@pytest.mark.parametrize(
    "env, expected",
    [
        ("development", "store exploded at 10.0.0.5"),
        ("production", "Internal Server Error"),
        ("test", "Internal Server Error"),
    ],
)
def test_unexpected_errors_hide_details_outside_development(cfg: Config, env: str, expected: str) -> None:
    app = _with_failing_routes(create_app(replace(cfg, APP_ENV=env)))
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.get("/_boom")
    assert r.status_code == 500
    assert r.json() == {"status": "error", "error": "internal_error", "message": expected}


def test_typed_internal_error_is_elided_in_production(cfg: Config) -> None:
    app = _with_failing_routes(create_app(replace(cfg, APP_ENV="production")))
    with TestClient(app) as client:
        r = client.get("/_internal")
    assert r.status_code == 500
    assert r.json()["message"] == "Internal Server Error"


def test_escaped_conflict_looks_like_registration_success(cfg: Config) -> None:
    app = _with_failing_routes(create_app(cfg))
    with TestClient(app) as client:
        r = client.get("/_conflict")
    assert r.status_code == 201
    assert "If this is a new email" in r.json()["message"]


def test_startup_precomputes_login_placeholder_hash(cfg: Config) -> None:
    dummy_password_hash.cache_clear()
    with TestClient(create_app(cfg)):
        assert dummy_password_hash.cache_info().currsize == 1
