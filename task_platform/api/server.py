from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_platform import __version__
from task_platform.auth import Identity, get_current_identity, login, register
from task_platform.auth.security import dummy_password_hash
from task_platform.api.errors import install_error_handlers
from task_platform.api.schemas import (
    CreateTaskRequest,
    LoginRequest,
    SignupRequest,
    UpdateTaskRequest,
)
from task_platform.config import Config, load_config
from task_platform.db import connect, init_db, ping
from task_platform.tasks import crud as task_crud


logger = logging.getLogger(__name__)

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def create_app(cfg: Optional[Config] = None) -> FastAPI:
    """Build the API around an explicit config.

    With no argument the config is read from the environment (uvicorn --factory).
    """
    cfg = cfg or load_config()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        # Ensure schema exists.
        init_db(cfg.DB_DSN)
        # Hash the login placeholder now, not on the first unknown-email login.
        dummy_password_hash()
        logger.info("Task Platform API ready (env=%s)", cfg.APP_ENV)
        yield

    app = FastAPI(title="Task Platform API", version=__version__, lifespan=lifespan)
    # Make config available to auth deps.
    app.state.cfg = cfg

    install_error_handlers(app, cfg)

    if cfg.CORS_ALLOW_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cfg.CORS_ALLOW_ORIGINS),
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def _security_headers(request: Request, call_next):
        response = await call_next(request)
        for k, v in _SECURITY_HEADERS.items():
            response.headers.setdefault(k, v)
        return response

    def _db():
        return connect(cfg.DB_DSN, timeout=cfg.DB_CONNECT_TIMEOUT_SECONDS)

    # -----------------------------
    # Health
    # -----------------------------

    @app.get("/")
    def root() -> Dict[str, Any]:
        return {
            "message": "Task Platform API is online",
            "version": __version__,
            "health": "/health",
        }

    @app.get("/health")
    def health() -> JSONResponse:
        try:
            ping(cfg.DB_DSN, timeout=cfg.DB_CONNECT_TIMEOUT_SECONDS)
        except Exception as e:
            logger.error("Health check failed: %s", e)
            detail = str(e) if cfg.is_development else "database_unavailable"
            return JSONResponse(status_code=503, content={"status": "unhealthy", "error": detail})
        return JSONResponse(status_code=200, content={"status": "healthy", "database": "connected"})

    # -----------------------------
    # Auth
    # -----------------------------

    @app.post("/auth/signup", status_code=201)
    def auth_signup(payload: SignupRequest) -> Dict[str, Any]:
        return register(cfg, email=payload.email, password=payload.password)

    @app.post("/auth/login")
    def auth_login(payload: LoginRequest) -> Dict[str, Any]:
        return login(cfg, email=payload.email, password=payload.password)

    # -----------------------------
    # Tasks (owner-scoped)
    # -----------------------------

    @app.get("/api/tasks")
    def list_tasks(
        page: int = Query(1, ge=1, le=task_crud.MAX_PAGE),
        limit: int = Query(10, ge=1, le=task_crud.MAX_LIMIT),
        identity: Identity = Depends(get_current_identity),
    ) -> Dict[str, Any]:
        with _db() as conn:
            return task_crud.list_tasks(
                conn,
                user_id=identity.user_id,
                page=page,
                limit=limit,
                empty_page_not_found=cfg.TASKS_EMPTY_PAGE_NOT_FOUND,
            )

    @app.get("/api/tasks/{task_id}")
    def get_task(task_id: int, identity: Identity = Depends(get_current_identity)) -> Dict[str, Any]:
        with _db() as conn:
            return task_crud.get_task(conn, user_id=identity.user_id, task_id=task_id)

    @app.post("/api/tasks", status_code=201)
    def create_task(
        payload: CreateTaskRequest,
        identity: Identity = Depends(get_current_identity),
    ) -> Dict[str, Any]:
        with _db() as conn:
            task = task_crud.create_task(
                conn,
                user_id=identity.user_id,
                title=payload.title,
                description=payload.description,
            )
        logger.info("Task created id=%s user_id=%s", task["id"], identity.user_id)
        return task

    @app.put("/api/tasks/{task_id}")
    def update_task(
        task_id: int,
        payload: UpdateTaskRequest,
        identity: Identity = Depends(get_current_identity),
    ) -> Dict[str, Any]:
        with _db() as conn:
            return task_crud.update_task(
                conn,
                user_id=identity.user_id,
                task_id=task_id,
                updates=payload.updates(),
            )

    @app.delete("/api/tasks/{task_id}")
    def delete_task(task_id: int, identity: Identity = Depends(get_current_identity)) -> Dict[str, Any]:
        with _db() as conn:
            deleted = task_crud.delete_task(conn, user_id=identity.user_id, task_id=task_id)
        logger.info("Task deleted id=%s user_id=%s", task_id, identity.user_id)
        return {"message": "Task deleted successfully", "result": deleted}

    return app
