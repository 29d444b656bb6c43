from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_platform.config import Config
from task_platform.errors import REGISTRATION_MESSAGE, AppError, Conflict, Internal, ValidationFailed


logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "bad_request",
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


def _error_body(code: str, message: str) -> Dict[str, Any]:
    return {"status": "error", "error": code, "message": message}


def _auth_headers(status_code: int) -> Dict[str, str] | None:
    if status_code == 401:
        return {"WWW-Authenticate": "Bearer"}
    return None


def validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into [{field, message}], keeping every violation.

    loc is ("body"|"query"|"path", <field>, ...); the field name is reported,
    or the location itself when the whole body is the problem.
    """
    out: List[Dict[str, str]] = []
    for err in exc.errors():
        loc = [str(p) for p in (err.get("loc") or ())]
        field = loc[1] if len(loc) > 1 else (loc[0] if loc else "")
        out.append({"field": field, "message": str(err.get("msg") or "Invalid value")})
    return out


def install_error_handlers(app: FastAPI, cfg: Config) -> None:
    """Map every failure to the JSON error envelope and log it server-side."""

    @app.exception_handler(ValidationFailed)
    async def _on_validation_failed(request: Request, exc: ValidationFailed) -> JSONResponse:
        logger.warning("Validation failed %s %s: %s", request.method, request.url.path, exc.errors)
        content = _error_body(exc.code, exc.message)
        content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def _on_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return await _on_validation_failed(request, ValidationFailed(validation_errors(exc)))

    @app.exception_handler(Conflict)
    async def _on_conflict(request: Request, exc: Conflict) -> JSONResponse:
        # A uniqueness conflict is never surfaced; answer like a fresh signup.
        logger.warning("Conflict swallowed %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=201, content={"message": REGISTRATION_MESSAGE})

    @app.exception_handler(AppError)
    async def _on_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
            )
            message = exc.message if cfg.is_development else Internal.default_message
        else:
            logger.warning(
                "%s %s -> %s %s: %s",
                request.method,
                request.url.path,
                exc.status_code,
                exc.code,
                exc.message,
            )
            message = exc.message
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, message),
            headers=_auth_headers(exc.status_code),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
        code = _HTTP_CODES.get(exc.status_code, "error")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        message = str(exc) if cfg.is_development else Internal.default_message
        return JSONResponse(status_code=500, content=_error_body(Internal.code, message))
