"""Typed failures raised by services and rendered by the API error handlers.

Each failure carries an HTTP status and a short snake_case `code` so clients can
branch on it without parsing messages.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


REGISTRATION_MESSAGE = "Registration successful. If this is a new email, you can now log in."


class AppError(Exception):
    status_code: int = 500
    code: str = "error"
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = 400
    code = "validation_failed"
    default_message = "Request validation failed"

    def __init__(self, errors: List[Dict[str, Any]], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message)


class BadRequest(AppError):
    status_code = 400
    code = "bad_request"
    default_message = "Bad request"


class Unauthenticated(AppError):
    status_code = 401
    code = "unauthenticated"
    default_message = "No token provided"


class InvalidToken(Unauthenticated):
    code = "token_invalid"
    default_message = "Invalid token"


class TokenExpired(Unauthenticated):
    code = "token_expired"
    default_message = "Token expired"


class InvalidCredentials(AppError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid Email or Password"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Conflict(AppError):
    # Never shown to clients on signup; see auth.service.register.
    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class Internal(AppError):
    status_code = 500
    code = "internal_error"
    default_message = "Internal Server Error"
