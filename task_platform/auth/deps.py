from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from task_platform.errors import Internal, Unauthenticated

from .security import decode_access_token


_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Claims taken from a verified access token."""

    user_id: int
    email: str


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Identity:
    """Authenticate a request from its `Authorization: Bearer <jwt>` header.

    The signature alone is trusted; the accounts table is never consulted.
    TokenExpired / InvalidToken propagate to the error handlers unchanged.
    """

    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise Internal("server_config_missing")

    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    payload = decode_access_token(token=credentials.credentials, secret=cfg.JWT_SECRET)

    identity = Identity(user_id=int(payload["userId"]), email=str(payload["email"]))
    request.state.identity = identity
    return identity
