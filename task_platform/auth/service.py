"""Registration and login flows.

Both flows are written so a caller cannot learn which emails have accounts:

- register answers the same message whether or not the email was already taken
- login always pays for one password hash comparison and uses one error message
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from task_platform.config import Config
from task_platform.db import connect
from task_platform.errors import REGISTRATION_MESSAGE, Conflict, InvalidCredentials

from .crud import create_account, get_account_by_email
from .security import create_access_token, dummy_password_hash, verify_password


logger = logging.getLogger(__name__)


def register(cfg: Config, *, email: str, password: str) -> Dict[str, Any]:
    try:
        with connect(cfg.DB_DSN, timeout=cfg.DB_CONNECT_TIMEOUT_SECONDS) as conn:
            account = create_account(conn, email=email, password=password)
    except Conflict:
        # Swallowed on purpose: the response must not reveal that the email exists.
        logger.info("Signup for an existing email; answering with the generic message")
    else:
        logger.info("Registered account id=%s", account["id"])
    return {"message": REGISTRATION_MESSAGE}


def login(cfg: Config, *, email: str, password: str) -> Dict[str, Any]:
    with connect(cfg.DB_DSN, timeout=cfg.DB_CONNECT_TIMEOUT_SECONDS) as conn:
        row = get_account_by_email(conn, email)

    hash_to_compare = str(row["password_hash"]) if row is not None else dummy_password_hash()
    password_ok = verify_password(password, hash_to_compare)

    if row is None or not password_ok:
        raise InvalidCredentials()

    token = create_access_token(
        secret=cfg.JWT_SECRET,
        user_id=int(row["id"]),
        email=str(row["email"]),
        expires_seconds=int(cfg.AUTH_TOKEN_EXPIRE_SECONDS),
    )
    return {"message": "Login successful", "token": token}
