from __future__ import annotations

from typing import Any, Dict, Optional

from task_platform.db import fetch_returning, is_unique_violation
from task_platform.errors import Conflict
from task_platform.util.time import utcnow_iso

from .security import hash_password


def public_account(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("password_hash", None)
    return d


def get_account_by_email(conn: Any, email: str) -> Optional[Any]:
    if not email:
        return None
    return conn.execute(
        "SELECT * FROM users WHERE email=?",
        (email,),
    ).fetchone()


def create_account(conn: Any, *, email: str, password: str) -> Dict[str, Any]:
    """Insert a new account and return it without the password hash.

    Uniqueness is left to the store: a duplicate email raises Conflict.
    """
    try:
        row = fetch_returning(conn.execute(
            """
            INSERT INTO users (email, password_hash, created_at)
            VALUES (?,?,?)
            RETURNING *
            """,
            (email, hash_password(password), utcnow_iso()),
        ))
    except Exception as e:
        if is_unique_violation(e):
            raise Conflict("email_exists") from e
        raise
    assert row is not None
    return public_account(row)
