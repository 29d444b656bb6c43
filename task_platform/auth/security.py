from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from task_platform.errors import InvalidToken, TokenExpired
from task_platform.util.time import utcnow


# Fixed work factor: every stored hash and the dummy hash cost the same to verify.
PASSWORD_HASH_ROUNDS = 100_000

_pwd = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=PASSWORD_HASH_ROUNDS,
)
_JWT_ALG = "HS256"

ACCESS_TOKEN_TTL_SECONDS = 3600


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        # Unknown / malformed hash format.
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """A well-formed hash of a random secret, constant for the process.

    Login compares against it when the account does not exist, so that path
    costs the same as a wrong password for a real account.
    """
    return hash_password(secrets.token_urlsafe(32))


def create_access_token(
    *,
    secret: str,
    user_id: int,
    email: str,
    expires_seconds: int = ACCESS_TOKEN_TTL_SECONDS,
    now: Optional[datetime] = None,
) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")

    issued = now or utcnow()
    exp = issued + timedelta(seconds=int(expires_seconds))

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "userId": int(user_id),
        "email": email,
        "iat": int(issued.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    """Verify signature + expiry and return the claims.

    Raises TokenExpired past `exp`, InvalidToken for anything else wrong with it.
    """
    if not secret:
        raise ValueError("jwt_secret_blank")
    if not token:
        raise InvalidToken()

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[_JWT_ALG],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired()
    except jwt.InvalidTokenError:
        raise InvalidToken()

    user_id = payload.get("userId")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise InvalidToken()
    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise InvalidToken()

    return payload
