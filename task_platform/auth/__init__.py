"""Authentication / authorization helpers.

Auth is intentionally lightweight:

- Users table (email + password hash)
- Stateless JWT access tokens (1 hour), sent as `Authorization: Bearer <token>`

No refresh tokens and no revocation: a token is trusted until it expires.
"""

from .deps import Identity, get_current_identity
from .service import login, register

__all__ = [
    "Identity",
    "get_current_identity",
    "login",
    "register",
]
