"""Task Platform - Backend.

A small HTTP API for account registration/login and per-account task CRUD.

Core concepts:
- Stateless auth: a signed JWT carries the account id + email.
- Every task statement is scoped to the owner decoded from the token.

See README for setup and usage.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
