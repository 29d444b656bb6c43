"""Request payloads.

FastAPI validates these before a route body runs; every violation found is
reported (see api.errors).
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, Field, StrictBool, model_validator


def _check_email(value: str) -> str:
    # Format check only; the address is kept exactly as sent (no normalization).
    validate_email(value, check_deliverability=False)
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class CredentialsRequest(BaseModel):
    email: Email
    password: str = Field(min_length=8, max_length=100)


# Login accepts the same shape as signup.
SignupRequest = CredentialsRequest
LoginRequest = CredentialsRequest


class CreateTaskRequest(BaseModel):
    title: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)


class UpdateTaskRequest(BaseModel):
    """Partial update. Omitted fields are left alone; unknown keys are ignored."""

    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    completed: Optional[StrictBool] = None

    @model_validator(mode="after")
    def _no_explicit_nulls(self) -> "UpdateTaskRequest":
        nulls = [k for k in self.model_fields_set if getattr(self, k) is None]
        if nulls:
            raise ValueError(f"{', '.join(sorted(nulls))} must not be null")
        return self

    def updates(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
