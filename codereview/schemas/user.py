"""User Schemas — profile registration and self-service updates.

Invariants:
    - email must look like an address; name is 2-100 chars after stripping
    - UserUpdate fields are all optional (partial update)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from codereview.core.domain_types import Role

_EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


def _strip_user_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if len(v) < 2:
        raise ValueError("name must be at least 2 characters long")
    return v


class UserCreate(BaseModel):
    """Profile registration — id and role come from the caller's identity."""
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(max_length=255, pattern=_EMAIL_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_user_name(v)


class UserUpdate(BaseModel):
    """Partial profile update — only the user themself may apply it."""
    name: str | None = Field(None, min_length=2, max_length=100)
    email: str | None = Field(None, max_length=255, pattern=_EMAIL_PATTERN)
    role: Role | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_user_name(v)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: Role
    created_at: datetime
