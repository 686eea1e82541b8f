"""Schemas for user profile endpoints."""

from datetime import datetime

from pydantic import EmailStr, Field

from waternet.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from waternet.schemas.auth import Role
from waternet.schemas.base import ApiModel, Name


class UserRead(ApiModel):
    """User profile as returned by the API (never includes the password hash)."""

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class UserUpdate(ApiModel):
    """Profile update. Only name, email and password are writable; role and any other field are ignored."""

    name: Name | None = None
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )


class UserUpdateResponse(ApiModel):
    message: str
    user: UserRead
