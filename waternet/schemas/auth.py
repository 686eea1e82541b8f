"""Request/response schemas for auth endpoints."""

from typing import Literal

from pydantic import EmailStr, Field

from waternet.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from waternet.schemas.base import ApiModel, Name

Role = Literal["user", "admin"]


class RegisterRequest(ApiModel):
    """New account. No token is issued at registration; call login afterwards."""

    name: Name
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: Role = "user"


class LoginRequest(ApiModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class TokenPairResponse(ApiModel):
    """Tokens returned after successful login."""

    access_token: str = Field(..., description="JWT access token (short-lived)")
    refresh_token: str = Field(..., description="JWT refresh token (long-lived)")
    role: Role


class RefreshTokenRequest(ApiModel):
    """Body for refresh and logout. Missing token is reported by the endpoint, not as a 400 schema error."""

    refresh_token: str | None = None


class AccessTokenResponse(ApiModel):
    access_token: str


class CurrentUser(ApiModel):
    """Authenticated principal decoded from the access token."""

    id: int
    role: Role
