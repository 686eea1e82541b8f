"""Pydantic request/response schemas."""

from waternet.schemas.auth import (
    AccessTokenResponse,
    CurrentUser,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
)
from waternet.schemas.base import ApiModel, MessageResponse
from waternet.schemas.health import HealthResponse
from waternet.schemas.node import Location, NodeCreate, NodeRead, NodeSearchParams, NodeUpdate
from waternet.schemas.pipe import (
    GeometricPipeCreate,
    PipeCreate,
    PipeDeleteResponse,
    PipeRead,
    PipeSearchParams,
    PipeUpdate,
    ReferentialPipeCreate,
)
from waternet.schemas.user import UserRead, UserUpdate, UserUpdateResponse

__all__ = [
    "AccessTokenResponse",
    "ApiModel",
    "CurrentUser",
    "GeometricPipeCreate",
    "HealthResponse",
    "Location",
    "LoginRequest",
    "MessageResponse",
    "NodeCreate",
    "NodeRead",
    "NodeSearchParams",
    "NodeUpdate",
    "PipeCreate",
    "PipeDeleteResponse",
    "PipeRead",
    "PipeSearchParams",
    "PipeUpdate",
    "ReferentialPipeCreate",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenPairResponse",
    "UserRead",
    "UserUpdate",
    "UserUpdateResponse",
]
