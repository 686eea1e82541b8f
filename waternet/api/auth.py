"""Registration, login, token refresh/logout, and the auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from waternet.core.database import get_db
from waternet.schemas.auth import (
    AccessTokenResponse,
    CurrentUser,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
)
from waternet.schemas.base import MessageResponse
from waternet.services.accounts import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserNotFoundError,
    authenticate,
    register_user,
)
from waternet.services.tokens import (
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    TokenMissingError,
    TokenService,
)

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_service(request: Request) -> TokenService:
    """Dependency: the TokenService owned by this application instance."""
    return request.app.state.token_service


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer access token and return its {id, role}.

    401 when the header is missing, the token expired, or it is otherwise invalid;
    the detail tells the client whether refreshing can help.
    """
    if credentials is None:
        raise _unauthorized("No token, authorization denied")
    try:
        payload = tokens.verify_access_token(credentials.credentials)
    except TokenExpiredError:
        raise _unauthorized("Token expired")
    except TokenInvalidError:
        raise _unauthorized("Token is not valid")
    try:
        user = CurrentUser(id=int(payload["sub"]), role=payload["role"])
    except (TypeError, ValueError, ValidationError):
        raise _unauthorized("Invalid token payload")
    return user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin rights required.",
        )
    return current_user


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Create an account. No tokens are issued here; log in afterwards."""
    try:
        register_user(db, body)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return MessageResponse(message="User registered successfully!")


@router.post("/login", response_model=TokenPairResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenPairResponse:
    """
    Authenticate with email and password; returns access and refresh tokens plus the role.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    try:
        user = authenticate(db, body.email, body.password)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return TokenPairResponse(
        access_token=tokens.issue_access_token(user.id, user.role),
        refresh_token=tokens.issue_refresh_token(user.id, user.role),
        role=user.role,
    )


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(
    tokens: Annotated[TokenService, Depends(get_token_service)],
    body: Annotated[RefreshTokenRequest | None, Body()] = None,
) -> AccessTokenResponse:
    """
    Exchange a refresh token for a new access token. The refresh token stays valid.

    401 when no token is sent; 403 when it is revoked, expired or invalid.
    """
    refresh_token = body.refresh_token if body is not None else None
    try:
        access_token = tokens.refresh(refresh_token)
    except TokenMissingError as e:
        raise _unauthorized(e.message)
    except TokenError as e:
        logger.info("Refresh rejected: %s", e.message)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    return AccessTokenResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    tokens: Annotated[TokenService, Depends(get_token_service)],
    body: Annotated[RefreshTokenRequest | None, Body()] = None,
) -> MessageResponse:
    """Revoke a refresh token. Idempotent; 400 when no token is sent."""
    refresh_token = body.refresh_token if body is not None else None
    if not refresh_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Refresh token not provided",
        )
    tokens.revoke(refresh_token)
    logger.info("Refresh token revoked on logout")
    return MessageResponse(message="Logged out successfully")
