"""User profile endpoints. Listing and deletion are admin-only; a user may read/update only themselves."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from waternet.api.auth import get_current_user, require_admin
from waternet.core.database import get_db
from waternet.schemas.auth import CurrentUser
from waternet.schemas.base import MessageResponse
from waternet.schemas.user import UserRead, UserUpdate, UserUpdateResponse
from waternet.services.accounts import (
    EmailAlreadyRegisteredError,
    UserNotFoundError,
    delete_user,
    get_user,
    list_users,
    update_user,
)

router = APIRouter()


def _require_self_or_admin(current_user: CurrentUser, user_id: int) -> None:
    if current_user.role != "admin" and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. You can only access your own profile.",
        )


@router.get("/users", response_model=list[UserRead])
def get_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserRead]:
    """List all users (admin only). Password hashes are never returned."""
    return [UserRead.model_validate(u) for u in list_users(db)]


@router.get("/{user_id}", response_model=UserRead)
def get_user_details(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    _require_self_or_admin(current_user, user_id)
    try:
        return UserRead.model_validate(get_user(db, user_id))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.put("/{user_id}", response_model=UserUpdateResponse)
def put_user(
    user_id: int,
    body: UserUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserUpdateResponse:
    """Update name, email or password. The role cannot be changed through this endpoint."""
    _require_self_or_admin(current_user, user_id)
    try:
        user = update_user(db, user_id, body)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return UserUpdateResponse(
        message="User updated successfully",
        user=UserRead.model_validate(user),
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def remove_user(
    user_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    try:
        delete_user(db, user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return MessageResponse(message="User deleted successfully")
