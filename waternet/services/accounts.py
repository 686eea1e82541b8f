"""User registration, credential checks and profile maintenance."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from waternet.core.security import hash_password, verify_password
from waternet.models import User
from waternet.schemas.auth import RegisterRequest
from waternet.schemas.user import UserUpdate
from waternet.services.updates import apply_changes

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """Base class for account failures; `message` is safe to return to clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmailAlreadyRegisteredError(AccountError):
    """Raised when an email is already used by another account."""


class UserNotFoundError(AccountError):
    """Raised when no user matches the given id or email."""


class InvalidCredentialsError(AccountError):
    """Raised when the password does not match the stored hash."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _commit_unique_email(db: Session) -> None:
    """Commit, turning a unique-email violation into EmailAlreadyRegisteredError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailAlreadyRegisteredError("Email already exists") from e


def register_user(db: Session, body: RegisterRequest) -> User:
    """Persist a new user with a salted bcrypt hash. Raises EmailAlreadyRegisteredError."""
    email = normalize_email(body.email)
    if db.query(User).filter(User.email == email).first() is not None:
        raise EmailAlreadyRegisteredError("Email already exists")
    user = User(
        name=body.name,
        email=email,
        password_hash=hash_password(body.password),
        role=body.role,
    )
    db.add(user)
    _commit_unique_email(db)
    db.refresh(user)
    logger.info("User registered: id=%s role=%s", user.id, user.role)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials; raise UserNotFoundError or InvalidCredentialsError."""
    email = normalize_email(email)
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        logger.info("Login failed: email=%s reason=unknown_email", email)
        raise UserNotFoundError("User not found")
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: email=%s reason=bad_password", email)
        raise InvalidCredentialsError("Invalid credentials")
    logger.info("Login succeeded: id=%s", user.id)
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError("User not found")
    return user


def update_user(db: Session, user_id: int, body: UserUpdate) -> User:
    """Update name/email/password. Role is never touched here."""
    user = get_user(db, user_id)
    changes: dict[str, object] = {}
    if body.name is not None:
        changes["name"] = body.name
    if body.email is not None:
        email = normalize_email(body.email)
        if email != user.email:
            taken = db.query(User).filter(User.email == email, User.id != user.id).first()
            if taken is not None:
                raise EmailAlreadyRegisteredError("Email already exists")
        changes["email"] = email
    if body.password is not None and not verify_password(body.password, user.password_hash):
        changes["password_hash"] = hash_password(body.password)
    if apply_changes(user, changes):
        _commit_unique_email(db)
        db.refresh(user)
        logger.info("User updated: id=%s fields=%s", user.id, sorted(changes))
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted: id=%s", user_id)
