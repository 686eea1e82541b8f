"""Access/refresh token issuance, verification and refresh-token revocation."""

import logging
import threading
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

if TYPE_CHECKING:
    from waternet.core.config import Settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=7)


class TokenError(Exception):
    """Base class for token failures; `message` is safe to return to clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TokenMissingError(TokenError):
    """Raised when a request carries no token at all."""


class TokenExpiredError(TokenError):
    """Raised when a token's signature is valid but its exp claim has passed."""


class TokenInvalidError(TokenError):
    """Raised for bad signatures, malformed tokens or missing claims."""


class TokenRevokedError(TokenError):
    """Raised when a refresh token is in the revocation set (or just expired)."""


class RevocationSet:
    """
    Thread-safe set of refresh tokens that must no longer be honoured.

    Lives as long as the TokenService that owns it; nothing is persisted.
    """

    def __init__(self) -> None:
        self._tokens: set[str] = set()
        self._lock = threading.Lock()

    def add(self, token: str) -> None:
        with self._lock:
            self._tokens.add(token)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()


class TokenService:
    """
    Issues and verifies signed access and refresh tokens.

    Both token kinds carry {sub, role, exp, iat}; they are signed with distinct
    secrets so one can never stand in for the other. Refresh tokens are not
    rotated: the same refresh token can mint access tokens until it expires or
    is revoked.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        revoked: RevocationSet | None = None,
    ) -> None:
        if access_secret == refresh_secret:
            raise ValueError("access and refresh secrets must differ")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.revoked = revoked if revoked is not None else RevocationSet()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        """Build a service with a fresh revocation set from application settings."""
        return cls(
            access_secret=settings.JWT_SECRET.get_secret_value(),
            refresh_secret=settings.REFRESH_TOKEN_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def _sign(self, user_id: int | str, role: str, secret: str, ttl: timedelta) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "role": role,
            "exp": now + ttl,
            "iat": now,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, user_id: int | str, role: str) -> str:
        """Create a short-lived access token for the given subject and role."""
        return self._sign(user_id, role, self.access_secret, self.access_ttl)

    def issue_refresh_token(self, user_id: int | str, role: str) -> str:
        """Create a long-lived refresh token for the given subject and role."""
        return self._sign(user_id, role, self.refresh_secret, self.refresh_ttl)

    def verify(self, token: str, secret: str) -> dict[str, Any]:
        """
        Decode and validate a token signed with `secret`; return its claims.

        Raises TokenExpiredError when only the expiry check fails, and
        TokenInvalidError for every other failure (signature, structure, claims).
        """
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token expired") from e
        except jwt.PyJWTError as e:
            raise TokenInvalidError("Token is not valid") from e
        if not payload.get("role"):
            raise TokenInvalidError("Token is not valid")
        return payload

    def verify_access_token(self, token: str) -> dict[str, Any]:
        return self.verify(token, self.access_secret)

    def verify_refresh_token(self, token: str) -> dict[str, Any]:
        return self.verify(token, self.refresh_secret)

    def revoke(self, refresh_token: str) -> None:
        """Stop honouring a refresh token. Idempotent."""
        self.revoked.add(refresh_token)

    def is_revoked(self, refresh_token: str) -> bool:
        return refresh_token in self.revoked

    def refresh(self, refresh_token: str | None) -> str:
        """
        Mint a new access token from a refresh token.

        An expired refresh token is revoked on the spot and reported as revoked.
        """
        if not refresh_token:
            raise TokenMissingError("Refresh token not provided")
        if self.is_revoked(refresh_token):
            raise TokenRevokedError("Refresh token has been revoked")
        try:
            payload = self.verify_refresh_token(refresh_token)
        except TokenExpiredError as e:
            self.revoke(refresh_token)
            logger.info("Expired refresh token presented; revoked")
            raise TokenRevokedError("Refresh token expired") from e
        except TokenInvalidError as e:
            raise TokenInvalidError("Invalid refresh token") from e
        return self.issue_access_token(payload["sub"], payload["role"])
