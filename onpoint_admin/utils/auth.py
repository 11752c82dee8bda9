"""
Authentication utilities: password hashing, session tokens, credentials
providers and role checks.

Session flow: unauthenticated -> (credentials accepted) -> session issued
-> (token expiry or sign-out) -> unauthenticated. Sessions are stateless
HS256 tokens; sign-out clears the client cookie.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

import jwt
from passlib.hash import argon2

from ..config import Settings
from .errors import AppError, ErrorCode
from .logging import get_logger

if TYPE_CHECKING:
    from ..repositories.users import UserRepository

logger = get_logger(__name__)

TOKEN_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return argon2.using(type="ID").hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against the stored hash (False for malformed hashes)."""
    try:
        return argon2.verify(password, hashed)
    except (ValueError, TypeError):
        return False


@dataclass
class SessionClaims:
    """Identity carried by a session token."""

    sub: str
    email: str
    role: str
    environment: str
    exp: int
    iat: int

    def to_user(self) -> Dict[str, Any]:
        """Minimal user view built from the claims alone."""
        return {"id": self.sub, "email": self.email, "role": self.role}


def issue_session_token(
    settings: Settings, user_id: str, email: str, role: str, now: Optional[int] = None
) -> str:
    """Sign a session token for an authenticated user."""
    issued_at = int(time.time()) if now is None else now
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "environment": settings.environment,
        "iss": settings.auth_issuer,
        "iat": issued_at,
        "exp": issued_at + settings.session_ttl_seconds,
    }
    return jwt.encode(payload, settings.auth_secret, algorithm=TOKEN_ALGORITHM)


def verify_session_token(settings: Settings, token: str) -> SessionClaims:
    """
    Validate a session token and extract its claims.

    Raises:
        AppError: UNAUTHORIZED if the token is expired, forged or malformed
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[TOKEN_ALGORITHM],
            issuer=settings.auth_issuer,
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise AppError(ErrorCode.UNAUTHORIZED, "Session expired")
    except jwt.InvalidTokenError:
        raise AppError(ErrorCode.UNAUTHORIZED, "Invalid session token")

    return SessionClaims(
        sub=str(payload["sub"]),
        email=str(payload.get("email", "")),
        role=str(payload.get("role", "")),
        environment=str(payload.get("environment", "")),
        exp=int(payload["exp"]),
        iat=int(payload["iat"]),
    )


def require_role(claims: Optional[SessionClaims], roles: Iterable[str]) -> SessionClaims:
    """
    Require an authenticated session holding one of the roles.

    Raises:
        AppError: UNAUTHORIZED without a session, FORBIDDEN for other roles
    """
    if claims is None:
        raise AppError(ErrorCode.UNAUTHORIZED, "Authentication required")
    allowed = tuple(roles)
    if claims.role not in allowed:
        raise AppError(
            ErrorCode.FORBIDDEN,
            "You do not have permission to perform this action",
            {"requiredRoles": list(allowed)},
        )
    return claims


class CredentialsProvider(ABC):
    """Turns submitted credentials into an authenticated user record."""

    name = "base"

    @abstractmethod
    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        """
        Return the authenticated user (without password hash).

        Raises:
            AppError: UNAUTHORIZED when the credentials are rejected
        """

    @abstractmethod
    def resolve(self, claims: SessionClaims) -> Dict[str, Any]:
        """Return the user a valid session belongs to."""


class DevCredentialsProvider(CredentialsProvider):
    """
    Development stand-in: accepts any non-empty email/password pair and
    issues a session with a fixed role. Never verifies anything, so the
    settings loader refuses it in production.
    """

    name = "dev"

    def __init__(self, role: str = "ejecutivo") -> None:
        self.role = role

    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        if not email or not password:
            raise AppError(ErrorCode.UNAUTHORIZED, "Invalid credentials")
        logger.warning("Development credentials provider accepted login", email=email)
        return {
            "id": f"dev-{email}",
            "email": email,
            "firstName": email.split("@")[0],
            "lastName": "",
            "role": self.role,
            "status": "active",
        }

    def resolve(self, claims: SessionClaims) -> Dict[str, Any]:
        return claims.to_user()


class StoreCredentialsProvider(CredentialsProvider):
    """Verifies credentials against the users table."""

    name = "store"

    def __init__(self, users: "UserRepository") -> None:
        self.users = users

    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, str(user.get("password", ""))):
            logger.info("Rejected login", email=email, reason="invalid_credentials")
            raise AppError(ErrorCode.UNAUTHORIZED, "Invalid credentials")

        if user.get("status") != "active":
            logger.info("Rejected login", email=email, reason="inactive_user")
            raise AppError(ErrorCode.UNAUTHORIZED, "User is not active")

        updated = self.users.update_last_login(str(user["id"]))
        return self.users.public_user(updated or user)

    def resolve(self, claims: SessionClaims) -> Dict[str, Any]:
        user = self.users.find_by_id(claims.sub)
        if user is None or user.get("status") != "active":
            raise AppError(ErrorCode.UNAUTHORIZED, "User not found")
        return self.users.public_user(user)


def create_credentials_provider(
    settings: Settings, users: "UserRepository"
) -> CredentialsProvider:
    """Build the provider selected by AUTH_PROVIDER."""
    if settings.auth_provider == "dev":
        if settings.is_production:
            raise AppError(
                ErrorCode.CONFIGURATION_ERROR,
                "The development credentials provider cannot run in production",
            )
        return DevCredentialsProvider(settings.auth_default_role)
    return StoreCredentialsProvider(users)
