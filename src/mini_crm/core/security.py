"""Security helpers for password hashing and JWT access tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

from ..models import UserRole
from ..schemas.auth import TokenClaims
from .config import Settings

BCRYPT_ROUNDS = 10

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


class InvalidTokenError(Exception):
    """Raised when a token has a bad signature, malformed claims or has expired."""


@dataclass(slots=True)
class GeneratedToken:
    """Represents a generated JWT token with associated metadata."""

    token: str
    expires_at: datetime
    expires_in: int


def get_password_hash(password: str) -> str:
    """Return a salted bcrypt digest of ``password``."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its digest; malformed digests never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(
    *,
    user_id: int,
    role: UserRole,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> GeneratedToken:
    """Sign an access token carrying ``userId`` and ``role`` claims."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = now + expires_delta
    payload: dict[str, Any] = {
        "userId": user_id,
        "role": UserRole(role).value,
        "iat": now,
        "exp": expire,
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return GeneratedToken(
        token=token,
        expires_at=expire,
        expires_in=max(int(expires_delta.total_seconds()), 0),
    )


def decode_token(*, token: str, secret: str, algorithm: str) -> dict[str, Any]:
    """Decode a JWT and return its raw payload; raises ``JWTError`` on failure."""
    return jwt.decode(token, secret, algorithms=[algorithm])


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """Verify ``token`` and return its claims, raising ``InvalidTokenError`` otherwise."""
    try:
        payload = decode_token(
            token=token,
            secret=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as exc:
        raise InvalidTokenError("Token claims are malformed.") from exc


__all__ = [
    "BCRYPT_ROUNDS",
    "GeneratedToken",
    "InvalidTokenError",
    "create_access_token",
    "decode_access_token",
    "decode_token",
    "get_password_hash",
    "pwd_context",
    "verify_password",
]
