"""Schemas describing authentication payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field

from ..models import UserRole
from .common import CamelModel, NonBlankStr
from .user import UserPublic


class RegisterRequest(CamelModel):
    """Incoming payload for registering a new user."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Erin Employee",
                "email": "erin@example.com",
                "password": "password123",
                "role": UserRole.EMPLOYEE.value,
            }
        }
    )

    name: NonBlankStr
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    role: UserRole


class LoginRequest(CamelModel):
    """Credentials submitted to obtain an access token."""

    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    """Issued bearer token together with the caller's public profile."""

    access_token: str
    token_type: str = Field(default="bearer", frozen=True)
    expires_in: int = Field(description="Token lifetime in seconds")
    user: UserPublic


class TokenClaims(CamelModel):
    """Validated claims carried by an access token."""

    model_config = ConfigDict(extra="ignore")

    user_id: int
    role: UserRole
    exp: datetime
    iat: datetime | None = None


__all__ = ["LoginRequest", "LoginResponse", "RegisterRequest", "TokenClaims"]
