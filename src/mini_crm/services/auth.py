"""Authentication service encapsulating registration and login flows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings
from ..core.security import GeneratedToken, create_access_token, verify_password
from ..errors import ConflictError, ServerError, UnauthenticatedError
from ..models import User
from ..schemas import LoginRequest, RegisterRequest
from ..validation import parse_payload
from .users import EMAIL_IN_USE_MESSAGE, UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


@dataclass(slots=True)
class LoginResult:
    """An authenticated user together with the access token issued for them."""

    user: User
    token: GeneratedToken


class AuthService:
    """Registration and credential exchange for API users."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._user_service = UserService(session)

    async def register(self, payload: RegisterRequest | Mapping[str, Any]) -> User:
        data = parse_payload(RegisterRequest, payload)
        existing = await self._user_service.get_user_by_email(data.email)
        if existing is not None:
            logger.info("Registration rejected: email in use")
            raise ConflictError(EMAIL_IN_USE_MESSAGE)
        user = await self._user_service.create_user(
            name=data.name,
            email=data.email,
            password=data.password,
            role=data.role,
        )
        logger.info("User registered", extra={"target_user_id": user.id, "role": user.role.value})
        return user

    async def login(self, payload: LoginRequest | Mapping[str, Any]) -> LoginResult:
        """Verify credentials and issue an access token.

        Unknown emails and wrong passwords fail with the same message.
        """
        data = parse_payload(LoginRequest, payload)
        user = await self._user_service.get_user_by_email(data.email)
        if user is None or not verify_password(data.password, user.hashed_password):
            logger.warning("Login failed")
            raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)
        if user.id is None:  # pragma: no cover - persisted users always carry an id
            raise ServerError("User must be persisted before issuing tokens.")
        token = create_access_token(user_id=user.id, role=user.role, settings=self._settings)
        logger.info("User logged in", extra={"target_user_id": user.id})
        return LoginResult(user=user, token=token)


__all__ = ["AuthService", "INVALID_CREDENTIALS_MESSAGE", "LoginResult"]
