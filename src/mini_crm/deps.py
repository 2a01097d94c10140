"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.authorization import AccessPolicy, Identity, authenticate
from .core.config import Settings, get_settings
from .core.context import bind_user_id
from .db.session import get_session

_bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token from /auth/login")


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a database session."""

    async for session in get_session():
        yield session


SettingsDependency = Annotated[Settings, Depends(get_settings)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]


def require_identity(policy: AccessPolicy) -> Callable[..., Awaitable[Identity]]:
    """Return a dependency that authenticates the caller and applies ``policy``."""

    async def _dependency(
        request: Request,
        settings: SettingsDependency,
        credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    ) -> Identity:
        token = credentials.credentials if credentials is not None else None
        identity = authenticate(token, settings)
        request.state.identity = identity
        bind_user_id(identity.user_id)
        return policy.authorize(identity)

    return _dependency


__all__ = [
    "DatabaseSessionDependency",
    "SettingsDependency",
    "get_db_session",
    "require_identity",
]
