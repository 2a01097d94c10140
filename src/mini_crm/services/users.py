"""Service layer orchestrating user-related repository operations."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.authorization import Identity
from ..core.security import get_password_hash
from ..errors import NotFoundError
from ..models import User, UserRole
from ..repositories import UserRepository
from ..schemas import RoleUpdate
from ..validation import parse_payload

logger = logging.getLogger(__name__)

EMAIL_IN_USE_MESSAGE = "Email already in use."
USER_NOT_FOUND_MESSAGE = "User not found."


class UserService:
    """High-level business operations for ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        self._repository = UserRepository(session)

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.EMPLOYEE,
    ) -> User:
        """Hash the password and persist a new user record."""
        user = User(
            name=name,
            email=email,
            role=role,
            hashed_password=get_password_hash(password),
        )
        await self._repository.save(user, conflict_message=EMAIL_IN_USE_MESSAGE)
        logger.info("User created", extra={"target_user_id": user.id, "role": user.role.value})
        return user

    async def get_user(self, user_id: int) -> User | None:
        """Fetch a user by primary key."""
        return await self._repository.get(user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        """Fetch a user by their unique email address."""
        return await self._repository.get_by_email(email)

    async def list_users(self) -> list[User]:
        """Return all registered users ordered by id."""
        return await self._repository.list()

    async def update_role(self, user_id: int, payload: RoleUpdate | Mapping[str, Any]) -> User | None:
        """Change a user's role; returns ``None`` when the user does not exist."""
        data = parse_payload(RoleUpdate, payload)
        user = await self._repository.get(user_id)
        if user is None:
            return None
        previous = user.role
        user.role = data.role
        await self._repository.save(user, conflict_message=EMAIL_IN_USE_MESSAGE)
        logger.info(
            "User role updated",
            extra={"target_user_id": user.id, "from_role": previous.value, "to_role": user.role.value},
        )
        return user

    async def get_profile(self, identity: Identity) -> User:
        """Return the caller's own record."""
        user = await self._repository.get(identity.user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)
        return user


__all__ = ["EMAIL_IN_USE_MESSAGE", "USER_NOT_FOUND_MESSAGE", "UserService"]
