"""Declarative role and ownership policies evaluated for every protected route.

Each route declares one :class:`AccessPolicy`. The request pipeline verifies the
bearer token, builds an :class:`Identity` and checks the policy's role set.
Policies with an ownership predicate are evaluated a second time by the service
once the target resource has been loaded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from ..errors import ForbiddenError, UnauthenticatedError
from ..models import UserRole
from .config import Settings
from .security import InvalidTokenError, decode_access_token

TOKEN_MISSING_MESSAGE = "Authorization token missing."
TOKEN_INVALID_MESSAGE = "Invalid or expired token."


@dataclass(frozen=True, slots=True)
class Identity:
    """The authenticated caller resolved from a verified access token."""

    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


OwnerCheck = Callable[[Identity, Any], bool]


@dataclass(frozen=True, slots=True)
class AccessPolicy:
    """Allowed roles for an operation plus an optional ownership predicate."""

    name: str
    allowed_roles: frozenset[UserRole]
    owner_check: OwnerCheck | None = None
    owner_message: str = field(default=ForbiddenError.default_message)

    def authorize(self, identity: Identity) -> Identity:
        """Raise ``ForbiddenError`` unless the identity's role is allowed."""
        if identity.role not in self.allowed_roles:
            raise ForbiddenError(details={"policy": self.name})
        return identity

    def authorize_resource(self, identity: Identity, resource: Any) -> None:
        """Apply the ownership predicate; administrators always pass."""
        self.authorize(identity)
        if self.owner_check is None or identity.is_admin:
            return
        if not self.owner_check(identity, resource):
            raise ForbiddenError(self.owner_message, details={"policy": self.name})


def authenticate(token: str | None, settings: Settings) -> Identity:
    """Resolve the caller from a raw bearer token."""
    if not token:
        raise UnauthenticatedError(TOKEN_MISSING_MESSAGE)
    try:
        claims = decode_access_token(token, settings)
    except InvalidTokenError as exc:
        raise UnauthenticatedError(TOKEN_INVALID_MESSAGE) from exc
    return Identity(user_id=claims.user_id, role=claims.role)


_ALL_ROLES = frozenset({UserRole.ADMIN, UserRole.EMPLOYEE})
_ADMIN_ONLY = frozenset({UserRole.ADMIN})


def _is_task_assignee(identity: Identity, task: Any) -> bool:
    return getattr(task, "assigned_to", None) == identity.user_id


CUSTOMERS_READ = AccessPolicy("customers.read", _ALL_ROLES)
CUSTOMERS_WRITE = AccessPolicy("customers.write", _ADMIN_ONLY)
TASKS_CREATE = AccessPolicy("tasks.create", _ADMIN_ONLY)
TASKS_READ = AccessPolicy("tasks.read", _ALL_ROLES)
TASKS_UPDATE_STATUS = AccessPolicy(
    "tasks.update_status",
    _ALL_ROLES,
    owner_check=_is_task_assignee,
    owner_message="Forbidden: cannot update task of another user.",
)
USERS_MANAGE = AccessPolicy("users.manage", _ADMIN_ONLY)
PROFILE_READ = AccessPolicy("profile.read", _ALL_ROLES)


__all__ = [
    "AccessPolicy",
    "CUSTOMERS_READ",
    "CUSTOMERS_WRITE",
    "Identity",
    "PROFILE_READ",
    "TASKS_CREATE",
    "TASKS_READ",
    "TASKS_UPDATE_STATUS",
    "TOKEN_INVALID_MESSAGE",
    "TOKEN_MISSING_MESSAGE",
    "USERS_MANAGE",
    "authenticate",
]
