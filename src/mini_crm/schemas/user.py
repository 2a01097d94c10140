"""User-facing Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict

from ..models import UserRole
from .common import CamelModel


class UserPublic(CamelModel):
    """Public profile of a user; never exposes the password digest."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Ada Admin",
                "email": "ada@example.com",
                "role": UserRole.ADMIN.value,
                "createdAt": "2024-01-01T12:00:00Z",
            }
        }
    )

    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime


class UserSummary(CamelModel):
    """Compact assignee view embedded in task payloads."""

    id: int
    name: str
    email: str


class RoleUpdate(CamelModel):
    """Payload for changing a user's role."""

    model_config = ConfigDict(json_schema_extra={"example": {"role": UserRole.EMPLOYEE.value}})

    role: UserRole


__all__ = ["RoleUpdate", "UserPublic", "UserSummary"]
