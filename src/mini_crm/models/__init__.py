"""Domain models backing the CRM store."""

from __future__ import annotations

from .common import TimestampMixin, utcnow
from .customer import Customer, CustomerBase
from .task import Task, TaskBase, TaskStatus
from .user import User, UserBase, UserRole

__all__ = [
    "Customer",
    "CustomerBase",
    "Task",
    "TaskBase",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "UserBase",
    "UserRole",
    "utcnow",
]
