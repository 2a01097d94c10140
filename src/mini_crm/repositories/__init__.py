"""Repository layer abstractions."""

from __future__ import annotations

from .base import BaseRepository
from .customers import CustomerRepository
from .tasks import TaskRepository
from .users import UserRepository

__all__ = ["BaseRepository", "CustomerRepository", "TaskRepository", "UserRepository"]
