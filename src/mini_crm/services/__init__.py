"""Service layer orchestrating repositories and domain rules."""

from __future__ import annotations

from .auth import AuthService, LoginResult
from .customers import CustomerPage, CustomerService
from .tasks import TaskService
from .users import UserService

__all__ = [
    "AuthService",
    "CustomerPage",
    "CustomerService",
    "LoginResult",
    "TaskService",
    "UserService",
]
