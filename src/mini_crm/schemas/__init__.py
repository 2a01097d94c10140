"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import LoginRequest, LoginResponse, RegisterRequest, TokenClaims
from .customer import (
    CustomerCreate,
    CustomerListParams,
    CustomerListResponse,
    CustomerRead,
    CustomerSummary,
    CustomerUpdate,
)
from .system import ErrorResponse, HealthCheckResponse, RootResponse
from .task import TaskCreate, TaskRead, TaskStatusUpdate
from .user import RoleUpdate, UserPublic, UserSummary

__all__ = [
    "CustomerCreate",
    "CustomerListParams",
    "CustomerListResponse",
    "CustomerRead",
    "CustomerSummary",
    "CustomerUpdate",
    "ErrorResponse",
    "HealthCheckResponse",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RoleUpdate",
    "RootResponse",
    "TaskCreate",
    "TaskRead",
    "TaskStatusUpdate",
    "TokenClaims",
    "UserPublic",
    "UserSummary",
]
