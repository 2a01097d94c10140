"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from ..models import TaskStatus
from .common import CamelModel, NonBlankStr
from .customer import CustomerSummary
from .user import UserSummary

TASK_READ_EXAMPLE = {
    "id": 1,
    "title": "Follow up on renewal",
    "description": "Call the buyer about the annual contract.",
    "status": TaskStatus.PENDING.value,
    "assignedTo": 2,
    "customerId": 1,
    "createdAt": "2024-01-01T12:00:00Z",
    "updatedAt": "2024-01-02T08:30:00Z",
    "assignee": {"id": 2, "name": "Erin Employee", "email": "erin@example.com"},
    "customer": {
        "id": 1,
        "name": "Acme Buyer",
        "email": "buyer@acme.example.com",
        "phone": "7000000000",
    },
}


class TaskCreate(CamelModel):
    """Payload for creating and assigning a task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Follow up on renewal",
                "description": "Call the buyer about the annual contract.",
                "assignedTo": 2,
                "customerId": 1,
                "status": TaskStatus.PENDING.value,
            }
        }
    )

    title: NonBlankStr
    description: str | None = Field(default=None)
    assigned_to: int
    customer_id: int
    status: TaskStatus = Field(default=TaskStatus.PENDING)

    @field_validator("status", mode="before")
    @classmethod
    def _default_missing_status(cls, value: object) -> object:
        return TaskStatus.PENDING if value is None else value


class TaskStatusUpdate(CamelModel):
    """Payload for moving a task to a new status."""

    model_config = ConfigDict(json_schema_extra={"example": {"status": TaskStatus.DONE.value}})

    status: TaskStatus


class TaskRead(CamelModel):
    """Public representation of a task with its assignee and customer."""

    model_config = ConfigDict(json_schema_extra={"example": TASK_READ_EXAMPLE})

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    assigned_to: int
    customer_id: int
    created_at: datetime
    updated_at: datetime
    assignee: UserSummary
    customer: CustomerSummary


__all__ = ["TaskCreate", "TaskRead", "TaskStatusUpdate"]
