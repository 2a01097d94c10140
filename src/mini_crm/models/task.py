"""Task domain models built with SQLModel."""

from enum import Enum
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from .common import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .customer import Customer
    from .user import User


class TaskStatus(str, Enum):
    """Enumeration of possible task states."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskBase(SQLModel, table=False):
    """Shared attributes for task models."""

    title: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.Text(), nullable=True),
    )
    status: TaskStatus = Field(
        default=TaskStatus.PENDING,
        sa_column=sa.Column(
            sa.Enum(TaskStatus, name="task_status", native_enum=False, validate_strings=True),
            nullable=False,
            server_default=TaskStatus.PENDING.value,
        ),
    )
    assigned_to: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    customer_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )


class Task(TaskBase, TimestampMixin, table=True):
    """Persistent task model."""

    __tablename__ = "tasks"
    __table_args__ = (
        sa.CheckConstraint("length(title) > 0", name="ck_tasks_title_length"),
        sa.Index("ix_tasks_assigned_to", "assigned_to"),
        sa.Index("ix_tasks_customer_id", "customer_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    assignee: "User" = Relationship(back_populates="tasks")
    customer: "Customer" = Relationship(back_populates="tasks")


__all__ = ["Task", "TaskBase", "TaskStatus"]
