"""Customer domain models built with SQLModel."""

from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from .common import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .task import Task


class CustomerBase(SQLModel, table=False):
    """Shared attributes for customer models."""

    name: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    email: str = Field(
        max_length=320,
        sa_column=sa.Column(sa.String(length=320), nullable=False, unique=True),
    )
    phone: str = Field(
        max_length=64,
        sa_column=sa.Column(sa.String(length=64), nullable=False, unique=True),
    )
    company: str | None = Field(
        default=None,
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=True),
    )


class Customer(CustomerBase, TimestampMixin, table=True):
    """Persistent customer model."""

    __tablename__ = "customers"

    id: int | None = Field(default=None, primary_key=True)
    tasks: list["Task"] = Relationship(
        back_populates="customer",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


__all__ = ["Customer", "CustomerBase"]
