"""Audit timestamps shared by the CRM tables."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp_field(*, touch_on_update: bool) -> Any:
    column_kwargs: dict[str, Any] = {"server_default": sa.func.now()}
    if touch_on_update:
        column_kwargs["onupdate"] = utcnow
    return Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs=column_kwargs,
    )


class TimestampMixin(SQLModel, table=False):
    """``created_at`` and ``updated_at`` for users, customers and tasks.

    ``updated_at`` is stamped by the ORM on every UPDATE flushed through a
    session, so role changes, customer edits and task status moves all bump it.
    """

    created_at: datetime = _timestamp_field(touch_on_update=False)
    updated_at: datetime = _timestamp_field(touch_on_update=True)


__all__ = ["TimestampMixin", "utcnow"]
