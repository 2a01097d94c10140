"""Metadata registry shared by ``init_db`` and Alembic."""

from __future__ import annotations

from sqlmodel import SQLModel

from .. import models  # noqa: F401  - registers every table on the metadata

metadata = SQLModel.metadata

__all__ = ["SQLModel", "metadata"]
