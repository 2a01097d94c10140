"""Repository for interacting with task persistence models."""

from __future__ import annotations

from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Concrete repository encapsulating ``Task`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    def _detailed(self):
        return (
            select(Task)
            .options(selectinload(Task.assignee), selectinload(Task.customer))  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
        )

    async def get_detailed(self, task_id: int) -> Task | None:
        """Return a task with its assignee and customer eagerly loaded."""
        result = await self.session.execute(self._detailed().where(Task.id == task_id))
        return result.scalars().first()

    async def list_detailed(self, *, assigned_to: int | None = None) -> list[Task]:
        """Return tasks ordered by id, optionally only those assigned to one user."""
        query = self._detailed()
        if assigned_to is not None:
            query = query.where(Task.assigned_to == assigned_to)
        result = await self.session.execute(query.order_by(Task.id))
        return list(result.scalars().all())


__all__ = ["TaskRepository"]
