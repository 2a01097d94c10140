"""Service layer encapsulating task assignment and status tracking."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.authorization import TASKS_UPDATE_STATUS, Identity
from ..errors import NotFoundError
from ..models import Task, UserRole
from ..repositories import CustomerRepository, TaskRepository, UserRepository
from ..schemas import TaskCreate, TaskStatusUpdate
from ..validation import parse_payload
from .customers import CUSTOMER_NOT_FOUND_MESSAGE

logger = logging.getLogger(__name__)

ASSIGNEE_INVALID_MESSAGE = "Assigned user must exist and have role EMPLOYEE."
TASK_NOT_FOUND_MESSAGE = "Task not found."


class TaskService:
    """High-level business orchestration for ``Task`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = TaskRepository(session)
        self._user_repository = UserRepository(session)
        self._customer_repository = CustomerRepository(session)

    async def create_task(self, payload: TaskCreate | Mapping[str, Any]) -> Task:
        """Create a task for an employee and a customer that both exist."""
        data = parse_payload(TaskCreate, payload)
        assignee = await self._user_repository.get(data.assigned_to)
        if assignee is None or assignee.role != UserRole.EMPLOYEE:
            raise NotFoundError(ASSIGNEE_INVALID_MESSAGE)
        customer = await self._customer_repository.get(data.customer_id)
        if customer is None:
            raise NotFoundError(CUSTOMER_NOT_FOUND_MESSAGE)

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status,
            assigned_to=data.assigned_to,
            customer_id=data.customer_id,
        )
        await self._repository.add(task)
        task_id = task.id
        await self._session.commit()
        logger.info(
            "Task created",
            extra={"task_id": task_id, "assigned_to": data.assigned_to, "customer_id": data.customer_id},
        )
        return await self._load(task_id)

    async def list_tasks(self, identity: Identity) -> list[Task]:
        """Administrators see every task; employees only those assigned to them."""
        if identity.is_admin:
            return await self._repository.list_detailed()
        return await self._repository.list_detailed(assigned_to=identity.user_id)

    async def update_status(
        self,
        task_id: int,
        identity: Identity,
        payload: TaskStatusUpdate | Mapping[str, Any],
    ) -> Task:
        data = parse_payload(TaskStatusUpdate, payload)
        task = await self._repository.get_detailed(task_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        TASKS_UPDATE_STATUS.authorize_resource(identity, task)

        previous = task.status
        task.status = data.status
        await self._session.commit()
        logger.info(
            "Task status updated",
            extra={"task_id": task_id, "from_status": previous.value, "to_status": data.status.value},
        )
        return await self._load(task_id)

    async def _load(self, task_id: int | None) -> Task:
        task = await self._repository.get_detailed(task_id) if task_id is not None else None
        if task is None:  # pragma: no cover - the row was just written
            raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
        return task


__all__ = ["ASSIGNEE_INVALID_MESSAGE", "TASK_NOT_FOUND_MESSAGE", "TaskService"]
