"""Task assignment and status endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from ...core.authorization import TASKS_CREATE, TASKS_READ, TASKS_UPDATE_STATUS, Identity
from ...deps import DatabaseSessionDependency, require_identity
from ...schemas import TaskCreate, TaskRead, TaskStatusUpdate
from ...services import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create and assign a task",
)
async def create_task(
    payload: TaskCreate,
    session: DatabaseSessionDependency,
    _: Annotated[Identity, Depends(require_identity(TASKS_CREATE))],
) -> TaskRead:
    task = await TaskService(session).create_task(payload)
    return TaskRead.model_validate(task)


@router.get("", response_model=list[TaskRead], summary="List visible tasks")
async def list_tasks(
    session: DatabaseSessionDependency,
    identity: Annotated[Identity, Depends(require_identity(TASKS_READ))],
) -> list[TaskRead]:
    tasks = await TaskService(session).list_tasks(identity)
    return [TaskRead.model_validate(task) for task in tasks]


@router.patch("/{task_id}/status", response_model=TaskRead, summary="Change a task's status")
async def update_task_status(
    task_id: Annotated[int, Path(ge=1)],
    payload: TaskStatusUpdate,
    session: DatabaseSessionDependency,
    identity: Annotated[Identity, Depends(require_identity(TASKS_UPDATE_STATUS))],
) -> TaskRead:
    task = await TaskService(session).update_status(task_id, identity, payload)
    return TaskRead.model_validate(task)
