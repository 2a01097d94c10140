"""Generic async repository shared by the entity repositories."""

from __future__ import annotations

from typing import Generic, TypeVar

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import ConflictError, is_unique_violation

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """CRUD helpers for one table-backed model bound to one session."""

    def __init__(self, session: AsyncSession, model_type: type[ModelType]) -> None:
        self._session = session
        self._model_type = model_type

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def get(self, entity_id: int) -> ModelType | None:
        return await self._session.get(self._model_type, entity_id)

    async def list(self) -> list[ModelType]:
        """Return every row in primary-key order."""
        primary_key = sa.inspect(self._model_type).primary_key
        result = await self._session.execute(select(self._model_type).order_by(*primary_key))
        return list(result.scalars().all())

    async def add(self, instance: ModelType) -> ModelType:
        """Stage ``instance`` and flush so it receives its id."""
        self._session.add(instance)
        await self._session.flush()
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self._session.delete(instance)
        await self._session.flush()

    async def refresh(self, instance: ModelType) -> ModelType:
        await self._session.refresh(instance)
        return instance

    async def save(self, instance: ModelType, *, conflict_message: str) -> ModelType:
        """Commit ``instance`` and reload it.

        Any integrity failure rolls the session back. Only a unique-constraint
        violation surfaces as ``ConflictError(conflict_message)``; the rest
        propagate unchanged.
        """
        try:
            self._session.add(instance)
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            if is_unique_violation(exc):
                raise ConflictError(conflict_message) from exc
            raise
        return await self.refresh(instance)


__all__ = ["BaseRepository", "ModelType"]
