"""Repository for customer persistence."""

from __future__ import annotations

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Customer
from .base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Persistence helpers for ``Customer`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Customer)

    async def list_paginated(
        self,
        *,
        limit: int = 10,
        offset: int = 0,
        search: str | None = None,
    ) -> tuple[list[Customer], int]:
        """Return one page of customers ordered by id along with the filtered total."""
        query = select(Customer)
        count_query = select(func.count()).select_from(Customer)
        if search:
            term = search.lower()
            condition = or_(
                func.lower(Customer.name).contains(term, autoescape=True),
                func.lower(Customer.email).contains(term, autoescape=True),
                func.lower(Customer.company).contains(term, autoescape=True),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)
        query = query.order_by(Customer.id).limit(limit).offset(offset)
        result = await self.session.execute(query)
        customers = list(result.scalars().all())
        total_result = await self.session.execute(count_query)
        total = int(total_result.scalar_one())
        return customers, total

    async def find_conflicting(
        self,
        *,
        email: str | None = None,
        phone: str | None = None,
        exclude_id: int | None = None,
    ) -> Customer | None:
        """Return another customer already holding ``email`` or ``phone``."""
        clauses = []
        if email is not None:
            clauses.append(Customer.email == email)
        if phone is not None:
            clauses.append(Customer.phone == phone)
        if not clauses:
            return None
        query = select(Customer).where(or_(*clauses))
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalars().first()


__all__ = ["CustomerRepository"]
