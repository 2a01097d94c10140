"""Service layer for customer records."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping

from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import ConflictError
from ..models import Customer
from ..repositories import CustomerRepository
from ..schemas import CustomerCreate, CustomerListParams, CustomerUpdate
from ..validation import parse_payload

logger = logging.getLogger(__name__)

CUSTOMER_CONFLICT_MESSAGE = "Email or phone already exists."
CUSTOMER_NOT_FOUND_MESSAGE = "Customer not found."


@dataclass(slots=True)
class CustomerPage:
    """One page of customers with pagination totals."""

    items: list[Customer]
    page: int
    limit: int
    total_records: int
    total_pages: int


def total_pages_for(total_records: int, limit: int) -> int:
    """Number of pages needed for ``total_records``; never less than one."""
    return max(math.ceil(total_records / limit), 1)


class CustomerService:
    """Create, browse, update and remove customers."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = CustomerRepository(session)

    async def create_customer(self, payload: CustomerCreate | Mapping[str, Any]) -> Customer:
        data = parse_payload(CustomerCreate, payload)
        conflict = await self._repository.find_conflicting(email=data.email, phone=data.phone)
        if conflict is not None:
            raise ConflictError(CUSTOMER_CONFLICT_MESSAGE)
        customer = Customer(
            name=data.name,
            email=data.email,
            phone=data.phone,
            company=data.company,
        )
        await self._repository.save(customer, conflict_message=CUSTOMER_CONFLICT_MESSAGE)
        logger.info("Customer created", extra={"customer_id": customer.id})
        return customer

    async def list_customers(
        self,
        params: CustomerListParams | Mapping[str, Any] | None = None,
    ) -> CustomerPage:
        """Return the requested page ordered by id ascending."""
        options = parse_payload(CustomerListParams, params or {})
        offset = (options.page - 1) * options.limit
        items, total = await self._repository.list_paginated(
            limit=options.limit,
            offset=offset,
            search=options.search,
        )
        return CustomerPage(
            items=items,
            page=options.page,
            limit=options.limit,
            total_records=total,
            total_pages=total_pages_for(total, options.limit),
        )

    async def get_customer(self, customer_id: int) -> Customer | None:
        return await self._repository.get(customer_id)

    async def update_customer(
        self,
        customer_id: int,
        payload: CustomerUpdate | Mapping[str, Any],
    ) -> Customer | None:
        """Apply a partial update; returns ``None`` when the customer does not exist.

        A uniqueness conflict raises ``ConflictError`` before anything is written.
        """
        data = parse_payload(CustomerUpdate, payload)
        customer = await self._repository.get(customer_id)
        if customer is None:
            return None

        changes = data.model_dump(exclude_unset=True)
        new_email = changes.get("email") if changes.get("email") != customer.email else None
        new_phone = changes.get("phone") if changes.get("phone") != customer.phone else None
        if new_email is not None or new_phone is not None:
            conflict = await self._repository.find_conflicting(
                email=new_email,
                phone=new_phone,
                exclude_id=customer_id,
            )
            if conflict is not None:
                raise ConflictError(CUSTOMER_CONFLICT_MESSAGE)

        for field_name, value in changes.items():
            setattr(customer, field_name, value)
        await self._repository.save(customer, conflict_message=CUSTOMER_CONFLICT_MESSAGE)
        logger.info(
            "Customer updated",
            extra={"customer_id": customer.id, "fields": sorted(changes)},
        )
        return customer

    async def delete_customer(self, customer_id: int) -> bool:
        """Delete a customer and its tasks, returning ``True`` if a record was removed."""
        customer = await self._repository.get(customer_id)
        if customer is None:
            return False
        await self._repository.delete(customer)
        await self._session.commit()
        logger.info("Customer deleted", extra={"customer_id": customer_id})
        return True


__all__ = [
    "CUSTOMER_CONFLICT_MESSAGE",
    "CUSTOMER_NOT_FOUND_MESSAGE",
    "CustomerPage",
    "CustomerService",
    "total_pages_for",
]
