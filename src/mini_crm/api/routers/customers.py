"""Customer management endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from ...core.authorization import CUSTOMERS_READ, CUSTOMERS_WRITE, Identity
from ...deps import DatabaseSessionDependency, require_identity
from ...errors import NotFoundError
from ...schemas import (
    CustomerCreate,
    CustomerListParams,
    CustomerListResponse,
    CustomerRead,
    CustomerUpdate,
)
from ...schemas.customer import MAX_PAGE, MAX_PAGE_SIZE
from ...services import CustomerService
from ...services.customers import CUSTOMER_NOT_FOUND_MESSAGE

router = APIRouter(prefix="/customers", tags=["customers"])

ReaderDependency = Annotated[Identity, Depends(require_identity(CUSTOMERS_READ))]
WriterDependency = Annotated[Identity, Depends(require_identity(CUSTOMERS_WRITE))]
CustomerIdPath = Annotated[int, Path(ge=1, description="Customer identifier.")]

PageQuery = Annotated[int, Query(ge=1, le=MAX_PAGE, description="1-based page number.")]
LimitQuery = Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Number of customers per page.")]
SearchQuery = Annotated[
    str | None,
    Query(max_length=255, description="Case-insensitive match on name, email or company."),
]


@router.post(
    "",
    response_model=CustomerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer",
)
async def create_customer(
    payload: CustomerCreate,
    session: DatabaseSessionDependency,
    _: WriterDependency,
) -> CustomerRead:
    customer = await CustomerService(session).create_customer(payload)
    return CustomerRead.model_validate(customer)


@router.get("", response_model=CustomerListResponse, summary="List customers page by page")
async def list_customers(
    session: DatabaseSessionDependency,
    _: ReaderDependency,
    page: PageQuery = 1,
    limit: LimitQuery = 10,
    search: SearchQuery = None,
) -> CustomerListResponse:
    result = await CustomerService(session).list_customers(
        CustomerListParams(page=page, limit=limit, search=search)
    )
    return CustomerListResponse(
        page=result.page,
        limit=result.limit,
        total_records=result.total_records,
        total_pages=result.total_pages,
        data=[CustomerRead.model_validate(customer) for customer in result.items],
    )


@router.get("/{customer_id}", response_model=CustomerRead, summary="Fetch a customer")
async def read_customer(
    customer_id: CustomerIdPath,
    session: DatabaseSessionDependency,
    _: ReaderDependency,
) -> CustomerRead:
    customer = await CustomerService(session).get_customer(customer_id)
    if customer is None:
        raise NotFoundError(CUSTOMER_NOT_FOUND_MESSAGE)
    return CustomerRead.model_validate(customer)


@router.patch("/{customer_id}", response_model=CustomerRead, summary="Update a customer")
async def update_customer(
    customer_id: CustomerIdPath,
    payload: CustomerUpdate,
    session: DatabaseSessionDependency,
    _: WriterDependency,
) -> CustomerRead:
    customer = await CustomerService(session).update_customer(customer_id, payload)
    if customer is None:
        raise NotFoundError(CUSTOMER_NOT_FOUND_MESSAGE)
    return CustomerRead.model_validate(customer)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a customer and its tasks",
)
async def delete_customer(
    customer_id: CustomerIdPath,
    session: DatabaseSessionDependency,
    _: WriterDependency,
) -> Response:
    removed = await CustomerService(session).delete_customer(customer_id)
    if not removed:
        raise NotFoundError(CUSTOMER_NOT_FOUND_MESSAGE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
