"""Customer-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict, EmailStr, Field, StringConstraints, model_validator

from .common import CamelModel, NonBlankStr, OptionalText

PhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]

MAX_PAGE_SIZE = 100
# Largest page whose offset still fits a signed 64-bit SQL integer.
MAX_PAGE = (2**63 - 1) // MAX_PAGE_SIZE + 1

CUSTOMER_READ_EXAMPLE = {
    "id": 1,
    "name": "Acme Buyer",
    "email": "buyer@acme.example.com",
    "phone": "7000000000",
    "company": "Acme",
    "createdAt": "2024-01-01T12:00:00Z",
    "updatedAt": "2024-01-02T08:30:00Z",
}


class CustomerCreate(CamelModel):
    """Payload for creating a new customer."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Acme Buyer",
                "email": "buyer@acme.example.com",
                "phone": "7000000000",
                "company": "Acme",
            }
        }
    )

    name: NonBlankStr
    email: EmailStr
    phone: PhoneStr
    company: OptionalText = Field(default=None, max_length=255)


class CustomerUpdate(CamelModel):
    """Payload for partially updating a customer."""

    model_config = ConfigDict(json_schema_extra={"example": {"phone": "7000000001"}})

    name: NonBlankStr | None = None
    email: EmailStr | None = None
    phone: PhoneStr | None = None
    company: OptionalText = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "CustomerUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        for field_name in ("name", "email", "phone"):
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null.")
        return self


class CustomerRead(CamelModel):
    """Public representation of a customer."""

    model_config = ConfigDict(json_schema_extra={"example": CUSTOMER_READ_EXAMPLE})

    id: int
    name: str
    email: str
    phone: str
    company: str | None = None
    created_at: datetime
    updated_at: datetime


class CustomerSummary(CamelModel):
    """Compact customer view embedded in task payloads."""

    id: int
    name: str
    email: str
    phone: str


class CustomerListParams(CamelModel):
    """Pagination and search options for listing customers."""

    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    limit: int = Field(default=10, ge=1, le=MAX_PAGE_SIZE)
    search: OptionalText = Field(default=None, max_length=255)


class CustomerListResponse(CamelModel):
    """Page of customers plus totals."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "page": 1,
                "limit": 10,
                "totalRecords": 1,
                "totalPages": 1,
                "data": [CUSTOMER_READ_EXAMPLE],
            }
        }
    )

    page: int
    limit: int
    total_records: int
    total_pages: int
    data: list[CustomerRead]


__all__ = [
    "CustomerCreate",
    "CustomerListParams",
    "CustomerListResponse",
    "CustomerRead",
    "CustomerSummary",
    "CustomerUpdate",
]
