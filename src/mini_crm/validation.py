"""Validate service inputs against their Pydantic schemas."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import InvalidInputError, describe_first_error

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_payload(schema: type[SchemaT], payload: SchemaT | Mapping[str, Any]) -> SchemaT:
    """Return ``payload`` as a ``schema`` instance or raise ``InvalidInputError``.

    Already-parsed instances pass through untouched; mappings are validated and
    the first violated field is reported.
    """
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        field, message = describe_first_error(exc.errors())
        raise InvalidInputError(message, details={"field": field}) from exc


__all__ = ["parse_payload"]
