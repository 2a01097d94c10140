from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from mini_crm.deps import get_db_session

pytestmark = pytest.mark.asyncio


async def test_health_endpoint_checks_the_database(client: AsyncClient) -> None:
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


async def test_health_endpoint_reports_unreachable_database(app: FastAPI, client: AsyncClient) -> None:
    class _UnreachableSession:
        async def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    async def _broken_session():
        yield _UnreachableSession()

    app.dependency_overrides[get_db_session] = _broken_session

    response = await client.get("/healthz")

    assert response.status_code == 503
    assert response.json() == {"status": "degraded", "database": "unavailable"}


async def test_root_endpoint_reports_metadata(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Mini CRM API is running"
    assert body["version"]
    assert body["environment"] == "test"
    assert body["api_prefix"] == "/api"


async def test_openapi_documents_bearer_security(client: AsyncClient) -> None:
    docs = await client.get("/api-docs")
    schema = (await client.get("/openapi.json")).json()

    assert docs.status_code == 200
    assert "HTTPBearer" in schema["components"]["securitySchemes"]
    assert "/api/customers/{customer_id}" in schema["paths"]


async def test_request_id_is_generated_when_absent(client: AsyncClient) -> None:
    response = await client.get("/healthz")

    assert response.headers["X-Request-ID"]
