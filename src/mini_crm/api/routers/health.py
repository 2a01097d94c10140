"""Liveness probe that also checks the credential store."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ...deps import DatabaseSessionDependency
from ...schemas.system import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get(
    "/healthz",
    response_model=HealthCheckResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthCheckResponse}},
    summary="Health check",
)
async def read_health(session: DatabaseSessionDependency, response: Response) -> HealthCheckResponse:
    """Report ``ok`` when ``SELECT 1`` succeeds, otherwise ``degraded`` with a 503."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database unreachable during health check", exc_info=True)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthCheckResponse(status="degraded", database="unavailable")
    return HealthCheckResponse(status="ok", database="ok")
