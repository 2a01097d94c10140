"""Entry point for the Mini CRM FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .db.session import dispose_engine
from .errors import register_exception_handlers
from .schemas.system import RootResponse

logger = logging.getLogger(__name__)


def _normalise_prefix(raw_prefix: str) -> str:
    prefix = raw_prefix.strip()
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    prefix = prefix.rstrip("/")
    return "" if prefix == "/" else prefix


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    settings: Settings = application.state.settings
    logger.info(
        "Mini CRM API starting",
        extra={"environment": settings.environment, "api_prefix": settings.api_prefix},
    )
    try:
        yield
    finally:
        await dispose_engine()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = settings or get_settings()
    configure_logging(settings)

    router_prefix = _normalise_prefix(settings.api_prefix)

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Customers, employees and the tasks that connect them.",
        docs_url="/api-docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=_lifespan,
    )

    application.state.settings = settings

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    application.include_router(api_router, prefix=router_prefix)
    application.include_router(health_router)

    @application.get("/", response_model=RootResponse, tags=["system"], summary="Service metadata")
    async def read_root() -> RootResponse:
        """Confirm the service is running and describe it."""
        return RootResponse(
            message=f"{settings.project_name} is running",
            name=settings.project_name,
            environment=settings.environment,
            version=settings.version,
            api_prefix=router_prefix,
        )

    register_exception_handlers(application)
    return application


app = create_app()


def run() -> None:
    """Convenience entry point for the ``mini-crm`` console script."""

    settings: Settings = get_settings()
    uvicorn.run(
        "mini_crm.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":  # pragma: no cover
    run()
