"""Common system-level response models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    """Metadata payload returned by the root endpoint."""

    message: str = Field(description="Human readable liveness message")
    name: str = Field(description="Human-friendly service name")
    environment: str = Field(description="Deployment environment identifier")
    version: str = Field(description="Semantic version of the service")
    api_prefix: str = Field(description="Base path for API routes")


class HealthCheckResponse(BaseModel):
    """Payload returned by ``/healthz``."""

    status: Literal["ok", "degraded"] = Field(default="ok", description="Overall service health")
    database: Literal["ok", "unavailable"] = Field(
        default="ok",
        description="Whether the credential store answered a trivial query",
    )


class ErrorResponse(BaseModel):
    """Envelope used for every error response."""

    code: str = Field(description="Stable machine readable error code")
    message: str = Field(description="Human readable description of the failure")
    details: Any | None = Field(default=None, description="Additional context")


__all__ = ["ErrorResponse", "HealthCheckResponse", "RootResponse"]
