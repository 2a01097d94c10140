"""HTTP middleware."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .context import REQUEST_ID_HEADER, bind_request_id, reset_request_id

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id, echo it back and log the outcome.

    A caller-supplied ``X-Request-ID`` is reused; otherwise a fresh UUID is
    issued. The id is bound for log records for the lifetime of the request.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self.header_name) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            response.headers.setdefault(self.header_name, request_id)
            logger.info(
                "%s %s completed",
                request.method,
                request.url.path,
                extra={"status_code": response.status_code, "duration_ms": round(elapsed_ms, 2)},
            )
            return response
        finally:
            reset_request_id(token)


__all__ = ["CorrelationIdMiddleware"]
