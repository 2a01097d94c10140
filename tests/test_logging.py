from __future__ import annotations

import io
import json
import logging

import pytest
from httpx import AsyncClient

from mini_crm.core.config import Settings
from mini_crm.core.context import bind_request_id, bind_user_id, reset_request_id, reset_user_id
from mini_crm.core.logging import configure_logging


def _capture_root_handler() -> tuple[logging.StreamHandler, io.StringIO]:
    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)),
        None,
    )
    assert handler is not None, "Expected JSON stream handler to be configured"
    return handler, io.StringIO()


def test_configure_logging_outputs_json_with_request_context() -> None:
    settings = Settings(environment="test", log_level="INFO")
    configure_logging(settings)
    handler, buffer = _capture_root_handler()
    previous_stream = handler.setStream(buffer)

    request_token = bind_request_id("req-json-1")
    user_token = bind_user_id(17)
    try:
        logger = logging.getLogger("mini_crm.tests.logging")
        logger.info("structured log event", extra={"component": "unit-test"})
    finally:
        handler.flush()
        reset_user_id(user_token)
        reset_request_id(request_token)
        handler.setStream(previous_stream)

    log_lines = buffer.getvalue().strip().splitlines()
    assert log_lines, "Expected structured log line to be captured"
    payload = json.loads(log_lines[-1])

    assert payload["message"] == "structured log event"
    assert payload["request_id"] == "req-json-1"
    assert payload["user_id"] == "17"
    assert payload["environment"] == "test"
    assert payload["level"] == "INFO"
    assert payload["component"] == "unit-test"
    assert payload["service"] == settings.project_name


@pytest.mark.asyncio
async def test_service_events_are_logged_with_request_id(client: AsyncClient) -> None:
    configure_logging(Settings(environment="test", log_level="INFO"))
    handler, buffer = _capture_root_handler()
    previous_stream = handler.setStream(buffer)
    try:
        response = await client.post(
            "/api/auth/register",
            json={"name": "Erin", "email": "erin@example.com", "password": "password123", "role": "EMPLOYEE"},
            headers={"X-Request-ID": "req-register"},
        )
    finally:
        handler.flush()
        handler.setStream(previous_stream)

    assert response.status_code == 201
    records = [json.loads(line) for line in buffer.getvalue().strip().splitlines()]
    registered = [record for record in records if record["message"] == "User registered"]
    assert registered
    assert registered[0]["request_id"] == "req-register"
    assert registered[0]["role"] == "EMPLOYEE"
    completed = [record for record in records if record["message"] == "POST /api/auth/register completed"]
    assert completed and completed[0]["status_code"] == 201
