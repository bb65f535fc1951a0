"""Tests for the request context middleware.

Verifies that every response gets an X-Request-ID header (generated or
echoed from the request) and that completion is logged.
"""

from __future__ import annotations

import logging
import uuid

import pytest
from fastapi.testclient import TestClient


def test_request_id_generated_when_not_provided(client: TestClient) -> None:
    resp = client.get("/health")
    req_id = resp.headers.get("x-request-id")
    assert req_id is not None
    uuid.UUID(req_id)  # raises ValueError if invalid


def test_request_id_echoed_when_provided(client: TestClient) -> None:
    custom_id = "my-custom-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": custom_id})
    assert resp.headers.get("x-request-id") == custom_id


def test_request_id_present_on_error_responses(client: TestClient) -> None:
    resp = client.get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.headers.get("x-request-id") is not None


def test_completion_is_logged_with_context(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(
        logging.INFO, logger="request_logger.middleware.request_context"
    ):
        client.post("/api", headers={"X-Request-ID": "req-42"})

    records = [r for r in caplog.records if getattr(r, "request_id", None) == "req-42"]
    assert records
    record = records[-1]
    assert record.method == "POST"
    assert record.path == "/api"
    assert record.status_code == 201
