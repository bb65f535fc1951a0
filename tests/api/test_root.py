from __future__ import annotations

from datetime import UTC, datetime

from fastapi.testclient import TestClient

from request_logger.core.config import SERVICE_VERSION


def test_root_returns_service_info(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"]
    assert body["data"]["version"] == SERVICE_VERSION
    assert body["data"]["environment"] == "test"
    assert body["data"]["pod_name"] == "test-pod"
    assert body["data"]["database"] == "PostgreSQL"


def test_root_timestamp_is_current(client: TestClient) -> None:
    sent_at = datetime.now(UTC).replace(microsecond=0)
    resp = client.get("/")
    stamp = datetime.fromisoformat(resp.json()["timestamp"])
    assert stamp >= sent_at


def test_root_does_not_touch_storage(client: TestClient, repo) -> None:
    repo.fail_with = "database is down"
    resp = client.get("/")
    assert resp.status_code == 200
