from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from request_logger.core.config import Settings
from request_logger.core.metrics import HttpMetrics
from request_logger.main import create_app
from request_logger.repos.request_log_repo import InMemoryRequestLogRepo


def make_settings(**overrides) -> Settings:
    values = {
        "db_host": "localhost",
        "db_port": 5432,
        "db_user": "api_gateway_app",
        "db_password": "s3cret",
        "db_name": "api_gateway_db",
        "db_sslmode": "disable",
        "port": 3000,
        "environment": "test",
        "hostname": "test-pod",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def repo() -> InMemoryRequestLogRepo:
    return InMemoryRequestLogRepo()


@pytest.fixture
def metrics() -> HttpMetrics:
    # Fresh registry per test, so counters start at zero
    return HttpMetrics()


@pytest.fixture
def app(
    settings: Settings, repo: InMemoryRequestLogRepo, metrics: HttpMetrics
) -> FastAPI:
    return create_app(settings, repo=repo, metrics=metrics)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c
