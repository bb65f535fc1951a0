from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from request_logger.api.health import router as health_router
from request_logger.api.metrics_endpoint import router as metrics_router
from request_logger.api.request_log import router as request_log_router
from request_logger.api.root import router as root_router
from request_logger.core.config import (
    SERVICE_NAME,
    SERVICE_VERSION,
    ConfigError,
    Settings,
    load_settings,
)
from request_logger.core.logging import setup_logging
from request_logger.core.metrics import HttpMetrics
from request_logger.middleware.metrics import MetricsMiddleware
from request_logger.middleware.request_context import RequestContextMiddleware
from request_logger.repos.pg_request_log_repo import PgRequestLogRepo
from request_logger.repos.request_log_repo import RequestLogRepo, StartupError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    repo: RequestLogRepo = app.state.repo

    # Any failure here is fatal: uvicorn aborts startup and the process exits.
    try:
        await repo.connect()
        await repo.ensure_schema()
    except StartupError:
        logger.critical("Database startup failed", exc_info=True)
        await repo.close()
        raise

    logger.info(
        "Connected to PostgreSQL at %s:%d/%s",
        settings.db_host,
        settings.db_port,
        settings.db_name,
    )
    try:
        yield
    finally:
        await repo.close()
        logger.info("Database connections closed")


def create_app(
    settings: Settings,
    repo: RequestLogRepo | None = None,
    metrics: HttpMetrics | None = None,
) -> FastAPI:
    """Build the application around one repo and one metrics registry.

    Without an explicit `repo` a PostgreSQL repo is built from `settings`;
    tests pass an InMemoryRequestLogRepo instead.
    """
    if repo is None:
        repo = PgRequestLogRepo.from_settings(settings)
    if metrics is None:
        metrics = HttpMetrics()
    metrics.track_connections(repo.active_connections)

    app = FastAPI(
        title=SERVICE_NAME,
        version=SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.settings = settings
    app.state.repo = repo
    app.state.metrics = metrics

    # Middleware execution order: last-added runs first (outermost layer).
    # RequestContext (outermost) → Metrics → route handler
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(root_router)
    app.include_router(request_log_router)
    app.include_router(health_router)
    app.include_router(metrics_router)
    return app


def run() -> None:
    """Console entry point: load settings, configure logging, serve."""
    try:
        settings = load_settings()
    except ConfigError as e:
        setup_logging("info")
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)

    setup_logging(settings.log_level, json_format=settings.log_json)
    logger.info(
        "%s %s starting  env=%s port=%d log_level=%s",
        SERVICE_NAME,
        SERVICE_VERSION,
        settings.environment,
        settings.port,
        settings.log_level,
    )
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
