"""FastAPI dependencies that hand per-application objects to handlers.

The application factory stores the settings, the repo and the metrics
on `app.state`; handlers receive them through these dependencies and
never import a module-level instance.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from request_logger.core.config import Settings
from request_logger.core.metrics import HttpMetrics
from request_logger.repos.request_log_repo import RequestLogRepo


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repo(request: Request) -> RequestLogRepo:
    return request.app.state.repo


def get_metrics(request: Request) -> HttpMetrics:
    return request.app.state.metrics


SettingsDep = Annotated[Settings, Depends(get_settings)]
RepoDep = Annotated[RequestLogRepo, Depends(get_repo)]
MetricsDep = Annotated[HttpMetrics, Depends(get_metrics)]
