from __future__ import annotations

import platform

from fastapi import APIRouter

from request_logger.api.dependencies import SettingsDep
from request_logger.api.schemas import Envelope
from request_logger.core.config import SERVICE_VERSION

router = APIRouter(tags=["info"])


@router.get("/", response_model=Envelope, response_model_exclude_none=True)
async def root(settings: SettingsDep) -> Envelope:
    return Envelope(
        message="Hello from the request logger backend!",
        data={
            "version": SERVICE_VERSION,
            "environment": settings.environment,
            "pod_name": settings.hostname,
            "python_version": platform.python_version(),
            "database": "PostgreSQL",
        },
    )
