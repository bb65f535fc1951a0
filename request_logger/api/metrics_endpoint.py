"""Prometheus metrics endpoint.

Returns plain text in Prometheus exposition format, e.g.:

  # HELP http_requests_total Total number of HTTP requests
  # TYPE http_requests_total counter
  http_requests_total{method="POST",endpoint="/api",status="201"} 17.0
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from request_logger.api.dependencies import MetricsDep

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics(app_metrics: MetricsDep) -> Response:
    """Expose the application's registry in text exposition format."""
    return Response(
        content=generate_latest(app_metrics.registry),
        media_type=CONTENT_TYPE_LATEST,
    )
