"""Prometheus metrics middleware: instruments every HTTP request.

For each request this middleware:
  1. Times the request with a monotonic clock
  2. Captures the response status from the first `http.response.start`
     message the application sends
  3. On completion: increments http_requests_total (by method/endpoint/
     status) and observes the duration in http_request_duration_seconds

This is a plain ASGI middleware rather than a BaseHTTPMiddleware: the
status is observed by wrapping the `send` callable, so streaming
responses and handler exceptions are seen exactly as the server sees
them.

The endpoint label is the matched route template (e.g. "/api"), which the
router leaves in `scope["route"]`.  Requests that match no route share
the single UNMATCHED_ENDPOINT label, so arbitrary URLs cannot add series.
"""

from __future__ import annotations

import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from request_logger.core.metrics import HttpMetrics

UNMATCHED_ENDPOINT = "<unmatched>"


class _StatusRecorder:
    """Wraps an ASGI `send` and remembers the first status code sent."""

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status: int | None = None

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start" and self.status is None:
            self.status = message["status"]
        await self._send(message)


def _endpoint_label(scope: Scope) -> str:
    route = scope.get("route")
    template = getattr(route, "path_format", None) or getattr(route, "path", None)
    return template or UNMATCHED_ENDPOINT


class MetricsMiddleware:
    """Collect Prometheus metrics for every HTTP request."""

    def __init__(self, app: ASGIApp, metrics: HttpMetrics) -> None:
        self.app = app
        self.metrics = metrics

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        recorder = _StatusRecorder(send)
        start = time.monotonic()
        failed = False

        try:
            await self.app(scope, receive, recorder)
        except Exception:
            # Starlette's outer error middleware turns this into a 500
            failed = True
            raise
        finally:
            if recorder.status is not None:
                status = str(recorder.status)
            else:
                status = "500" if failed else "200"
            self.metrics.observe_request(
                method=scope["method"],
                endpoint=_endpoint_label(scope),
                status=status,
                duration=time.monotonic() - start,
            )
