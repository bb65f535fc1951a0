"""Application metrics using the Prometheus client library.

All metrics live on one HttpMetrics object that owns its own
CollectorRegistry.  The application factory builds one instance and
hands it to the middleware and the /metrics endpoint, so two apps in
the same process (e.g. in tests) never share counters.

  http_requests_total            counter   {method, endpoint, status}
  http_request_duration_seconds  histogram {method, endpoint}
  db_connections_active          gauge     pool connections checked out

Prometheus pulls these by scraping GET /metrics.
"""

from __future__ import annotations

from collections.abc import Callable

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Sub-second through multi-second latencies, same edges as the Go and
# Python client defaults.
DURATION_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class HttpMetrics:
    """Metric inventory for one application instance."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        self.request_count = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["method", "endpoint", "status"],
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )
        self.db_connections_active = Gauge(
            "db_connections_active",
            "Number of active database connections",
            registry=self.registry,
        )

    def observe_request(
        self, method: str, endpoint: str, status: str, duration: float
    ) -> None:
        self.request_count.labels(
            method=method, endpoint=endpoint, status=status
        ).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(
            duration
        )

    def track_connections(self, source: Callable[[], float]) -> None:
        """Evaluate the connections gauge from `source` at scrape time."""
        self.db_connections_active.set_function(source)
