from __future__ import annotations

from collections.abc import Iterable, Mapping

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from prometheus_client.metrics_core import Metric


HTTP_LABELS = ("method", "route", "status_code")
DURATION_BUCKETS = (0.1, 0.3, 0.5, 0.7, 1, 3, 5, 7, 10)


class DefaultLabelsRegistry(CollectorRegistry):
    """Registry that stamps a fixed label set onto every sample it exposes."""

    def __init__(self, default_labels: Mapping[str, str]) -> None:
        super().__init__(auto_describe=True)
        self.default_labels = dict(default_labels)

    def collect(self) -> Iterable[Metric]:
        for metric in super().collect():
            # Sample labels win on conflict.
            metric.samples = [
                sample._replace(labels={**self.default_labels, **sample.labels})
                for sample in metric.samples
            ]
            yield metric


class HttpMetrics:
    """Process-local HTTP metrics (resets on restart), one registry per app."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, app_label: str = "web-app", *, process_metrics: bool = True) -> None:
        self.registry = DefaultLabelsRegistry({"app": app_label})

        if process_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            HTTP_LABELS,
            registry=self.registry,
        )
        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            HTTP_LABELS,
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )

    def observe_http_request(
        self,
        *,
        method: str,
        route: str,
        status_code: int,
        elapsed_seconds: float,
    ) -> None:
        labels = {"method": method, "route": route, "status_code": str(status_code)}
        self.http_requests_total.labels(**labels).inc()
        self.http_request_duration_seconds.labels(**labels).observe(elapsed_seconds)

    def render(self) -> bytes:
        return generate_latest(self.registry)
