from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.storehub.core.config import settings


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    def __init__(self) -> None:
        self.enabled = settings.METRICS_ENABLED
        self._registry = None
        self._http_requests_total = None
        self._http_request_duration_ms = None
        self._security_events_total = None
        self._rate_limited_total = None
        self._audit_write_failures_total = None
        if self.enabled:
            self._initialize_registry()

    def _initialize_registry(self) -> None:
        self._registry = CollectorRegistry()
        self._http_requests_total = Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            ["route", "method", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            ["route", "method", "status"],
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )
        self._security_events_total = Counter(
            "security_events_total",
            "Security events by name and severity.",
            ["event", "severity"],
            registry=self._registry,
        )
        self._rate_limited_total = Counter(
            "rate_limited_total",
            "Requests rejected by the per-IP rate limiter.",
            registry=self._registry,
        )
        self._audit_write_failures_total = Counter(
            "audit_write_failures_total",
            "Audit log entries that could not be persisted.",
            registry=self._registry,
        )

    def reset(self) -> None:
        if not self.enabled:
            return
        self._initialize_registry()

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def increment_security_event(self, event: str, severity: str) -> None:
        if not self.enabled:
            return
        self._security_events_total.labels(event=event, severity=severity).inc()

    def increment_rate_limited(self) -> None:
        if not self.enabled:
            return
        self._rate_limited_total.inc()

    def increment_audit_write_failure(self) -> None:
        if not self.enabled:
            return
        self._audit_write_failures_total.inc()

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
