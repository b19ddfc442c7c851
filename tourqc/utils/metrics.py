"""Prometheus metrics for engine operations."""

from prometheus_client import Counter, Histogram

# Aggregation metrics
aggregation_latency_ms = Histogram(
    "qc_aggregation_latency_ms",
    "Engine operation latency in milliseconds",
    ["operation"],
    buckets=[0.5, 1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

validation_failures_total = Counter(
    "qc_validation_failures_total",
    "Total rejected caller inputs",
    ["kind"],
)

corrective_actions_recorded_total = Counter(
    "qc_corrective_actions_recorded_total",
    "Total corrective actions appended",
)

lookup_misses_total = Counter(
    "qc_lookup_misses_total",
    "Total id lookups that resolved to no entity",
    ["entity"],
)


class PrometheusEngineMetrics:
    """Prometheus-based engine metrics implementation."""

    def record_latency(self, operation: str, latency_ms: float) -> None:
        """Record engine operation latency."""
        aggregation_latency_ms.labels(operation=operation).observe(latency_ms)

    def inc_validation_failure(self, kind: str) -> None:
        """Increment rejected-input counter."""
        validation_failures_total.labels(kind=kind).inc()

    def inc_corrective_action(self) -> None:
        """Increment recorded corrective action counter."""
        corrective_actions_recorded_total.inc()

    def inc_lookup_miss(self, entity: str) -> None:
        """Increment lookup miss counter."""
        lookup_misses_total.labels(entity=entity).inc()
