"""Prometheus metrics describing metricbadge's own traffic.

Collectors are module level and registered once on the default registry.
Exposed by the API at /-/metrics. Label values are bounded: metric labels are
catalog names or "unknown", format and style labels are enum values.
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

metrics_served_total = Counter(
    "metricbadge_metrics_served_total",
    "Total number of metrics served",
    ["metric", "format", "style", "status"],
)

metric_duration_seconds = Histogram(
    "metricbadge_metric_duration_seconds",
    "Duration taken to process metrics",
    ["metric", "format", "style"],
)

# Unlabeled: requested names are caller input and not bounded by the catalog
metrics_not_found_total = Counter(
    "metricbadge_metrics_not_found_total",
    "Total number of requests for metrics that are not configured",
)

metric_errors_total = Counter(
    "metricbadge_metric_errors_total",
    "Total number of errors encountered while processing metrics",
    ["metric", "error"],
)


def record_request(metric: str, format: str, style: str, status: int, duration: float) -> None:
    metric = metric or "unknown"
    metric_duration_seconds.labels(metric=metric, format=format, style=style).observe(duration)
    metrics_served_total.labels(
        metric=metric, format=format, style=style, status=str(status)
    ).inc()


def record_not_found() -> None:
    metrics_not_found_total.inc()


def record_error(metric: str, error: str) -> None:
    metric_errors_total.labels(metric=metric or "unknown", error=error).inc()


def exposition() -> tuple[bytes, str]:
    """Return the metrics body and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
