"""Prometheus metrics for API service.

Exposes key metrics for monitoring:
- Request counts by endpoint and status
- Request duration histograms
- Invoice generation outcomes
- PDF render latency and output size

Based on Prometheus best practices:
https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import Counter, Histogram, generate_latest
from prometheus_client.openmetrics.exposition import CONTENT_TYPE_LATEST

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Invoice generation metrics
invoices_generated_total = Counter(
    "invoices_generated_total",
    "Total invoice generation requests",
    ["status"],  # success, invalid_json, render_failed
)

pdf_render_duration_seconds = Histogram(
    "pdf_render_duration_seconds",
    "PDF render duration in seconds",
    ["renderer"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)

pdf_size_bytes = Histogram(
    "pdf_size_bytes",
    "Generated PDF size in bytes",
    buckets=(10240, 51200, 102400, 512000, 1048576, 5242880),  # 10KB to 5MB
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics bytes, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
