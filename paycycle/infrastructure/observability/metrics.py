"""Prometheus metrics for monitoring projections, amounts owed and receipt extraction"""

from prometheus_client import Counter, Histogram

# Projection metrics
projection_counter = Counter(
    "paycycle_projection_total",
    "Total card payment projections computed",
    ["scope"],  # card | upcoming | personal_day | history
)

projected_amount_bucket_counter = Counter(
    "paycycle_projected_amount_bucket",
    "Projected card payments by amount bucket",
    ["bucket"],  # $0, $0-$100, $100-$1000, $1000+
)

# Receipt extraction metrics
extraction_latency_histogram = Histogram(
    "text_extraction_latency_seconds",
    "Text extraction service response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

extraction_failures_counter = Counter(
    "text_extraction_failures_total",
    "Failed text extraction calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_projection(scope: str, total_amount_cents: int) -> None:
    """Record projection metrics for monitoring amounts owed"""
    projection_counter.labels(scope=scope).inc()

    # Bucket amounts for distribution analysis
    if total_amount_cents == 0:
        bucket = "$0"
    elif total_amount_cents <= 10_000:
        bucket = "$0-$100"
    elif total_amount_cents <= 100_000:
        bucket = "$100-$1000"
    else:
        bucket = "$1000+"

    projected_amount_bucket_counter.labels(bucket=bucket).inc()
