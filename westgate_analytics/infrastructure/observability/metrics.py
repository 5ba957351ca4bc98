"""Prometheus metrics for monitoring record fetches, view computation and threshold commits"""

from prometheus_client import Counter, Histogram

# Record store metrics
records_fetched_counter = Counter(
    "westgate_records_fetched_total",
    "Loan records loaded from the record source",
    ["source"],  # supabase | mock
)

record_fetch_failures_counter = Counter(
    "westgate_record_fetch_failures_total",
    "Failed record store queries",
)

# Computation metrics
view_counter = Counter(
    "westgate_view_total",
    "Dashboard views computed",
    ["mode"],  # historical | simulation | threshold-grid
)

sweep_duration_histogram = Histogram(
    "westgate_sweep_duration_seconds",
    "Threshold matrix computation time",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Threshold commits
threshold_save_counter = Counter(
    "westgate_threshold_save_total",
    "Threshold commit attempts",
    ["outcome"],  # saved | forbidden
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_view(mode: str) -> None:
    """Count a computed view by display mode"""
    view_counter.labels(mode=mode).inc()
