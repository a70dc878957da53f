"""
Prometheus metrics for the licensing service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_created_total = Counter(
    "licenses_created_total",
    "Total licenses created",
)

licenses_updated_total = Counter(
    "licenses_updated_total",
    "Total licenses updated",
)

licenses_deleted_total = Counter(
    "licenses_deleted_total",
    "Total licenses deleted",
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total license activation requests",
    ["outcome"],
)

duplicate_submissions_rejected_total = Counter(
    "duplicate_submissions_rejected_total",
    "Create requests rejected as duplicates",
    ["reason"],
)

notifications_failed_total = Counter(
    "notifications_failed_total",
    "Credential notifications that exhausted their retries",
    ["reason"],
)

# Auth metrics
sign_ins_total = Counter(
    "sign_ins_total",
    "Sign-in attempts",
    ["outcome"],
)

tokens_renewed_total = Counter(
    "tokens_renewed_total",
    "Token pairs issued through refresh",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
