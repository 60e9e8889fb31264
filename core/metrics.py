"""
Prometheus metrics for the activation server.

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

# Mutation metrics
mutations_total = Counter(
    "mutations_total",
    "Total committed mutations",
    ["module", "action"],
)

audit_records_total = Counter(
    "audit_records_total",
    "Total audit records written",
    ["module", "action"],
)

audit_failures_total = Counter(
    "audit_failures_total",
    "Mutations rolled back because their audit record could not be written",
    ["module"],
)

authorization_denials_total = Counter(
    "authorization_denials_total",
    "Total denied authorization decisions",
    ["level"],
)

# Activation file metrics
activation_artifacts_issued_total = Counter(
    "activation_artifacts_issued_total",
    "Total activation files issued",
)

activation_artifact_failures_total = Counter(
    "activation_artifact_failures_total",
    "Total activation file build failures",
    ["stage"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
