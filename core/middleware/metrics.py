"""
Metrics middleware for Prometheus.

Records HTTP request metrics for monitoring.
"""
import re
import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import (
    http_request_duration_seconds,
    http_requests_total,
)

# Path segments that carry identifiers, collapsed to keep label cardinality bounded
_ACTIVATION_FILE_PATH = re.compile(r"/activation-file/[^/]+")
_NUMERIC_ID = re.compile(r"/\d+")


def normalize_endpoint(path: str) -> str:
    endpoint = path.split("?")[0]
    endpoint = _ACTIVATION_FILE_PATH.sub("/activation-file/{sn}", endpoint)
    return _NUMERIC_ID.sub("/{id}", endpoint)


class MetricsMiddleware:
    """
    Middleware to record HTTP metrics for Prometheus.

    Records:
    - Request count by method, endpoint, status
    - Request duration histogram
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and record metrics."""
        start_time = time.time()
        endpoint = normalize_endpoint(request.path)
        status_code = 500

        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            http_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
            ).inc()
            http_request_duration_seconds.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(time.time() - start_time)
