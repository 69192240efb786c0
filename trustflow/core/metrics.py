"""Prometheus metrics for the TrustFlow trust score service.

Metrics are organized into two categories:

Business Metrics (for Product/Risk):
- trustflow_trust_score_computed_total: Score computations by outcome
- trustflow_trust_score: Distribution of computed scores
- trustflow_settlement_total: Settlements by outcome
- trustflow_buyer_payment_total: Buyer payments by timeliness

Technical Metrics (for Engineering/SRE):
- trustflow_repository_failures_total: History store failures by operation
- trustflow_repository_latency_seconds: History store call latency
- trustflow_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Risk dashboards)
# =============================================================================

trust_score_computed_total = Counter(
    "trustflow_trust_score_computed_total",
    "Total number of trust score computations",
    ["outcome"],  # full, partial, degraded
)

trust_score_distribution = Histogram(
    "trustflow_trust_score",
    "Distribution of computed trust scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

settlement_total = Counter(
    "trustflow_settlement_total",
    "Total number of invoice settlements recorded",
    ["outcome"],  # succeeded, defaulted
)

buyer_payment_total = Counter(
    "trustflow_buyer_payment_total",
    "Total number of buyer payments recorded",
    ["timeliness"],  # on_time, late
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

repository_failures = Counter(
    "trustflow_repository_failures_total",
    "Total number of history store failures",
    ["operation", "error_type"],  # error_type: timeout, error
)

repository_latency = Histogram(
    "trustflow_repository_latency_seconds",
    "History store call latency in seconds",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

http_requests_total = Counter(
    "trustflow_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "trustflow_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_trust_score(score: int, outcome: str) -> None:
    """Record a trust score computation."""
    trust_score_computed_total.labels(outcome=outcome).inc()
    trust_score_distribution.observe(score)


def record_settlement(succeeded: bool) -> None:
    """Record a settlement in metrics."""
    settlement_total.labels(outcome="succeeded" if succeeded else "defaulted").inc()


def record_buyer_payment(on_time: bool) -> None:
    """Record a buyer payment in metrics."""
    buyer_payment_total.labels(timeliness="on_time" if on_time else "late").inc()


def record_repository_failure(operation: str, error_type: str) -> None:
    """Record a failed history store call."""
    repository_failures.labels(operation=operation, error_type=error_type).inc()


@contextmanager
def track_repository_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track history store latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        repository_latency.labels(operation=operation).observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
