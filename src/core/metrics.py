"""Prometheus metrics for the Store Credit ledger service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- storecredit_ledger_transactions_total: Ledger transactions by type
- storecredit_ledger_amount_total: Summed ledger amounts by type
- storecredit_rejected_operations_total: Purchases/payments/fees refused, by reason
- storecredit_credit_requests_total: Credit requests by outcome

Technical Metrics (for Engineering/SRE):
- storecredit_batch_runs_total: Interest / late-fee batch runs
- storecredit_batch_account_failures_total: Accounts that failed inside a batch
- storecredit_batch_latency_seconds: Batch duration
- storecredit_directory_fetch_latency_seconds: Directory API latency
- storecredit_directory_fetch_failures_total: Directory API failures
- storecredit_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from decimal import Decimal
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

ledger_transactions_total = Counter(
    "storecredit_ledger_transactions_total",
    "Total number of ledger transactions written",
    ["type"],  # PURCHASE, PAYMENT, INTEREST_ACCRUAL, ...
)

ledger_amount_total = Counter(
    "storecredit_ledger_amount_total",
    "Absolute amount moved through the ledger",
    ["type"],
)

rejected_operations_total = Counter(
    "storecredit_rejected_operations_total",
    "Ledger operations refused by a business rule",
    ["operation", "reason"],
)

credit_requests_total = Counter(
    "storecredit_credit_requests_total",
    "Credit requests by outcome",
    ["outcome"],  # created, approved, rejected
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

batch_runs_total = Counter(
    "storecredit_batch_runs_total",
    "Total number of batch runs",
    ["job"],  # interest, late_fees
)

batch_account_failures = Counter(
    "storecredit_batch_account_failures_total",
    "Accounts that failed inside a batch run",
    ["job", "error"],
)

batch_latency = Histogram(
    "storecredit_batch_latency_seconds",
    "Batch run duration in seconds",
    ["job"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

directory_fetch_latency = Histogram(
    "storecredit_directory_fetch_latency_seconds",
    "Directory API fetch latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

directory_fetch_total = Counter(
    "storecredit_directory_fetch_total",
    "Total number of directory API requests",
    ["resource", "status"],  # client/establishment, success/failure
)

directory_fetch_failures = Counter(
    "storecredit_directory_fetch_failures_total",
    "Total number of directory API failures",
    ["resource", "error_type"],  # timeout, error, not_found
)

http_requests_total = Counter(
    "storecredit_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "storecredit_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_ledger_transaction(transaction_type: str, amount: Decimal) -> None:
    """Record a committed ledger transaction."""
    ledger_transactions_total.labels(type=transaction_type).inc()
    ledger_amount_total.labels(type=transaction_type).inc(float(abs(amount)))


def record_rejected_operation(operation: str, reason: str) -> None:
    rejected_operations_total.labels(operation=operation, reason=reason).inc()


def record_credit_request(outcome: str) -> None:
    credit_requests_total.labels(outcome=outcome).inc()


def record_batch_run(job: str) -> None:
    batch_runs_total.labels(job=job).inc()


def record_batch_failure(job: str, error: str) -> None:
    """Record one account that failed inside a batch."""
    batch_account_failures.labels(job=job, error=error).inc()


@contextmanager
def track_batch_latency(job: str) -> Generator[None, None, None]:
    """Context manager to track batch duration."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        batch_latency.labels(job=job).observe(duration)


@contextmanager
def track_directory_fetch_latency() -> Generator[None, None, None]:
    """Context manager to track directory API fetch latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        directory_fetch_latency.observe(duration)


def record_directory_fetch_success(resource: str) -> None:
    directory_fetch_total.labels(resource=resource, status="success").inc()


def record_directory_fetch_failure(resource: str, error_type: str) -> None:
    """Record a directory API fetch failure."""
    directory_fetch_total.labels(resource=resource, status="failure").inc()
    directory_fetch_failures.labels(resource=resource, error_type=error_type).inc()


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
