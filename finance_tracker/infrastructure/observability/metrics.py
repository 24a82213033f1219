"""Prometheus metrics for authentication outcomes, transaction activity and request latency"""

from prometheus_client import Counter, Histogram

# Auth metrics
auth_event_counter = Counter(
    "auth_events_total",
    "Authentication attempts by event and outcome",
    ["event", "outcome"],  # event: register | login | token; outcome: success | <failure reason>
)

# Transaction metrics
transaction_operation_counter = Counter(
    "transaction_operations_total",
    "Transaction records created, updated or deleted",
    ["kind", "operation"],  # kind: income | expense
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_auth_event(event: str, outcome: str = "success") -> None:
    auth_event_counter.labels(event=event, outcome=outcome).inc()


def record_transaction_operation(kind: str, operation: str) -> None:
    transaction_operation_counter.labels(kind=kind, operation=operation).inc()
