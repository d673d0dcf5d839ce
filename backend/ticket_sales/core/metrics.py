"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

availability_evaluations = Counter(
    'availability_evaluations_total',
    'Ticket availability evaluations',
    ['outcome']  # available, not_yet_on_sale, sales_closed, sold_out
)

ledger_lookups = Counter(
    'ledger_lookups_total',
    'Booking ledger queries',
    ['operation', 'result']  # sum_booked/occurrence_start, ok/error
)

reservation_attempts = Counter(
    'reservation_attempts_total',
    'Reservation create/update attempts',
    ['status']  # success, rejected, error
)

reservation_lock_wait = Histogram(
    'reservation_lock_wait_seconds',
    'Time spent waiting for a reservation lock',
    ['strategy'],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_availability(outcome: str):
    """Record an availability decision. Outcome: available or an unavailable reason."""
    availability_evaluations.labels(outcome=outcome).inc()


def record_ledger_lookup(operation: str, ok: bool):
    result = "ok" if ok else "error"
    ledger_lookups.labels(operation=operation, result=result).inc()


def record_reservation_attempt(status: str):
    """Record reservation attempt. Status: success, rejected, error"""
    reservation_attempts.labels(status=status).inc()
