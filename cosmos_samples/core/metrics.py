"""
Request charge metrics.

Prometheus collectors for the request units, latency and errors of the
Cosmos DB operations a sample issues, plus helpers to read the request
charge from SDK response headers.
"""

from typing import Any, Dict, Mapping, Optional

from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
    write_to_textfile,
)

REQUEST_CHARGE_HEADER = "x-ms-request-charge"
ACTIVITY_ID_HEADER = "x-ms-activity-id"
QUERY_METRICS_HEADER = "x-ms-documentdb-query-metrics"


def request_charge_from_headers(headers: Optional[Mapping[str, Any]]) -> float:
    """
    Read the request charge (RUs) from response headers.

    Returns 0.0 when the header is absent or malformed.
    """
    if not headers:
        return 0.0
    value = headers.get(REQUEST_CHARGE_HEADER)
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def activity_id_from_headers(headers: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not headers:
        return None
    return headers.get(ACTIVITY_ID_HEADER)


class ResponseCapture:
    """
    ``response_hook`` for SDK calls that keeps the last response headers.

    The SDK invokes the hook as ``hook(headers, result)``.
    """

    def __init__(self):
        self.headers: Dict[str, Any] = {}
        self.result: Any = None

    def __call__(self, headers: Mapping[str, Any], result: Any = None) -> None:
        self.headers = dict(headers) if headers else {}
        self.result = result

    @property
    def request_charge(self) -> float:
        return request_charge_from_headers(self.headers)

    @property
    def activity_id(self) -> Optional[str]:
        return activity_id_from_headers(self.headers)


class SampleMetrics:
    """
    Prometheus metrics collector for sample operations.

    Each instance owns its registry so that several sample runs in one
    process do not collide on metric names.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize metrics collectors.

        Args:
            registry: Prometheus registry (a fresh one if None)
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        self.request_charge_total = Counter(
            'cosmos_request_charge_total',
            'Total request units consumed',
            ['operation'],
            registry=self.registry
        )

        self.operations_total = Counter(
            'cosmos_operations_total',
            'Total operations issued',
            ['operation'],
            registry=self.registry
        )

        self.errors_total = Counter(
            'cosmos_errors_total',
            'Total failed operations',
            ['operation', 'error_type'],
            registry=self.registry
        )

        self.query_pages_total = Counter(
            'cosmos_query_pages_total',
            'Total query result pages fetched',
            registry=self.registry
        )

        self.operation_duration_seconds = Histogram(
            'cosmos_operation_duration_seconds',
            'Operation duration',
            ['operation'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=self.registry
        )

    def track_operation(self, operation: str, request_charge: float, duration: float) -> None:
        """
        Track one completed operation.

        Args:
            operation: Operation name (create_item, read_item, query_page, ...)
            request_charge: Request units reported by the service
            duration: Operation duration in seconds
        """
        self.operations_total.labels(operation=operation).inc()
        self.request_charge_total.labels(operation=operation).inc(request_charge)
        self.operation_duration_seconds.labels(operation=operation).observe(duration)

    def track_query_page(self, request_charge: float, duration: float) -> None:
        self.query_pages_total.inc()
        self.track_operation("query_page", request_charge, duration)

    def track_error(self, operation: str, error_type: str) -> None:
        """
        Track error occurrence.

        Args:
            operation: Operation that failed
            error_type: Exception class name
        """
        self.errors_total.labels(operation=operation, error_type=error_type).inc()

    def request_charge(self, operation: str) -> float:
        """Total request units recorded for an operation."""
        value = self.registry.get_sample_value(
            'cosmos_request_charge_total', {'operation': operation}
        )
        return value or 0.0

    def generate_metrics(self) -> bytes:
        """Generate Prometheus metrics output."""
        return generate_latest(self.registry)

    def write(self, path: str) -> None:
        """Write metrics in the Prometheus text format to ``path``."""
        write_to_textfile(path, self.registry)
