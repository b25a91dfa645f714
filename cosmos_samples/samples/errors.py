"""
Per-operation error reporting.

Each sample step runs inside ``report_errors``: a failure is logged, counted
and recorded in the run report, and the sample moves on to the next step.
Service errors (``CosmosHttpResponseError``) are logged with their status
and activity id; anything else is logged with its traceback.
"""

import logging
from types import TracebackType
from typing import Optional, Type

from azure.cosmos.exceptions import CosmosHttpResponseError

from ..core.metrics import SampleMetrics, activity_id_from_headers
from .report import OperationError, SampleReport


def describe_error(operation: str, err: BaseException) -> OperationError:
    """Build the report record for a failed operation."""
    if isinstance(err, CosmosHttpResponseError):
        return OperationError(
            operation=operation,
            error_type=type(err).__name__,
            message=str(getattr(err, "http_error_message", None) or err),
            status_code=err.status_code,
            sub_status=getattr(err, "sub_status", None),
        )
    return OperationError(
        operation=operation,
        error_type=type(err).__name__,
        message=str(err),
    )


class report_errors:
    """
    Context manager that logs and records a failing operation.

    Usable as ``with`` in the sync sample and ``async with`` in the async one.
    ``KeyboardInterrupt`` and other non-``Exception`` errors propagate.
    """

    def __init__(
        self,
        operation: str,
        report: SampleReport,
        logger: logging.Logger,
        metrics: Optional[SampleMetrics] = None,
    ):
        self.operation = operation
        self.report = report
        self.logger = logger
        self.metrics = metrics
        self.error: Optional[OperationError] = None

    def __enter__(self) -> "report_errors":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        if exc is None or not isinstance(exc, Exception):
            return False

        self.error = describe_error(self.operation, exc)
        self.report.errors.append(self.error)
        if self.metrics is not None:
            self.metrics.track_error(self.operation, self.error.error_type)

        if isinstance(exc, CosmosHttpResponseError):
            # Client-specific errors
            self.logger.error(
                f"{self.operation} failed with CosmosHttpResponseError: "
                f"status={exc.status_code} sub_status={self.error.sub_status} "
                f"activity_id={activity_id_from_headers(getattr(exc, 'headers', None))} "
                f"message={self.error.message}"
            )
        else:
            self.logger.error(f"{self.operation} failed with error: {exc}", exc_info=exc)
        return True

    async def __aenter__(self) -> "report_errors":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        return self.__exit__(exc_type, exc, tb)

    @property
    def failed(self) -> bool:
        return self.error is not None
