"""
Run report.

Records what a sample run did: the items it created and read, the query
pages it fetched with their request charges, and the operations that failed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CreatedItem:
    """Item written by create_item."""

    id: str
    partition_key: str
    request_charge: float
    duration: float


@dataclass
class ReadItem:
    """Item fetched by a point read."""

    id: str
    partition_key: str
    request_charge: float
    duration: float


@dataclass
class QueryPage:
    """One page of query results."""

    item_count: int
    request_charge: float
    item_ids: List[str] = field(default_factory=list)
    query_metrics: Optional[str] = None


@dataclass
class OperationError:
    """Failed operation.

    Attributes:
        operation: Operation name
        error_type: Exception class name
        message: Exception message
        status_code: HTTP status for service errors
        sub_status: Service sub-status code
    """

    operation: str
    error_type: str
    message: str
    status_code: Optional[int] = None
    sub_status: Optional[int] = None

    @property
    def is_service_error(self) -> bool:
        return self.status_code is not None


@dataclass
class SampleReport:
    """Outcome of a sample run."""

    variant: str
    database: Optional[str] = None
    container: Optional[str] = None
    query: Optional[str] = None
    created: List[CreatedItem] = field(default_factory=list)
    read: List[ReadItem] = field(default_factory=list)
    pages: List[QueryPage] = field(default_factory=list)
    errors: List[OperationError] = field(default_factory=list)

    @property
    def total_create_charge(self) -> float:
        return sum(item.request_charge for item in self.created)

    @property
    def total_read_charge(self) -> float:
        return sum(item.request_charge for item in self.read)

    @property
    def total_query_charge(self) -> float:
        return sum(page.request_charge for page in self.pages)

    @property
    def total_request_charge(self) -> float:
        return self.total_create_charge + self.total_read_charge + self.total_query_charge

    @property
    def query_item_ids(self) -> List[str]:
        return [item_id for page in self.pages for item_id in page.item_ids]

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def summary(self) -> Dict[str, Any]:
        """Summarize the run as a JSON-ready dict."""
        return {
            "variant": self.variant,
            "database": self.database,
            "container": self.container,
            "created": len(self.created),
            "read": len(self.read),
            "query_pages": len(self.pages),
            "query_items": sum(page.item_count for page in self.pages),
            "request_charge": {
                "create": round(self.total_create_charge, 2),
                "read": round(self.total_read_charge, 2),
                "query": round(self.total_query_charge, 2),
                "total": round(self.total_request_charge, 2),
            },
            "errors": [
                {
                    "operation": e.operation,
                    "error_type": e.error_type,
                    "status_code": e.status_code,
                    "message": e.message,
                }
                for e in self.errors
            ],
        }
