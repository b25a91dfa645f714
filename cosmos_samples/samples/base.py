"""
Sample runner base class.

Holds what the sync and async samples share: configuration, the run report,
metrics, and the logging of each created item, point read and query page.
The subclasses only differ in how they call the SDK.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..common.families import FamilyGenerator, sample_families
from ..common.models import Family
from ..core.config_manager import SamplesConfig
from ..core.logging_config import log_with_context, set_run_id
from ..core.metrics import QUERY_METRICS_HEADER, SampleMetrics, request_charge_from_headers
from .queries import resolve_query
from .report import CreatedItem, QueryPage, ReadItem, SampleReport

logger = logging.getLogger(__name__)


def item_id(item: Any) -> Optional[str]:
    """
    Id of a query result item.

    Projections such as ``SELECT VALUE root FROM (SELECT DISTINCT i ...)``
    wrap the document one level down, so look there too.
    """
    if not isinstance(item, dict):
        return None
    if "id" in item:
        return item["id"]
    for value in item.values():
        if isinstance(value, dict) and "id" in value:
            return value["id"]
    return None


def response_headers(result: Any, fallback: Dict[str, Any]) -> Dict[str, Any]:
    """Headers attached to an SDK result, or the ones a response hook captured."""
    getter = getattr(result, "get_response_headers", None)
    if callable(getter):
        headers = getter()
        if headers:
            return dict(headers)
    return fallback


class BaseSample(ABC):
    """
    Common state of a sample run.

    Subclasses set ``variant`` and ``default_query`` and implement ``run()``.
    """

    variant: str = "base"
    default_query: str = "by-last-name"

    def __init__(
        self,
        config: SamplesConfig,
        client: Optional[Any] = None,
        metrics: Optional[SampleMetrics] = None,
    ):
        """
        Initialize the sample.

        Args:
            config: Sample configuration
            client: Pre-built Cosmos client; built from ``config.account`` if None
            metrics: Metrics collector; a fresh one if None
        """
        self.config = config
        self.client = client
        self.database: Any = None
        self.container: Any = None
        self.metrics = metrics or SampleMetrics()
        self.run_id = uuid.uuid4().hex[:12]
        self.report = SampleReport(
            variant=self.variant,
            database=config.container.database,
            container=config.container.container,
            query=self.query_text,
        )

    @property
    def query_text(self) -> str:
        return resolve_query(self.config.query.text or self.default_query)

    def families(self) -> List[Family]:
        """Documents this sample writes."""
        return sample_families()

    def _begin(self) -> None:
        set_run_id(self.run_id)
        logger.info(f"Starting {self.variant.upper()} sample (run {self.run_id})")

    def _record_created(self, family: Family, request_charge: float, duration: float) -> None:
        self.report.created.append(
            CreatedItem(
                id=family.id,
                partition_key=family.partition_key,
                request_charge=request_charge,
                duration=duration,
            )
        )
        self.metrics.track_operation("create_item", request_charge, duration)
        log_with_context(
            logger,
            logging.INFO,
            f"Created item with request charge of {request_charge:.2f} "
            f"within duration {duration * 1000:.1f} ms",
            item_id=family.id,
            request_charge=request_charge,
        )
        logger.info(f"Item ID: {family.id}")

    def _log_create_total(self) -> None:
        logger.info(
            f"Created {len(self.report.created)} items with total request "
            f"charge of {self.report.total_create_charge:.2f}"
        )

    def _record_read(self, item: Dict[str, Any], request_charge: float, duration: float) -> None:
        read = Family.from_document(item)
        read_id = read.id
        self.report.read.append(
            ReadItem(
                id=read_id,
                partition_key=read.partition_key,
                request_charge=request_charge,
                duration=duration,
            )
        )
        self.metrics.track_operation("read_item", request_charge, duration)
        log_with_context(
            logger,
            logging.INFO,
            f"Item successfully read with id {read_id} with a charge of "
            f"{request_charge:.2f} and within duration {duration * 1000:.1f} ms",
            item_id=read_id,
            request_charge=request_charge,
        )

    def _record_page(self, items: List[Any], headers: Dict[str, Any], duration: float) -> QueryPage:
        request_charge = request_charge_from_headers(headers)
        page = QueryPage(
            item_count=len(items),
            request_charge=request_charge,
            item_ids=[i for i in (item_id(item) for item in items) if i is not None],
            query_metrics=headers.get(QUERY_METRICS_HEADER) if headers else None,
        )
        self.report.pages.append(page)
        self.metrics.track_query_page(request_charge, duration)
        logger.info(
            f"Got a page of query result with {page.item_count} item(s) "
            f"and request charge of {request_charge:.2f}"
        )
        logger.info(f"Item Ids {page.item_ids}")
        if page.query_metrics:
            logger.debug(f"Query metrics: {page.query_metrics}")
        return page

    def _page_limit_reached(self) -> bool:
        max_pages = self.config.query.max_pages
        return max_pages is not None and len(self.report.pages) >= max_pages

    @abstractmethod
    def run(self) -> Any:
        """Run the full sample and return its report."""
        pass


def generated_families(config: SamplesConfig) -> List[Family]:
    """Random families for the async sample, reproducible when seeded."""
    return FamilyGenerator(seed=config.seed).generate_families(config.family_count)
