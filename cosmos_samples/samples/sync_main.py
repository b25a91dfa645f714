"""
Synchronous Cosmos DB sample.

Creates the database and container, writes the four sample families, reads
them back by id and partition key, and pages through a query, logging the
request charge of every operation.
"""

import logging
import time
from contextlib import ExitStack
from typing import Any, List, Optional

from azure.cosmos import PartitionKey

from ..common.models import Family
from ..core.client_factory import build_client, build_credential
from ..core.config_manager import AuthMode, SamplesConfig
from ..core.metrics import ResponseCapture, SampleMetrics, request_charge_from_headers
from .base import BaseSample, response_headers
from .errors import report_errors
from .report import SampleReport

logger = logging.getLogger(__name__)


class SyncSample(BaseSample):
    """Sample using the blocking ``azure.cosmos.CosmosClient``."""

    variant = "sync"
    default_query = "not-andersen"

    def __init__(
        self,
        config: SamplesConfig,
        client: Optional[Any] = None,
        metrics: Optional[SampleMetrics] = None,
    ):
        super().__init__(config, client=client, metrics=metrics)
        self.credential: Any = None
        self._exit_stack = ExitStack()

    def connect(self) -> None:
        if self.client is None:
            if self.config.account.auth == AuthMode.AAD:
                self.credential = self._exit_stack.enter_context(build_credential())
            self.client = build_client(self.config.account, credential=self.credential)
        # The sync SDK client releases its pipeline on context exit
        self._exit_stack.enter_context(self.client)

    def close(self) -> None:
        logger.info("Closing the client")
        self._exit_stack.close()

    def create_database_if_not_exists(self) -> None:
        name = self.config.container.database
        logger.info(f"Create database {name} if not exists.")

        self.database = self.client.create_database_if_not_exists(id=name)

        logger.info(f"Checking database {self.database.id} completed!")

    def create_container_if_not_exists(self) -> None:
        settings = self.config.container
        logger.info(f"Create container {settings.container} if not exists.")

        self.container = self.database.create_container_if_not_exists(
            id=settings.container,
            partition_key=PartitionKey(path=settings.partition_key_path),
            offer_throughput=settings.throughput,
        )

        logger.info(f"Checking container {self.container.id} completed!")

    def create_families(self, families: List[Family]) -> None:
        for family in families:
            with report_errors("create_item", self.report, logger, self.metrics):
                family.validate_keys()
                capture = ResponseCapture()
                start = time.perf_counter()
                result = self.container.create_item(
                    body=family.to_document(),
                    response_hook=capture,
                )
                duration = time.perf_counter() - start
                headers = response_headers(result, capture.headers)
                self._record_created(family, request_charge_from_headers(headers), duration)

        self._log_create_total()

    def read_items(self, families: List[Family]) -> None:
        # Point reads by id and partition key avoid a cross-partition lookup
        for family in families:
            with report_errors("read_item", self.report, logger, self.metrics):
                family.validate_keys()
                capture = ResponseCapture()
                start = time.perf_counter()
                item = self.container.read_item(
                    item=family.id,
                    partition_key=family.partition_key,
                    response_hook=capture,
                )
                duration = time.perf_counter() - start
                headers = response_headers(item, capture.headers)
                self._record_read(item, request_charge_from_headers(headers), duration)

    def query_items(self, query: Optional[str] = None, page_size: Optional[int] = None) -> None:
        query = query or self.query_text
        page_size = page_size or self.config.query.page_size
        logger.info(f"Running query: {query}")

        with report_errors("query_items", self.report, logger, self.metrics):
            pager = self.container.query_items(
                query=query,
                enable_cross_partition_query=True,
                max_item_count=page_size,
                populate_query_metrics=self.config.query.populate_query_metrics,
            )

            started = time.perf_counter()
            for page in pager.by_page():
                items = list(page)
                duration = time.perf_counter() - started
                headers = dict(self.container.client_connection.last_response_headers or {})
                self._record_page(items, headers, duration)
                if self._page_limit_reached():
                    break
                started = time.perf_counter()

    def run(self, families: Optional[List[Family]] = None) -> SampleReport:
        """
        Run the sample end to end.

        Provisioning failures propagate; item, read and query failures are
        recorded in the report. The client is always closed.
        """
        self._begin()
        try:
            self.connect()
            self.create_database_if_not_exists()
            self.create_container_if_not_exists()

            families = families if families is not None else self.families()
            self.create_families(families)

            if self.config.read_back:
                logger.info("Reading items.")
                self.read_items(families)

            logger.info("Querying items.")
            self.query_items()
            logger.info("Demo complete, please hold while resources are released")
        finally:
            self.close()
        return self.report
