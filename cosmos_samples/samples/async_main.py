"""
Asynchronous Cosmos DB sample.

Same steps as the sync sample on ``azure.cosmos.aio``. Item creates and
point reads are issued concurrently, one coroutine per family, and joined
once; the request charges are then summed. The passwordless variant
authenticates with ``DefaultAzureCredential`` and expects the database and
container to exist already, since under Azure RBAC they can only be created
through the control plane.
"""

import asyncio
import logging
import time
from typing import Any, List, Optional

from azure.cosmos import PartitionKey

from ..common.models import Family
from ..core.client_factory import build_async_client, build_async_credential
from ..core.config_manager import AuthMode, SamplesConfig
from ..core.metrics import ResponseCapture, SampleMetrics, request_charge_from_headers
from .base import BaseSample, generated_families, response_headers
from .errors import report_errors
from .report import SampleReport

logger = logging.getLogger(__name__)


class AsyncSample(BaseSample):
    """Sample using ``azure.cosmos.aio.CosmosClient``."""

    variant = "async"
    default_query = "by-last-name"

    def __init__(
        self,
        config: SamplesConfig,
        client: Optional[Any] = None,
        metrics: Optional[SampleMetrics] = None,
        credential: Optional[Any] = None,
        provision: bool = True,
    ):
        """
        Initialize the async sample.

        Args:
            config: Sample configuration
            client: Pre-built async client
            metrics: Metrics collector
            credential: Async token credential, closed by ``run()``
            provision: Create the database and container if missing;
                when False, only resolve proxies to existing ones
        """
        super().__init__(config, client=client, metrics=metrics)
        self.credential = credential
        self.provision = provision

    def families(self) -> List[Family]:
        return generated_families(self.config)

    def connect(self) -> None:
        if self.client is None:
            if self.credential is None and self.config.account.auth == AuthMode.AAD:
                self.credential = build_async_credential()
            self.client = build_async_client(self.config.account, credential=self.credential)

    async def create_database_if_not_exists(self) -> None:
        name = self.config.container.database
        logger.info(f"Create database {name} if not exists.")

        self.database = await self.client.create_database_if_not_exists(id=name)

        logger.info(f"Checking database {self.database.id} completed!")

    async def create_container_if_not_exists(self) -> None:
        settings = self.config.container
        logger.info(f"Create container {settings.container} if not exists.")

        self.container = await self.database.create_container_if_not_exists(
            id=settings.container,
            partition_key=PartitionKey(path=settings.partition_key_path),
            offer_throughput=settings.throughput,
        )

        logger.info(f"Checking container {self.container.id} completed!")

    def use_existing_container(self) -> None:
        settings = self.config.container
        logger.info(
            f"Using existing database {settings.database} and container "
            f"{settings.container} (partitioned by {settings.partition_key_path})"
        )
        self.database = self.client.get_database_client(settings.database)
        self.container = self.database.get_container_client(settings.container)

    async def _create_family(self, family: Family) -> None:
        async with report_errors("create_item", self.report, logger, self.metrics):
            family.validate_keys()
            capture = ResponseCapture()
            start = time.perf_counter()
            result = await self.container.create_item(
                body=family.to_document(),
                response_hook=capture,
            )
            duration = time.perf_counter() - start
            headers = response_headers(result, capture.headers)
            self._record_created(family, request_charge_from_headers(headers), duration)

    async def create_families(self, families: List[Family]) -> None:
        await asyncio.gather(*(self._create_family(family) for family in families))
        self._log_create_total()

    async def _read_family(self, family: Family) -> None:
        async with report_errors("read_item", self.report, logger, self.metrics):
            family.validate_keys()
            capture = ResponseCapture()
            start = time.perf_counter()
            item = await self.container.read_item(
                item=family.id,
                partition_key=family.partition_key,
                response_hook=capture,
            )
            duration = time.perf_counter() - start
            headers = response_headers(item, capture.headers)
            self._record_read(item, request_charge_from_headers(headers), duration)

    async def read_items(self, families: List[Family]) -> None:
        # Point reads by id and partition key avoid a cross-partition lookup
        await asyncio.gather(*(self._read_family(family) for family in families))

    async def query_items(self, query: Optional[str] = None, page_size: Optional[int] = None) -> None:
        query = query or self.query_text
        page_size = page_size or self.config.query.page_size
        logger.info(f"Running query: {query}")

        async with report_errors("query_items", self.report, logger, self.metrics):
            pager = self.container.query_items(
                query=query,
                max_item_count=page_size,
                populate_query_metrics=self.config.query.populate_query_metrics,
            )

            started = time.perf_counter()
            async for page in pager.by_page():
                items = [item async for item in page]
                duration = time.perf_counter() - started
                headers = dict(self.container.client_connection.last_response_headers or {})
                self._record_page(items, headers, duration)
                if self._page_limit_reached():
                    break
                started = time.perf_counter()

    async def close(self) -> None:
        logger.info("Closing the client")
        try:
            if self.client is not None:
                await self.client.close()
        finally:
            if self.credential is not None:
                await self.credential.close()

    async def run(self, families: Optional[List[Family]] = None) -> SampleReport:
        """
        Run the sample end to end.

        Provisioning failures propagate; item, read and query failures are
        recorded in the report. Client and credential are always closed.
        """
        self._begin()
        try:
            self.connect()
            if self.provision:
                await self.create_database_if_not_exists()
                await self.create_container_if_not_exists()
            else:
                self.use_existing_container()

            families = families if families is not None else self.families()
            await self.create_families(families)

            if self.config.read_back:
                logger.info("Reading items.")
                await self.read_items(families)

            logger.info("Querying items.")
            await self.query_items()
            logger.info("Demo complete, please hold while resources are released")
        finally:
            await self.close()
        return self.report


class PasswordlessSample(AsyncSample):
    """
    Async sample authenticated with Azure AD instead of the account key.

    Writes the four hard-coded families to an existing container.
    """

    variant = "passwordless"
    default_query = "by-last-name"

    def __init__(
        self,
        config: SamplesConfig,
        client: Optional[Any] = None,
        metrics: Optional[SampleMetrics] = None,
        credential: Optional[Any] = None,
    ):
        if client is None and credential is None:
            credential = build_async_credential()
        super().__init__(
            config,
            client=client,
            metrics=metrics,
            credential=credential,
            provision=False,
        )

    def families(self) -> List[Family]:
        return BaseSample.families(self)
