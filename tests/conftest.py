"""
Shared fixtures: in-memory stand-ins for the Cosmos DB SDK.

The fakes implement only the calls the samples make. Every call reports a
request charge through the response hook and through
``client_connection.last_response_headers``, as the SDK does.
"""

import itertools
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
from azure.cosmos.exceptions import CosmosHttpResponseError

from cosmos_samples.core.config_manager import SamplesConfig

CREATE_CHARGE = 6.29
READ_CHARGE = 1.0
QUERY_PAGE_CHARGE = 2.89

_activity_ids = itertools.count(1)


def _partition_field(partition_key: Any) -> str:
    path = getattr(partition_key, "path", None) or partition_key["paths"][0]
    return path.lstrip("/")


class FakeContainer:
    """Synchronous container proxy."""

    def __init__(self, container_id: str, partition_field: str = "lastName"):
        self.id = container_id
        self.partition_field = partition_field
        self.items: Dict[tuple, Dict[str, Any]] = {}
        self.client_connection = SimpleNamespace(last_response_headers={})
        self.query_results: Optional[List[Any]] = None
        self.queries: List[Dict[str, Any]] = []
        self.failures: Dict[str, Callable[[Dict[str, Any]], Optional[Exception]]] = {}

    def _respond(self, charge: float, hook: Optional[Callable], result: Any) -> None:
        headers = {
            "x-ms-request-charge": str(charge),
            "x-ms-activity-id": f"activity-{next(_activity_ids)}",
        }
        self.client_connection.last_response_headers = headers
        if hook is not None:
            hook(headers, result)

    def _maybe_fail(self, operation: str, payload: Dict[str, Any]) -> None:
        check = self.failures.get(operation)
        if check is not None:
            error = check(payload)
            if error is not None:
                raise error

    def create_item(self, body: Dict[str, Any], response_hook: Optional[Callable] = None, **kwargs):
        self._maybe_fail("create_item", body)
        key = (body["id"], body[self.partition_field])
        if key in self.items:
            raise CosmosHttpResponseError(status_code=409, message="Entity with the specified id already exists")
        stored = dict(body, _ts=len(self.items) + 1)
        self.items[key] = stored
        self._respond(CREATE_CHARGE, response_hook, stored)
        return dict(stored)

    def read_item(self, item: str, partition_key: str, response_hook: Optional[Callable] = None, **kwargs):
        self._maybe_fail("read_item", {"id": item, "partition_key": partition_key})
        key = (item, partition_key)
        if key not in self.items:
            raise CosmosHttpResponseError(status_code=404, message="Entity with the specified id does not exist")
        result = dict(self.items[key])
        self._respond(READ_CHARGE, response_hook, result)
        return result

    def _query_results(self) -> List[Any]:
        if self.query_results is not None:
            return list(self.query_results)
        return list(self.items.values())

    def query_items(self, query: str, max_item_count: Optional[int] = None, **kwargs):
        self._maybe_fail("query_items", {"query": query})
        self.queries.append(dict(kwargs, query=query, max_item_count=max_item_count))
        return FakeItemPaged(self, self._query_results(), max_item_count or 100)


class FakeItemPaged:
    def __init__(self, container, results: List[Any], page_size: int):
        self.container = container
        self.results = results
        self.page_size = page_size

    def _chunks(self):
        for start in range(0, len(self.results), self.page_size):
            yield self.results[start:start + self.page_size]

    def by_page(self):
        for chunk in self._chunks():
            self.container._respond(QUERY_PAGE_CHARGE, None, chunk)
            yield iter(chunk)


class FakeDatabase:
    def __init__(self, database_id: str, container_factory=FakeContainer):
        self.id = database_id
        self.containers: Dict[str, Any] = {}
        self.container_requests: List[Dict[str, Any]] = []
        self._container_factory = container_factory

    def _container(self, container_id: str, partition_field: str = "lastName"):
        if container_id not in self.containers:
            self.containers[container_id] = self._container_factory(container_id, partition_field)
        return self.containers[container_id]

    def create_container_if_not_exists(self, id: str, partition_key: Any, offer_throughput: Optional[int] = None, **kwargs):
        self.container_requests.append(
            {"id": id, "partition_key": partition_key, "offer_throughput": offer_throughput}
        )
        return self._container(id, _partition_field(partition_key))

    def get_container_client(self, container: str):
        return self._container(container)


class FakeCosmosClient:
    """Synchronous client; usable as a context manager like the SDK client."""

    def __init__(self, database_factory=FakeDatabase):
        self.databases: Dict[str, Any] = {}
        self.closed = False
        self._database_factory = database_factory

    def _database(self, database_id: str):
        if database_id not in self.databases:
            self.databases[database_id] = self._database_factory(database_id)
        return self.databases[database_id]

    def create_database_if_not_exists(self, id: str, **kwargs):
        return self._database(id)

    def get_database_client(self, database: str):
        return self._database(database)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.closed = True


class FakeAsyncContainer(FakeContainer):
    """Container proxy with the ``azure.cosmos.aio`` call shapes."""

    async def create_item(self, body: Dict[str, Any], response_hook: Optional[Callable] = None, **kwargs):
        return FakeContainer.create_item(self, body, response_hook=response_hook, **kwargs)

    async def read_item(self, item: str, partition_key: str, response_hook: Optional[Callable] = None, **kwargs):
        return FakeContainer.read_item(self, item, partition_key, response_hook=response_hook, **kwargs)

    def query_items(self, query: str, max_item_count: Optional[int] = None, **kwargs):
        self._maybe_fail("query_items", {"query": query})
        self.queries.append(dict(kwargs, query=query, max_item_count=max_item_count))
        return FakeAsyncItemPaged(self, self._query_results(), max_item_count or 100)


class _AsyncPage:
    def __init__(self, items: List[Any]):
        self._items = iter(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._items)
        except StopIteration:
            raise StopAsyncIteration


class FakeAsyncItemPaged(FakeItemPaged):
    async def _pages(self):
        for chunk in self._chunks():
            self.container._respond(QUERY_PAGE_CHARGE, None, chunk)
            yield _AsyncPage(chunk)

    def by_page(self):
        return self._pages()


class FakeAsyncDatabase(FakeDatabase):
    def __init__(self, database_id: str):
        super().__init__(database_id, container_factory=FakeAsyncContainer)

    async def create_container_if_not_exists(self, id: str, partition_key: Any, offer_throughput: Optional[int] = None, **kwargs):
        return FakeDatabase.create_container_if_not_exists(
            self, id, partition_key, offer_throughput=offer_throughput, **kwargs
        )


class FakeAsyncCosmosClient(FakeCosmosClient):
    def __init__(self):
        super().__init__(database_factory=FakeAsyncDatabase)
        self.created_databases: List[str] = []

    async def create_database_if_not_exists(self, id: str, **kwargs):
        self.created_databases.append(id)
        return self._database(id)

    async def close(self):
        self.closed = True


class FakeAsyncCredential:
    def __init__(self):
        self.closed = False

    async def close(self):
        self.closed = True


@pytest.fixture
def config():
    """Sample configuration with a key and a fixed seed."""
    return SamplesConfig(
        account={"key": "test-key"},
        family_count=5,
        seed=42,
    )


@pytest.fixture
def fake_client():
    return FakeCosmosClient()


@pytest.fixture
def fake_async_client():
    return FakeAsyncCosmosClient()


@pytest.fixture
def fake_credential():
    return FakeAsyncCredential()
