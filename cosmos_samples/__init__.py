"""
Cosmos DB Samples: getting started with the Azure Cosmos DB Python SDK

Sync, async and passwordless sample programs that create a database and
container, write family documents, read them back and run a paged query.
"""

__version__ = "0.1.0"

from .samples.sync_main import SyncSample
from .samples.async_main import AsyncSample, PasswordlessSample

__all__ = ["SyncSample", "AsyncSample", "PasswordlessSample", "__version__"]
