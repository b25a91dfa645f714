"""Sample programs."""

from .sync_main import SyncSample
from .async_main import AsyncSample, PasswordlessSample
from .report import SampleReport
from .queries import NAMED_QUERIES, resolve_query

__all__ = [
    "SyncSample",
    "AsyncSample",
    "PasswordlessSample",
    "SampleReport",
    "NAMED_QUERIES",
    "resolve_query",
]
