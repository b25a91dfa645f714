"""Core module initialization."""

from .config_manager import ConfigManager, SamplesConfig
from .logging_config import setup_logging
from .metrics import SampleMetrics, ResponseCapture, request_charge_from_headers
from .client_factory import build_client, build_async_client, build_async_credential

__all__ = [
    "ConfigManager",
    "SamplesConfig",
    "setup_logging",
    "SampleMetrics",
    "ResponseCapture",
    "request_charge_from_headers",
    "build_client",
    "build_async_client",
    "build_async_credential",
]
