"""
Logging infrastructure for the Cosmos DB samples.

Provides structured logging with JSON formatting and redaction of account keys.
"""

import logging
import logging.handlers
import json
import sys
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from contextvars import ContextVar

_SIZE_UNITS = {"GB": 1024 ** 3, "MB": 1024 ** 2, "KB": 1024, "B": 1}
_SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*(GB|MB|KB|B)?\s*$', re.IGNORECASE)

# Context variable identifying the current sample run
run_id: ContextVar[Optional[str]] = ContextVar('run_id', default=None)


class SensitiveDataFilter(logging.Filter):
    """Filter to redact account keys and tokens from log messages."""

    PATTERNS = [
        (re.compile(r'(Authorization:\s+)(?:Bearer\s+)?\S+', re.IGNORECASE), r'\1***REDACTED***'),
        (re.compile(r'(AccountKey=)[^;]+', re.IGNORECASE), r'\1***REDACTED***'),
        (re.compile(r'(\b(?:account|master)[_ ]?key["\']?\s*[:=]\s*["\']?)[^\s"\',]+', re.IGNORECASE), r'\1***REDACTED***'),
        # Cosmos master keys are 88 characters of base64
        (re.compile(r'[A-Za-z0-9+/]{86}==', re.IGNORECASE), r'***REDACTED***'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact sensitive data from log record."""
        if isinstance(record.msg, str):
            for pattern, replacement in self.PATTERNS:
                record.msg = pattern.sub(replacement, record.msg)
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }

        if current_run := run_id.get():
            log_data["run_id"] = current_run

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_data["context"] = record.context

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    def __init__(self):
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    level: str = "INFO",
    format_type: str = "text",
    log_file: Optional[str] = None,
    rotation_size: str = "10MB",
    rotation_count: int = 5,
    module_levels: Optional[Dict[str, str]] = None
) -> None:
    """
    Configure sample logging.

    Args:
        level: Default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format ("json" or "text")
        log_file: Optional file path for log output
        rotation_size: Size limit for log rotation (e.g., "10MB")
        rotation_count: Number of rotated log files to keep
        module_levels: Optional dict of module-specific log levels
                      e.g., {"azure.core.pipeline.policies.http_logging_policy": "WARNING"}
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    if format_type == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    _attach(root_logger, logging.StreamHandler(sys.stdout), formatter)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=_parse_size(rotation_size),
            backupCount=rotation_count,
            encoding='utf-8'
        )
        _attach(root_logger, file_handler, formatter)

        root_logger.debug(f"Logging to file: {log_file} (rotation: {rotation_size}, count: {rotation_count})")

    # The SDK's HTTP logging policy is chatty at INFO
    logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(logging.WARNING)

    if module_levels:
        for module_name, module_level in module_levels.items():
            module_logger = logging.getLogger(module_name)
            module_logger.setLevel(getattr(logging, module_level.upper()))
            root_logger.debug(f"Module '{module_name}' log level set to {module_level}")

    root_logger.debug(f"Logging configured: level={level}, format={format_type}")


def _attach(root_logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    # Every handler redacts account keys, whatever its destination
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(handler)


def _parse_size(size_str: str) -> int:
    """Convert a rotation size such as "10MB" or "1.5GB" to bytes."""
    match = _SIZE_PATTERN.match(size_str)
    if not match:
        raise ValueError(f"Invalid rotation size: {size_str}")
    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[(unit or "B").upper()])


def set_run_id(value: str) -> None:
    """Set the run ID for the current context."""
    run_id.set(value)


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """
    Log a message with additional context.

    Args:
        logger: Logger instance
        level: Log level
        message: Log message
        **context: Additional context to include in log
    """
    extra = {"context": context} if context else {}
    logger.log(level, message, extra=extra)
