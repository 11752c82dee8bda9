"""
Logging utilities for API handlers.

Provides structured JSON logging with correlation IDs for tracing requests.
"""

import json
import logging
import os
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class StructuredLogger:
    """
    JSON logger for API handlers with correlation ID support.

    Example:
        logger = StructuredLogger(__name__)
        logger.info("Creating product", product_id="product_123", category="tech")
    """

    def __init__(self, name: str, correlation_id: Optional[str] = None) -> None:
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        self.correlation_id = correlation_id or str(uuid.uuid4())

    def bind(self, correlation_id: str) -> "StructuredLogger":
        """Return a logger for the same name tagged with another correlation ID."""
        return StructuredLogger(self.name, correlation_id)

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        """Internal method to emit structured JSON logs."""
        if not self.logger.isEnabledFor(_LEVELS[level]):
            return

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "logger": self.name,
            "message": message,
            "correlationId": self.correlation_id,
            **kwargs,
        }

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        print(json.dumps(log_entry, default=str))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info level message."""
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning level message."""
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error level message."""
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug level message."""
        self._log("DEBUG", message, **kwargs)

    def exception(self, message: str, error: BaseException, **kwargs: Any) -> None:
        """Log error level message with the exception text and traceback."""
        self._log(
            "ERROR",
            message,
            error=str(error),
            errorType=type(error).__name__,
            traceback="".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
            **kwargs,
        )


def get_logger(name: str, correlation_id: Optional[str] = None) -> StructuredLogger:
    """Create a structured logger for a module."""
    return StructuredLogger(name, correlation_id)


def get_correlation_id(event: Dict[str, Any]) -> str:
    """
    Extract or generate correlation ID from an API Gateway proxy event.

    Checks for correlation ID in:
    1. event['requestContext']['requestId'] (API Gateway)
    2. event['headers']['x-correlation-id'] (any header casing)
    3. Generates new UUID if not found
    """
    request_context = event.get("requestContext") or {}
    if "requestId" in request_context:
        return str(request_context["requestId"])

    headers = event.get("headers") or {}
    for key, value in headers.items():
        if key.lower() == "x-correlation-id" and value:
            return str(value)

    return str(uuid.uuid4())
