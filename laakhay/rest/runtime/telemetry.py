"""Structured logging for request execution.

This module provides telemetry hooks for the pipeline, emitting structured
logs with stable event names. Bodies and credentials are never logged.
"""

from __future__ import annotations

import logging

from ..core.exceptions import RestError

logger = logging.getLogger(__name__)


def log_request_started(*, operation: str, method: str, url: str, download: bool) -> None:
    """Log a request being handed to the transport.

    Args:
        operation: Endpoint name
        method: HTTP method
        url: Final request URL
        download: Whether the body is streamed to disk
    """
    logger.debug(
        "request_started",
        extra={"operation": operation, "method": method, "url": url, "download": download},
    )


def log_request_completed(*, operation: str, status: int, latency_ms: float) -> None:
    """Log a response that passed validation and decoding.

    Args:
        operation: Endpoint name
        status: HTTP status code
        latency_ms: Time from build to decoded result in milliseconds
    """
    logger.debug(
        "request_completed",
        extra={"operation": operation, "status": status, "latency_ms": round(latency_ms, 2)},
    )


def log_request_failed(*, operation: str, error: RestError, latency_ms: float) -> None:
    """Log a terminal failure of an invocation.

    Args:
        operation: Endpoint name
        error: Classified error delivered to the caller
        latency_ms: Time until the failure in milliseconds
    """
    logger.warning(
        "request_failed",
        extra={
            "operation": operation,
            "error_type": error.__class__.__name__,
            "status": getattr(error, "status_code", None),
            "error_message": error.message,
            "latency_ms": round(latency_ms, 2),
        },
    )
