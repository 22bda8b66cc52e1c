"""Custom exception hierarchy.

Every failure of a request invocation is one of the kinds below and is
delivered through the same channel as a success: the ``Outcome`` passed to a
completion callback, or the exception raised by a blocking call. None of them
are retried by the library.
"""

from __future__ import annotations

from typing import Any

BODY_EXCERPT_LIMIT = 512


def body_excerpt(body: bytes | None, limit: int = BODY_EXCERPT_LIMIT) -> str:
    """Decode the start of a response body for diagnostics."""
    if not body:
        return ""
    text = body[:limit].decode("utf-8", errors="replace")
    if len(body) > limit:
        text += "..."
    return text


class RestError(Exception):
    """Base exception for all library errors."""

    def __init__(self, message: str, *, operation_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation_name = operation_name

    def __str__(self) -> str:
        if self.operation_name:
            return f"{self.operation_name}: {self.message}"
        return self.message


class ConnectivityError(RestError):
    """The transport never produced a response (timeout, DNS, offline)."""

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        operation_name: str | None = None,
    ) -> None:
        super().__init__(message, operation_name=operation_name)
        self.cause = cause


class ConfigurationError(RestError):
    """Endpoint and service combination is malformed.

    Raised at build time, e.g. for an absolute endpoint path or a missing
    required authorization. Always a programming error.
    """

    pass


class ResponseValidationError(RestError):
    """A service validation hook rejected the response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: BaseException | None = None,
        operation_name: str | None = None,
    ) -> None:
        super().__init__(message, operation_name=operation_name)
        self.status_code = status_code
        self.cause = cause


class ServiceError(RestError):
    """Failure status whose body decoded into the service's error shape."""

    def __init__(
        self,
        error_response: Any,
        *,
        status_code: int,
        operation_name: str | None = None,
    ) -> None:
        super().__init__(_error_response_message(error_response), operation_name=operation_name)
        self.status_code = status_code
        self.error_response = error_response


class StatusError(RestError):
    """Failure status with a body that is not a recognised error response."""

    def __init__(
        self,
        status_code: int,
        *,
        body: str = "",
        operation_name: str | None = None,
    ) -> None:
        message = f"Unexpected status code {status_code}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message, operation_name=operation_name)
        self.status_code = status_code
        self.body = body


class DecodingError(RestError):
    """Body did not conform to the expected output or basic-response shape."""

    def __init__(
        self,
        message: str,
        *,
        location: str = "<document>",
        body: str = "",
        cause: BaseException | None = None,
        operation_name: str | None = None,
    ) -> None:
        super().__init__(f"{message} (at {location})", operation_name=operation_name)
        self.location = location
        self.body = body
        self.cause = cause


def _error_response_message(error_response: Any) -> str:
    for attr in ("message", "error", "detail"):
        value = getattr(error_response, attr, None)
        if isinstance(value, str) and value:
            return value
    if isinstance(error_response, dict):
        for key in ("message", "error", "detail"):
            value = error_response.get(key)
            if isinstance(value, str) and value:
                return value
    return str(error_response)
