"""Precise unit tests for exception hierarchy.

Tests focus on meaningful behavior, not just field access.
"""

from pydantic import BaseModel

from laakhay.rest.core import (
    ConfigurationError,
    ConnectivityError,
    DecodingError,
    ResponseValidationError,
    RestError,
    ServiceError,
    StatusError,
)
from laakhay.rest.core.exceptions import body_excerpt


class ApiError(BaseModel):
    message: str
    code: int = 0


def test_all_errors_share_base():
    """Every taxonomy kind is a RestError."""
    errors = [
        ConnectivityError("offline"),
        ConfigurationError("bad path"),
        ResponseValidationError("rejected"),
        ServiceError(ApiError(message="nope"), status_code=400),
        StatusError(500),
        DecodingError("bad"),
    ]
    assert all(isinstance(error, RestError) for error in errors)


def test_operation_name_prefixes_message():
    """Test operation name is included in str()."""
    error = ConfigurationError("missing authorization", operation_name="login")
    assert str(error) == "login: missing authorization"
    assert error.message == "missing authorization"


def test_service_error_carries_decoded_fields():
    """Test ServiceError exposes the decoded error response."""
    error = ServiceError(ApiError(message="bad credentials", code=7), status_code=401)
    assert error.status_code == 401
    assert error.error_response.code == 7
    assert error.message == "bad credentials"


def test_service_error_message_from_mapping():
    """Test ServiceError reads message keys from dict responses."""
    error = ServiceError({"detail": "not found"}, status_code=404)
    assert error.message == "not found"


def test_status_error_with_body():
    """Test StatusError keeps status and excerpt."""
    error = StatusError(503, body="upstream down")
    assert error.status_code == 503
    assert error.body == "upstream down"
    assert "503" in str(error)


def test_decoding_error_location():
    """Test DecodingError reports the failing location."""
    error = DecodingError("Field required", location="token")
    assert error.location == "token"
    assert "(at token)" in str(error)


def test_connectivity_error_keeps_cause():
    """Test ConnectivityError keeps the transport failure."""
    cause = TimeoutError("timed out")
    error = ConnectivityError("No response received", cause=cause)
    assert error.cause is cause


def test_body_excerpt_truncates():
    """Test long bodies are truncated with an ellipsis."""
    excerpt = body_excerpt(b"x" * 600, limit=10)
    assert excerpt == "x" * 10 + "..."
    assert body_excerpt(b"") == ""
    assert body_excerpt(b"\xff") == "�"
