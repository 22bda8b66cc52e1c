"""Core enumerations describing endpoints and their wire formats.

Architecture:
    These enums are the closed vocabularies every endpoint descriptor is
    built from. The request builder and response interpreter dispatch on
    them once per request, so adding a member means adding exactly one
    encoder or decoder.

Design Decisions:
    - String enums: values double as wire tokens (HTTP methods, MIME types)
    - Closed sets: unknown formats are unrepresentable rather than validated

Key Types:
    - HTTPMethod: Verb used for the request
    - EndpointKind: Which of the four descriptor variants an endpoint is
    - InputFormat: How the request input is encoded
    - OutputFormat: How the response body is decoded
    - AuthorizationRequirement: Whether an endpoint needs credentials
    - DateEncoding: How datetimes are written by encoders
"""

from enum import Enum


class HTTPMethod(str, Enum):
    """HTTP verbs supported by endpoint descriptors."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class EndpointKind(str, Enum):
    """Shape of an endpoint: whether it takes input and/or returns output."""

    EMPTY = "empty"
    IN = "in"
    OUT = "out"
    IN_OUT = "in_out"

    @property
    def has_input(self) -> bool:
        return self in (EndpointKind.IN, EndpointKind.IN_OUT)

    @property
    def has_output(self) -> bool:
        return self in (EndpointKind.OUT, EndpointKind.IN_OUT)


class InputFormat(str, Enum):
    """Encoding used for an endpoint's input."""

    JSON = "json"
    URL_QUERY = "url_query"
    FORM_URL_ENCODED = "form_url_encoded"
    FORM_DATA = "form_data"
    XML = "xml"

    @property
    def content_type(self) -> str | None:
        """MIME type of the request body (None when no body is sent).

        FORM_DATA returns the bare type; the builder appends the boundary.
        """
        return _INPUT_CONTENT_TYPES[self]


class OutputFormat(str, Enum):
    """Encoding expected for an endpoint's response body."""

    JSON = "json"
    XML = "xml"

    @property
    def accept(self) -> str:
        return "application/xml" if self is OutputFormat.XML else "application/json"


class AuthorizationRequirement(str, Enum):
    """Whether an endpoint must, may, or must not be authorized."""

    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class DateEncoding(str, Enum):
    """Strategy encoders use when writing ``datetime`` values."""

    ISO8601 = "iso8601"
    SECONDS_SINCE_EPOCH = "seconds_since_epoch"
    MILLISECONDS_SINCE_EPOCH = "milliseconds_since_epoch"


_INPUT_CONTENT_TYPES: dict[InputFormat, str | None] = {
    InputFormat.JSON: "application/json",
    InputFormat.URL_QUERY: None,
    InputFormat.FORM_URL_ENCODED: "application/x-www-form-urlencoded",
    InputFormat.FORM_DATA: "multipart/form-data",
    InputFormat.XML: "application/xml",
}
