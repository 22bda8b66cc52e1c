"""Laakhay REST - declarative HTTP endpoints with a typed execution pipeline.

Describe an endpoint once, configure a service, and call it:

    >>> class Api(WebService):
    ...     base_url = "https://api.example.com"
    ...     error_response_type = ApiError
    >>> LOGIN = InOutEndpoint(
    ...     method=HTTPMethod.POST, path="login", input_type=Credentials, output_type=Token
    ... )
    >>> token = LOGIN.make_synchronous_request(Api(), input=Credentials(username="u", password="p"))
"""

from .codecs import DecoderSettings, EncoderSettings
from .core import (
    AnyEndpoint,
    Authorization,
    AuthorizationRequirement,
    BasicAuthorization,
    BearerAuthorization,
    ConfigurationError,
    ConnectivityError,
    CustomAuthorization,
    DateEncoding,
    DecodingError,
    EmptyEndpoint,
    Endpoint,
    EndpointKind,
    HTTPMethod,
    InEndpoint,
    InOutEndpoint,
    InputFormat,
    NoAuthorization,
    NoBasicResponse,
    NoErrorResponse,
    Outcome,
    OutEndpoint,
    OutputFormat,
    ResponseValidationError,
    RestError,
    ServiceError,
    StatusError,
    TransportRequest,
    TransportResponse,
    WebService,
    get_default_service,
    set_default_service,
)
from .runtime import (
    AiohttpTransport,
    Transport,
    TransportFailure,
    close_default_transport,
    download,
    execute,
    make_download_request,
    make_request,
    make_synchronous_request,
)

__version__ = "0.1.0"

__all__ = [
    # Descriptors
    "Endpoint",
    "AnyEndpoint",
    "EmptyEndpoint",
    "InEndpoint",
    "OutEndpoint",
    "InOutEndpoint",
    "EndpointKind",
    "HTTPMethod",
    "InputFormat",
    "OutputFormat",
    "AuthorizationRequirement",
    "DateEncoding",
    # Service
    "WebService",
    "NoBasicResponse",
    "NoErrorResponse",
    "get_default_service",
    "set_default_service",
    "Authorization",
    "NoAuthorization",
    "BasicAuthorization",
    "BearerAuthorization",
    "CustomAuthorization",
    "EncoderSettings",
    "DecoderSettings",
    # Execution
    "execute",
    "download",
    "make_request",
    "make_download_request",
    "make_synchronous_request",
    "Transport",
    "TransportFailure",
    "AiohttpTransport",
    "close_default_transport",
    "TransportRequest",
    "TransportResponse",
    # Results and errors
    "Outcome",
    "RestError",
    "ConnectivityError",
    "ConfigurationError",
    "ResponseValidationError",
    "ServiceError",
    "StatusError",
    "DecodingError",
]
