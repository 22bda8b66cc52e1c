"""Core components: descriptors, service configuration, errors and outcomes."""

from .authorization import (
    Authorization,
    BasicAuthorization,
    BearerAuthorization,
    CustomAuthorization,
    NoAuthorization,
)
from .endpoint import AnyEndpoint, EmptyEndpoint, Endpoint, InEndpoint, InOutEndpoint, OutEndpoint
from .enums import (
    AuthorizationRequirement,
    DateEncoding,
    EndpointKind,
    HTTPMethod,
    InputFormat,
    OutputFormat,
)
from .exceptions import (
    ConfigurationError,
    ConnectivityError,
    DecodingError,
    ResponseValidationError,
    RestError,
    ServiceError,
    StatusError,
)
from .outcome import Outcome
from .request import TransportRequest, TransportResponse
from .service import (
    NoBasicResponse,
    NoErrorResponse,
    WebService,
    get_default_service,
    set_default_service,
)

__all__ = [
    # Descriptors
    "Endpoint",
    "AnyEndpoint",
    "EmptyEndpoint",
    "InEndpoint",
    "OutEndpoint",
    "InOutEndpoint",
    # Enums
    "AuthorizationRequirement",
    "DateEncoding",
    "EndpointKind",
    "HTTPMethod",
    "InputFormat",
    "OutputFormat",
    # Service configuration
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
    # Results and errors
    "Outcome",
    "RestError",
    "ConnectivityError",
    "ConfigurationError",
    "ResponseValidationError",
    "ServiceError",
    "StatusError",
    "DecodingError",
    # Transport values
    "TransportRequest",
    "TransportResponse",
]
