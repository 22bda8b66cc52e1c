"""Service configuration shared by every request to one deployment.

Architecture:
    A ``WebService`` holds the per-deployment values (base URL, authorization,
    envelope and error response shapes, default headers, transport) and the
    customization hooks the pipeline calls while building a request and
    interpreting its response. Hooks default to no-ops; a concrete service
    overrides only the ones it needs.

    Configuration is read-only while requests are in flight and is safe to
    share across concurrent invocations.

Hook order for one request:
    1. configure_encoder(settings)       -- before input encoding
    2. configure_request(request)        -- after the request is fully built
    3. configure_decoder(settings)       -- before any body is decoded
    4. validate_response(response, ep)   -- before any decoding
    5. validate_basic_response(basic, ep)

Example:
    >>> class Api(WebService):
    ...     base_url = "https://api.example.com/v1"
    ...     error_response_type = ApiError
    ...
    ...     def configure_request(self, request):
    ...         request.headers["X-Client"] = "laakhay"
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from yarl import URL

from .authorization import Authorization, NoAuthorization
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..codecs.settings import DecoderSettings, EncoderSettings
    from ..runtime.transport import Transport
    from .endpoint import Endpoint
    from .request import TransportRequest, TransportResponse

DEFAULT_TIMEOUT = 30.0

_UNSET: Any = object()


class NoBasicResponse:
    """Sentinel: the service has no envelope decoded from every response."""


class NoErrorResponse:
    """Sentinel: the service does not return structured error bodies."""


class WebService:
    """Base class for service configurations.

    Values may be declared as class attributes on a subclass or passed to the
    constructor; constructor arguments win.
    """

    base_url: str = ""
    basic_response_type: Any = NoBasicResponse
    error_response_type: Any = NoErrorResponse
    authorization: Authorization = NoAuthorization()
    default_headers: Mapping[str, str] = {}
    timeout: float | None = DEFAULT_TIMEOUT
    transport: Transport | None = None

    def __init__(
        self,
        base_url: str | None = None,
        *,
        authorization: Authorization | None = None,
        basic_response_type: Any = None,
        error_response_type: Any = None,
        default_headers: Mapping[str, str] | None = None,
        timeout: float | None = _UNSET,
        transport: Transport | None = None,
    ) -> None:
        if base_url is not None:
            self.base_url = base_url
        if authorization is not None:
            self.authorization = authorization
        if basic_response_type is not None:
            self.basic_response_type = basic_response_type
        if error_response_type is not None:
            self.error_response_type = error_response_type
        if default_headers is not None:
            self.default_headers = dict(default_headers)
        if timeout is not _UNSET:
            self.timeout = timeout
        if transport is not None:
            self.transport = transport

        url = URL(self.base_url) if self.base_url else None
        if url is None or not url.is_absolute():
            raise ConfigurationError(f"Service base_url must be an absolute URL, got {self.base_url!r}")
        self._url = url

    @property
    def url(self) -> URL:
        """Parsed base URL."""
        return self._url

    @property
    def has_basic_response(self) -> bool:
        return self.basic_response_type is not NoBasicResponse

    @property
    def has_error_response(self) -> bool:
        return self.error_response_type is not NoErrorResponse

    # Configuration hooks

    def configure_request(self, request: TransportRequest) -> None:
        """Final chance to adjust a fully built request (headers, timeout)."""

    def configure_encoder(self, settings: EncoderSettings) -> None:
        """Adjust encoder settings before the request input is encoded."""

    def configure_decoder(self, settings: DecoderSettings) -> None:
        """Adjust decoder settings before response bodies are decoded."""

    # Validation hooks

    def validate_response(self, response: TransportResponse, endpoint: Endpoint) -> bool | None:
        """Validate the raw response; raise to reject it.

        Return True to accept a status outside 200-299 as success, False to
        treat a 2xx status as a failure, or None to keep the default judgment.
        """
        return None

    def validate_basic_response(self, basic_response: Any, endpoint: Endpoint) -> None:
        """Validate the decoded basic response; raise to reject it."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url!r})"


_default_service: WebService | None = None


def set_default_service(service: WebService | None) -> None:
    """Register the service used when a request does not name one."""
    global _default_service
    _default_service = service


def get_default_service() -> WebService:
    """Get the registered default service.

    Raises:
        ConfigurationError: If no default service has been registered
    """
    if _default_service is None:
        raise ConfigurationError(
            "No service given and no default service registered; call set_default_service()"
        )
    return _default_service


def resolve_service(service: WebService | None) -> WebService:
    return service if service is not None else get_default_service()
