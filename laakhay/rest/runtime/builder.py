"""Request builder composing endpoint, service and input into a transport request.

Build order:
    1. URL: service base URL with the endpoint path appended as a path
       component (absolute endpoint paths are rejected)
    2. Input encoding by ``input_format`` after ``configure_encoder`` has
       adjusted a fresh ``EncoderSettings``
    3. Headers: ``Accept``, ``Content-Type``, service default headers
    4. Authorization according to the endpoint requirement
    5. ``configure_request`` gets the finished request for final changes

Any failure is raised as ``ConfigurationError``; nothing is sent.
"""

from __future__ import annotations

import logging
from typing import Any

from multidict import CIMultiDict
from yarl import URL

from ..codecs.encoders import EncodedInput, encode_input
from ..codecs.settings import EncoderSettings
from ..core.endpoint import Endpoint
from ..core.enums import AuthorizationRequirement
from ..core.exceptions import ConfigurationError, RestError
from ..core.request import TransportRequest
from ..core.service import WebService

logger = logging.getLogger(__name__)


class RequestBuilder:
    """Builds ``TransportRequest`` values. Stateless; safe to share."""

    async def build(
        self, endpoint: Endpoint, service: WebService, input: Any = None
    ) -> TransportRequest:
        """Build the request for one invocation.

        Args:
            endpoint: Endpoint descriptor
            service: Service configuration
            input: Input value (required exactly when the endpoint takes input)

        Returns:
            Fully formed request

        Raises:
            ConfigurationError: If the endpoint, service or input cannot form a request
        """
        name = endpoint.name
        self._check_input(endpoint, input)

        url = self.resolve_url(endpoint, service)
        headers: CIMultiDict[str] = CIMultiDict()
        body: bytes | None = None

        if endpoint.kind.has_output:
            headers["Accept"] = endpoint.output_format.accept  # type: ignore[attr-defined]

        if endpoint.kind.has_input:
            encoded = await self._encode(endpoint, service, input)
            if encoded.query:
                url = url.extend_query(encoded.query)
            if encoded.content_type:
                headers["Content-Type"] = encoded.content_type
            body = encoded.body

        for header, value in service.default_headers.items():
            headers.setdefault(header, value)

        self._authorize(endpoint, service, headers)

        request = TransportRequest(
            method=endpoint.method,
            url=url,
            headers=headers,
            body=body,
            timeout=service.timeout,
        )
        _call_hook(service.configure_request, request, hook="configure_request", name=name)

        logger.debug(
            "Request built",
            extra={"operation": name, "method": request.method.value, "url": str(request.url)},
        )
        return request

    @staticmethod
    def resolve_url(endpoint: Endpoint, service: WebService) -> URL:
        """Append the endpoint path to the service base URL."""
        if URL(endpoint.path).is_absolute():
            raise ConfigurationError(
                f"Endpoint path must be relative to the service base URL, got {endpoint.path!r}",
                operation_name=endpoint.name,
            )
        path = endpoint.path.lstrip("/")
        if not path:
            return service.url
        return service.url / path

    @staticmethod
    def _check_input(endpoint: Endpoint, input: Any) -> None:
        if endpoint.kind.has_input and input is None:
            raise ConfigurationError("Endpoint requires an input value", operation_name=endpoint.name)
        if not endpoint.kind.has_input and input is not None:
            raise ConfigurationError("Endpoint does not accept input", operation_name=endpoint.name)

    async def _encode(self, endpoint: Endpoint, service: WebService, input: Any) -> EncodedInput:
        settings = EncoderSettings()
        _call_hook(service.configure_encoder, settings, hook="configure_encoder", name=endpoint.name)
        try:
            return await encode_input(
                input,
                endpoint.input_type,  # type: ignore[attr-defined]
                endpoint.input_format,  # type: ignore[attr-defined]
                settings,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to encode input as {endpoint.input_format.value}: {e}",  # type: ignore[attr-defined]
                operation_name=endpoint.name,
            ) from e

    @staticmethod
    def _authorize(endpoint: Endpoint, service: WebService, headers: CIMultiDict[str]) -> None:
        requirement = endpoint.authorization
        if requirement is AuthorizationRequirement.NONE:
            return
        header = service.authorization.header()
        if header is None:
            if requirement is AuthorizationRequirement.REQUIRED:
                raise ConfigurationError(
                    "Endpoint requires authorization but the service has none",
                    operation_name=endpoint.name,
                )
            return
        headers[header[0]] = header[1]


def _call_hook(func: Any, argument: Any, *, hook: str, name: str) -> None:
    try:
        func(argument)
    except RestError:
        raise
    except Exception as e:
        raise ConfigurationError(f"{hook} hook failed: {e}", operation_name=name) from e
