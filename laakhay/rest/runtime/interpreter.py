"""Response interpreter turning raw transport results into values or errors.

State machine (linear, every failure is terminal):
    1. No response (transport failure)      -> ConnectivityError
    2. ``validate_response`` hook raises     -> ResponseValidationError
    3. Basic response decode fails          -> DecodingError
       ``validate_basic_response`` raises   -> ResponseValidationError
    4. Status outside 200-299 (unless the raw validation hook overrides it)
       body decodes as error response       -> ServiceError
       otherwise                            -> StatusError
    5. Endpoint without output              -> None
       Download                             -> path of the downloaded file
       Output decode fails                  -> DecodingError
       Output decodes                       -> decoded value

``configure_decoder`` runs once per response, before steps 3 and 5.
Downloads skip step 3; the body lives on disk and is only read to decode an
error response.
"""

from __future__ import annotations

import logging
from typing import Any

from ..codecs.decoders import decode_body
from ..codecs.settings import DecoderSettings
from ..core.endpoint import Endpoint
from ..core.enums import OutputFormat
from ..core.exceptions import (
    ConfigurationError,
    ConnectivityError,
    DecodingError,
    ResponseValidationError,
    RestError,
    ServiceError,
    StatusError,
    body_excerpt,
)
from ..core.request import TransportResponse
from ..core.service import WebService

logger = logging.getLogger(__name__)


class ResponseInterpreter:
    """Interprets responses for one service configuration."""

    def __init__(self, service: WebService) -> None:
        self._service = service

    def connectivity_error(self, endpoint: Endpoint, failure: BaseException) -> ConnectivityError:
        """Step 1: classify a request that never produced a response."""
        return ConnectivityError(
            f"No response received: {failure}",
            cause=failure,
            operation_name=endpoint.name,
        )

    def interpret(
        self, endpoint: Endpoint, response: TransportResponse, *, downloaded: bool = False
    ) -> Any:
        """Validate and decode ``response`` for ``endpoint``.

        Returns:
            Decoded output, the downloaded file path, or None

        Raises:
            RestError: The classified failure
        """
        name = endpoint.name
        verdict = self._validate_response(endpoint, response)
        settings = self._decoder_settings(endpoint)
        body_format = self._body_format(endpoint)

        if self._service.has_basic_response and not downloaded:
            basic = decode_body(
                response.body,
                self._service.basic_response_type,
                body_format,
                settings,
                operation_name=name,
            )
            self._validate_basic_response(endpoint, response, basic)

        succeeded = response.is_success_status if verdict is None else verdict
        if not succeeded:
            raise self._failure(endpoint, response, body_format, settings)

        if not endpoint.kind.has_output:
            return None
        if downloaded:
            return response.path
        return decode_body(
            response.body,
            endpoint.output_type,  # type: ignore[attr-defined]
            endpoint.output_format,  # type: ignore[attr-defined]
            settings,
            operation_name=name,
        )

    def _validate_response(self, endpoint: Endpoint, response: TransportResponse) -> bool | None:
        try:
            return self._service.validate_response(response, endpoint)
        except ResponseValidationError:
            raise
        except Exception as e:
            raise ResponseValidationError(
                f"Response rejected: {e}",
                status_code=response.status,
                cause=e,
                operation_name=endpoint.name,
            ) from e

    def _validate_basic_response(
        self, endpoint: Endpoint, response: TransportResponse, basic: Any
    ) -> None:
        try:
            self._service.validate_basic_response(basic, endpoint)
        except ResponseValidationError:
            raise
        except Exception as e:
            raise ResponseValidationError(
                f"Basic response rejected: {e}",
                status_code=response.status,
                cause=e,
                operation_name=endpoint.name,
            ) from e

    def _decoder_settings(self, endpoint: Endpoint) -> DecoderSettings:
        settings = DecoderSettings()
        try:
            self._service.configure_decoder(settings)
        except RestError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"configure_decoder hook failed: {e}", operation_name=endpoint.name
            ) from e
        return settings

    @staticmethod
    def _body_format(endpoint: Endpoint) -> OutputFormat:
        if endpoint.kind.has_output:
            return endpoint.output_format  # type: ignore[attr-defined]
        return OutputFormat.JSON

    def _failure(
        self,
        endpoint: Endpoint,
        response: TransportResponse,
        body_format: OutputFormat,
        settings: DecoderSettings,
    ) -> RestError:
        body = response.read_body()
        if self._service.has_error_response and body.strip():
            try:
                error_response = decode_body(
                    body, self._service.error_response_type, body_format, settings
                )
            except DecodingError:
                logger.debug(
                    "Error body did not match error response type",
                    extra={"operation": endpoint.name, "status": response.status},
                )
            else:
                return ServiceError(
                    error_response, status_code=response.status, operation_name=endpoint.name
                )
        return StatusError(response.status, body=body_excerpt(body), operation_name=endpoint.name)
