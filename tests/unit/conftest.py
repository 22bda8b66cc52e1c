"""Shared fixtures for unit tests.

Provides an in-memory transport that records requests and answers with a
canned or computed response, plus a few ready-made services and endpoints.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from pydantic import BaseModel

from laakhay.rest import (
    EmptyEndpoint,
    HTTPMethod,
    InOutEndpoint,
    OutEndpoint,
    TransportFailure,
    TransportRequest,
    TransportResponse,
    WebService,
)


class Credentials(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    token: str


class StubTransport:
    """Transport double answering from memory.

    Args:
        status: Status code of the canned response
        body: Body of the canned response
        headers: Headers of the canned response
        failure: Exception raised instead of answering
        responder: Computes the response from the request (overrides status/body)
        chunk_size: Size of the progress steps reported while "receiving"
        report_total: Report the body length as total (False means unknown size)
    """

    def __init__(
        self,
        status: int = 200,
        body: bytes = b"",
        *,
        headers: dict[str, str] | None = None,
        failure: BaseException | None = None,
        responder: Callable[[TransportRequest], TransportResponse] | None = None,
        chunk_size: int = 4,
        report_total: bool = True,
    ) -> None:
        self.status = status
        self.body = body
        self.headers = headers or {}
        self.failure = failure
        self.responder = responder
        self.chunk_size = chunk_size
        self.report_total = report_total
        self.requests: list[TransportRequest] = []
        self.destinations: list[Path] = []

    def _respond(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        if self.failure is not None:
            raise self.failure
        if self.responder is not None:
            return self.responder(request)
        return TransportResponse(
            status=self.status, headers=self.headers, body=self.body, url=request.url
        )

    def _emit(self, size: int, on_progress) -> None:
        if on_progress is None:
            return
        total = size if self.report_total else None
        received = 0
        while received < size:
            received = min(size, received + self.chunk_size)
            on_progress(received, total)

    async def send(self, request, *, on_progress=None):
        response = self._respond(request)
        self._emit(len(response.body), on_progress)
        return response

    async def download(self, request, destination: Path, *, on_progress=None):
        self.destinations.append(destination)
        response = self._respond(request)
        destination.write_bytes(response.body)
        self._emit(len(response.body), on_progress)
        return TransportResponse(
            status=response.status, headers=response.headers, path=destination, url=request.url
        )


@pytest.fixture
def transport_factory():
    """Create stub transports."""
    return StubTransport


@pytest.fixture
def make_service():
    """Create a service bound to a transport."""

    def factory(transport, base_url: str = "https://example.com", **kwargs) -> WebService:
        return WebService(base_url, transport=transport, **kwargs)

    return factory


@pytest.fixture
def status_endpoint() -> EmptyEndpoint:
    return EmptyEndpoint(path="/status")


@pytest.fixture
def login_endpoint() -> InOutEndpoint:
    return InOutEndpoint(
        method=HTTPMethod.POST,
        path="/login",
        input_type=Credentials,
        output_type=Token,
        operation_name="login",
    )


@pytest.fixture
def token_endpoint() -> OutEndpoint:
    return OutEndpoint(path="token", output_type=Token)


@pytest.fixture
def connection_refused() -> TransportFailure:
    return TransportFailure("Connection refused")
