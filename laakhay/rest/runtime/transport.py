"""Transport collaborator interface and the default aiohttp implementation.

A transport performs one fully formed ``TransportRequest`` and returns the raw
``TransportResponse``. It knows nothing about endpoints, codecs or the error
taxonomy; when no response is obtained at all it raises ``TransportFailure``,
which the pipeline reports as a connectivity error.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiohttp

from ..core.request import TransportRequest, TransportResponse

ByteProgress = Callable[[int, int | None], None]

DEFAULT_CHUNK_SIZE = 64 * 1024


class TransportFailure(Exception):
    """No response was obtained (timeout, DNS failure, connection refused)."""


@runtime_checkable
class Transport(Protocol):
    """What the pipeline needs from an HTTP transport."""

    async def send(
        self, request: TransportRequest, *, on_progress: ByteProgress | None = None
    ) -> TransportResponse:
        """Perform ``request`` and buffer the whole response body."""
        ...

    async def download(
        self,
        request: TransportRequest,
        destination: Path,
        *,
        on_progress: ByteProgress | None = None,
    ) -> TransportResponse:
        """Perform ``request`` streaming the response body into ``destination``."""
        ...


class AiohttpTransport:
    """Transport backed by an ``aiohttp.ClientSession``.

    The session is created lazily on first use and recreated if it was closed.
    A session is bound to the event loop it was created on, so one instance
    must only be used from a single loop.
    """

    def __init__(self, timeout: float = 30.0, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.chunk_size = chunk_size
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def _request_timeout(self, request: TransportRequest) -> aiohttp.ClientTimeout:
        if request.timeout is None:
            return self.timeout
        return aiohttp.ClientTimeout(total=request.timeout)

    async def send(
        self, request: TransportRequest, *, on_progress: ByteProgress | None = None
    ) -> TransportResponse:
        chunks: list[bytes] = []

        def sink(chunk: bytes) -> None:
            chunks.append(chunk)

        response = await self._perform(request, sink, on_progress)
        return TransportResponse(
            status=response.status,
            headers=response.headers,
            body=b"".join(chunks),
            url=response.url,
        )

    async def download(
        self,
        request: TransportRequest,
        destination: Path,
        *,
        on_progress: ByteProgress | None = None,
    ) -> TransportResponse:
        with destination.open("wb") as handle:
            response = await self._perform(request, handle.write, on_progress)
        return TransportResponse(
            status=response.status,
            headers=response.headers,
            path=destination,
            url=response.url,
        )

    async def _perform(
        self,
        request: TransportRequest,
        sink: Callable[[bytes], object],
        on_progress: ByteProgress | None,
    ) -> aiohttp.ClientResponse:
        try:
            async with self.session.request(
                request.method.value,
                request.url,
                headers=request.headers,
                data=request.body,
                timeout=self._request_timeout(request),
            ) as response:
                total = response.content_length
                received = 0
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    sink(chunk)
                    received += len(chunk)
                    if on_progress is not None:
                        on_progress(received, total)
                return response
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailure(str(e) or e.__class__.__name__) from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> AiohttpTransport:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


_default_transports: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, AiohttpTransport] = (
    weakref.WeakKeyDictionary()
)


def get_default_transport() -> AiohttpTransport:
    """Get the shared transport for the running event loop.

    Services without a transport of their own use it. One instance is kept per
    loop because aiohttp sessions cannot be shared between loops.
    """
    loop = asyncio.get_running_loop()
    transport = _default_transports.get(loop)
    if transport is None:
        transport = AiohttpTransport()
        _default_transports[loop] = transport
    return transport


async def close_default_transport() -> None:
    """Close the shared transport of the running event loop, if any."""
    transport = _default_transports.pop(asyncio.get_running_loop(), None)
    if transport is not None:
        await transport.close()
