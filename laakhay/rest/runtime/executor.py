"""Asynchronous execution core shared by every calling convention.

``perform`` runs build, transport and interpretation for one invocation and
always returns an ``Outcome``; classified failures never escape as
exceptions. ``execute`` and ``download`` are the awaitable entry points for
code already running on an event loop. The callback and blocking entry points
in ``bridge`` schedule ``perform`` on a background loop.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
import time
from pathlib import Path
from typing import Any

import aiohttp

from ..core.endpoint import Endpoint
from ..core.exceptions import ConfigurationError, RestError
from ..core.outcome import Outcome
from ..core.service import WebService, resolve_service
from .builder import RequestBuilder
from .interpreter import ResponseInterpreter
from .progress import ProgressCallback, ProgressReporter
from .telemetry import log_request_completed, log_request_failed, log_request_started
from .transport import ByteProgress, TransportFailure, get_default_transport

DOWNLOAD_PREFIX = "laakhay-rest-"

_builder = RequestBuilder()


async def perform(
    endpoint: Endpoint,
    service: WebService | None = None,
    *,
    input: Any = None,
    on_bytes: ByteProgress | None = None,
    destination: Path | None = None,
) -> Outcome[Any]:
    """Run one invocation to its terminal outcome.

    Args:
        endpoint: Endpoint descriptor
        service: Service configuration (defaults to the registered default)
        input: Input value for endpoints that take input
        on_bytes: Receives ``(received, total)`` byte counts during transfer
        destination: Stream the body into this file instead of memory

    Returns:
        Outcome carrying the value or the classified ``RestError``
    """
    started = time.perf_counter()
    try:
        value, status = await _run(endpoint, service, input, on_bytes, destination)
    except RestError as e:
        log_request_failed(operation=endpoint.name, error=e, latency_ms=_elapsed_ms(started))
        return Outcome.failure(e)
    log_request_completed(operation=endpoint.name, status=status, latency_ms=_elapsed_ms(started))
    return Outcome.success(value)


async def _run(
    endpoint: Endpoint,
    service: WebService | None,
    input: Any,
    on_bytes: ByteProgress | None,
    destination: Path | None,
) -> tuple[Any, int]:
    resolved = resolve_service(service)
    request = await _builder.build(endpoint, resolved, input)
    transport = resolved.transport or get_default_transport()
    interpreter = ResponseInterpreter(resolved)

    log_request_started(
        operation=endpoint.name,
        method=request.method.value,
        url=str(request.url),
        download=destination is not None,
    )
    try:
        if destination is None:
            response = await transport.send(request, on_progress=on_bytes)
        else:
            response = await transport.download(request, destination, on_progress=on_bytes)
    except (TransportFailure, aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise interpreter.connectivity_error(endpoint, e) from e

    value = interpreter.interpret(endpoint, response, downloaded=destination is not None)
    return value, response.status


async def perform_download(
    endpoint: Endpoint,
    service: WebService | None = None,
    *,
    input: Any = None,
    on_bytes: ByteProgress | None = None,
) -> Outcome[Path]:
    """Like ``perform`` but streams the body to a new temporary file.

    On success the outcome holds the file path and the caller owns the file.
    On failure the file has already been removed.
    """
    if not endpoint.kind.has_output:
        return Outcome.failure(
            ConfigurationError("Downloads need an endpoint with output", operation_name=endpoint.name)
        )
    fd, name = tempfile.mkstemp(prefix=DOWNLOAD_PREFIX, suffix=".download")
    os.close(fd)
    path = Path(name)
    try:
        outcome = await perform(
            endpoint, service, input=input, on_bytes=on_bytes, destination=path
        )
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    if not outcome.is_success:
        path.unlink(missing_ok=True)
    return outcome


async def execute(
    endpoint: Endpoint,
    service: WebService | None = None,
    *,
    input: Any = None,
    on_progress: ProgressCallback | None = None,
) -> Any:
    """Run a request on the current loop; return its value or raise its error."""
    reporter = ProgressReporter(on_progress) if on_progress is not None else None
    try:
        outcome = await perform(endpoint, service, input=input, on_bytes=reporter)
    finally:
        if reporter is not None:
            reporter.close()
    return outcome.unwrap()


async def download(
    endpoint: Endpoint,
    service: WebService | None = None,
    *,
    input: Any = None,
    on_progress: ProgressCallback | None = None,
) -> Path:
    """Download a response body to a temporary file on the current loop.

    The caller owns the returned file and should remove it when done.
    """
    reporter = ProgressReporter(on_progress) if on_progress is not None else None
    try:
        outcome = await perform_download(endpoint, service, input=input, on_bytes=reporter)
    finally:
        if reporter is not None:
            reporter.close()
    return outcome.unwrap()  # type: ignore[return-value]


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
