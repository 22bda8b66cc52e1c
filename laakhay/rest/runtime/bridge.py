"""Callback and blocking entry points over the asynchronous execution core.

Architecture:
    Every invocation runs ``perform`` on a shared background event loop
    (``EventLoopThread``). The callback entry points return immediately and
    deliver progress and the single completion through a
    ``CallbackDispatcher``; the blocking entry point waits on a ``OneShot``
    filled by the completion callback.

Guarantees per invocation:
    - ``on_complete`` fires exactly once, with an ``Outcome``
    - every progress delivery happens before the completion delivery
    - for downloads, the file exists while ``on_complete`` runs and is removed
      right after it returns

Callers must not use ``make_synchronous_request`` from a thread that the
response needs in order to complete. Calling it from the background loop
thread itself is detected and rejected.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Coroutine
from concurrent.futures import Future
from pathlib import Path
from typing import Any

from ..core.endpoint import Endpoint
from ..core.exceptions import RestError
from ..core.outcome import Outcome
from ..core.service import WebService
from .dispatch import CallbackContext, CallbackDispatcher
from .executor import perform, perform_download
from .oneshot import OneShot
from .progress import ProgressCallback, ProgressReporter

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Outcome[Any]], None]


class EventLoopThread:
    """Event loop running forever on a daemon thread.

    Started lazily on first ``submit``.
    """

    def __init__(self, name: str = "laakhay-rest-loop") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._thread is None or not self._thread.is_alive():
                self._ready.clear()
                self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
                self._thread.start()
        self._ready.wait()
        loop = self._loop
        if loop is None:
            raise RuntimeError(f"Event loop thread {self._name!r} failed to start")
        return loop

    def _run(self) -> None:
        try:
            loop = asyncio.new_event_loop()
        except Exception:
            logger.exception("Failed to create event loop", extra={"loop_thread": self._name})
            self._loop = None
            self._ready.set()
            return
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    def is_current_thread(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future[Any]:
        """Schedule ``coro`` on the loop; return a thread-safe future."""
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the loop and join the thread."""
        with self._lock:
            thread, loop = self._thread, self._loop
            self._thread = None
        if thread is None or loop is None or not thread.is_alive():
            return
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout)


_default_loop_thread: EventLoopThread | None = None
_default_loop_lock = threading.Lock()


def get_event_loop_thread() -> EventLoopThread:
    """Get the shared background loop used by the callback and blocking APIs."""
    global _default_loop_thread
    with _default_loop_lock:
        if _default_loop_thread is None:
            _default_loop_thread = EventLoopThread()
        return _default_loop_thread


def make_request(
    endpoint: Endpoint,
    service: WebService | None = None,
    *,
    input: Any = None,
    callback_context: CallbackContext = None,
    on_progress: ProgressCallback | None = None,
    on_complete: CompletionCallback,
) -> Future[Outcome[Any]]:
    """Start a request without blocking.

    Args:
        endpoint: Endpoint descriptor
        service: Service configuration (defaults to the registered default)
        input: Input value for endpoints that take input
        callback_context: Event loop or executor to run callbacks on; None runs
            them on the background loop thread
        on_progress: Receives fractions in [0.0, 1.0], or None when the size
            is unknown
        on_complete: Receives the single ``Outcome``

    Returns:
        Future resolving to the outcome once ``on_complete`` has returned
    """
    return _start(
        endpoint,
        lambda on_bytes: perform(endpoint, service, input=input, on_bytes=on_bytes),
        callback_context=callback_context,
        on_progress=on_progress,
        on_complete=on_complete,
        cleanup=False,
    )


def make_download_request(
    endpoint: Endpoint,
    service: WebService | None = None,
    *,
    input: Any = None,
    callback_context: CallbackContext = None,
    on_progress: ProgressCallback | None = None,
    on_complete: Callable[[Outcome[Path]], None],
) -> Future[Outcome[Path]]:
    """Start a download without blocking.

    The path in a successful outcome exists only until ``on_complete``
    returns; move or open it inside the callback to keep the data.
    """
    return _start(
        endpoint,
        lambda on_bytes: perform_download(endpoint, service, input=input, on_bytes=on_bytes),
        callback_context=callback_context,
        on_progress=on_progress,
        on_complete=on_complete,
        cleanup=True,
    )


def make_synchronous_request(
    endpoint: Endpoint, service: WebService | None = None, *, input: Any = None
) -> Any:
    """Perform a request, blocking the calling thread until it completes.

    Returns:
        Decoded output, or None for endpoints without output

    Raises:
        RestError: The classified failure
        RuntimeError: If called from the background loop thread
    """
    if get_event_loop_thread().is_current_thread():
        raise RuntimeError(
            "make_synchronous_request cannot run on the request loop thread; "
            "await the endpoint's execute() instead"
        )
    result: OneShot[Outcome[Any]] = OneShot()
    make_request(endpoint, service, input=input, on_complete=result.set)
    return result.wait().unwrap()


def _start(
    endpoint: Endpoint,
    factory: Callable[[ProgressReporter | None], Coroutine[Any, Any, Outcome[Any]]],
    *,
    callback_context: CallbackContext,
    on_progress: ProgressCallback | None,
    on_complete: Callable[[Outcome[Any]], None],
    cleanup: bool,
) -> Future[Outcome[Any]]:
    dispatcher = CallbackDispatcher(callback_context)
    reporter = ProgressReporter(on_progress, dispatcher.dispatch) if on_progress else None
    result: Future[Outcome[Any]] = Future()

    def complete(outcome: Outcome[Any]) -> None:
        try:
            on_complete(outcome)
        finally:
            if cleanup and outcome.is_success and isinstance(outcome.value, Path):
                outcome.value.unlink(missing_ok=True)
            result.set_result(outcome)

    def done(task: Future[Outcome[Any]]) -> None:
        if reporter is not None:
            reporter.close()
        outcome = _outcome_of(endpoint, task)
        dispatcher.dispatch(complete, outcome)

    get_event_loop_thread().submit(factory(reporter)).add_done_callback(done)
    return result


def _outcome_of(endpoint: Endpoint, task: Future[Outcome[Any]]) -> Outcome[Any]:
    if task.cancelled():
        return Outcome.failure(RestError("Request was cancelled", operation_name=endpoint.name))
    error = task.exception()
    if error is None:
        return task.result()
    logger.error(
        "Unexpected error during request",
        exc_info=error,
        extra={"operation": endpoint.name},
    )
    wrapped = RestError(f"Unexpected error: {error!r}", operation_name=endpoint.name)
    wrapped.__cause__ = error
    return Outcome.failure(wrapped)
