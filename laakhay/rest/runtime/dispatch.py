"""Delivery of callbacks to a caller-chosen execution context."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from collections.abc import Callable
from concurrent.futures import Executor
from typing import Any

logger = logging.getLogger(__name__)

CallbackContext = asyncio.AbstractEventLoop | Executor | None


class CallbackDispatcher:
    """Delivers the callbacks of one invocation in the order they were issued.

    Contexts:
        - None: call inline on whichever thread issues the delivery
        - asyncio event loop: ``call_soon_threadsafe`` (FIFO by construction)
        - ``concurrent.futures.Executor``: deliveries are queued and drained by
          a single submitted task at a time, so a multi-worker pool still sees
          them one after another

    Exceptions raised by a callback are logged and do not affect later
    deliveries.
    """

    def __init__(self, context: CallbackContext = None) -> None:
        if context is not None and not isinstance(context, (asyncio.AbstractEventLoop, Executor)):
            raise TypeError(
                f"callback_context must be an event loop or an Executor, got {type(context).__name__}"
            )
        self._context = context
        self._pending: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._lock = threading.Lock()
        self._draining = False

    @property
    def context(self) -> CallbackContext:
        return self._context

    def dispatch(self, callback: Callable[..., Any], *args: Any) -> None:
        context = self._context
        if context is None:
            _invoke(callback, args)
        elif isinstance(context, asyncio.AbstractEventLoop):
            context.call_soon_threadsafe(_invoke, callback, args)
        else:
            with self._lock:
                self._pending.append((callback, args))
                if self._draining:
                    return
                self._draining = True
            context.submit(self._drain)

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._draining = False
                    return
                callback, args = self._pending.popleft()
            _invoke(callback, args)


def _invoke(callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
    try:
        callback(*args)
    except Exception:
        logger.exception("Callback raised", extra={"callback": getattr(callback, "__name__", repr(callback))})
