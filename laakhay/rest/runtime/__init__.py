"""Request execution runtime.

Architecture:
    - builder.py: Descriptor + service + input -> TransportRequest
    - transport.py: Transport interface and the aiohttp implementation
    - interpreter.py: TransportResponse -> value or classified error
    - executor.py: Async core running one invocation to an Outcome
    - bridge.py: Callback and blocking entry points on a background loop
    - progress.py / dispatch.py: Progress fractions and callback delivery
    - telemetry.py: Structured logging
"""

from .bridge import (
    EventLoopThread,
    get_event_loop_thread,
    make_download_request,
    make_request,
    make_synchronous_request,
)
from .builder import RequestBuilder
from .dispatch import CallbackDispatcher
from .executor import download, execute, perform, perform_download
from .interpreter import ResponseInterpreter
from .oneshot import OneShot
from .progress import ProgressReporter
from .transport import (
    AiohttpTransport,
    Transport,
    TransportFailure,
    close_default_transport,
    get_default_transport,
)

__all__ = [
    "RequestBuilder",
    "ResponseInterpreter",
    "Transport",
    "TransportFailure",
    "AiohttpTransport",
    "get_default_transport",
    "close_default_transport",
    "ProgressReporter",
    "CallbackDispatcher",
    "OneShot",
    "EventLoopThread",
    "get_event_loop_thread",
    "perform",
    "perform_download",
    "execute",
    "download",
    "make_request",
    "make_download_request",
    "make_synchronous_request",
]
