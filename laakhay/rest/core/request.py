"""Transport-level request and response values.

``TransportRequest`` is what the request builder produces and what service
``configure_request`` hooks mutate. ``TransportResponse`` is what a transport
returns for either a buffered or a downloaded response.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from multidict import CIMultiDict
from yarl import URL

from .enums import HTTPMethod


@dataclass
class TransportRequest:
    """Fully formed request handed to a transport."""

    method: HTTPMethod
    url: URL
    headers: CIMultiDict[str] = field(default_factory=CIMultiDict)
    body: bytes | None = None
    timeout: float | None = None


@dataclass(frozen=True)
class TransportResponse:
    """Raw response as received by a transport.

    ``body`` holds the payload for buffered requests. For downloads ``body`` is
    empty and ``path`` points at the file the payload was streamed to.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    path: Path | None = None
    url: URL | None = None

    @property
    def is_success_status(self) -> bool:
        return 200 <= self.status <= 299

    def read_body(self) -> bytes:
        """Return the payload, reading it from disk for downloads."""
        if self.path is not None:
            return self.path.read_bytes()
        return self.body
