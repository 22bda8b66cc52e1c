"""Service-level authorization values.

A service carries exactly one authorization value. The request builder asks it
for the header to attach after the body has been encoded.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field


class Authorization:
    """Base class for authorization values."""

    def header(self) -> tuple[str, str] | None:
        """Return the ``(name, value)`` header to attach, or None."""
        return None

    @property
    def is_present(self) -> bool:
        return self.header() is not None


@dataclass(frozen=True)
class NoAuthorization(Authorization):
    """No credentials; nothing is attached."""


@dataclass(frozen=True)
class BasicAuthorization(Authorization):
    """HTTP basic credentials."""

    username: str
    password: str = field(repr=False)

    def header(self) -> tuple[str, str]:
        token = base64.b64encode(f"{self.username}:{self.password}".encode()).decode("ascii")
        return "Authorization", f"Basic {token}"


@dataclass(frozen=True)
class BearerAuthorization(Authorization):
    """Bearer token credentials."""

    token: str = field(repr=False)

    def header(self) -> tuple[str, str]:
        return "Authorization", f"Bearer {self.token}"


@dataclass(frozen=True)
class CustomAuthorization(Authorization):
    """Arbitrary header carrying credentials (e.g. ``X-API-Key``)."""

    header_name: str
    value: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.header_name:
            raise ValueError("header_name must be a non-empty string")

    def header(self) -> tuple[str, str]:
        return self.header_name, self.value
