"""Per-request encoder and decoder settings.

A fresh settings object is created for every request and handed to the
service's ``configure_encoder`` / ``configure_decoder`` hook before use, so a
hook may mutate it freely without affecting concurrent requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.enums import DateEncoding


@dataclass
class EncoderSettings:
    """Options applied when turning request input into wire data.

    Attributes:
        by_alias: Serialize pydantic fields under their aliases
        exclude_none: Drop fields whose value is None
        date_encoding: How ``datetime``/``date`` values are written
        sort_keys: Sort mapping keys (JSON and flattened forms)
        xml_root: Root element name for XML bodies (defaults to the type name)
    """

    by_alias: bool = True
    exclude_none: bool = True
    date_encoding: DateEncoding = DateEncoding.ISO8601
    sort_keys: bool = False
    xml_root: str | None = None


@dataclass
class DecoderSettings:
    """Options applied when validating response bodies.

    Attributes:
        strict: Use pydantic strict mode (no type coercion)
        context: Validation context passed to pydantic validators
        xml_list_tags: Element names always decoded as lists, even when a
            single child is present
    """

    strict: bool = False
    context: dict[str, Any] | None = None
    xml_list_tags: set[str] = field(default_factory=set)
