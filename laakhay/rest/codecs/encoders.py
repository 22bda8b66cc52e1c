"""Request input encoders, one per ``InputFormat``.

Architecture:
    Input values are first reduced to plain Python data with pydantic
    (``to_plain``), then written by the encoder registered for the endpoint's
    input format. Every encoder returns an ``EncodedInput`` describing the
    body, its content type and any query parameters, leaving URL and header
    assembly to the request builder.

Design Decisions:
    - Field order follows the input shape's declaration order (or insertion
      order for mappings); nothing is sorted unless ``sort_keys`` is set, so
      encoding the same input twice yields identical bytes
    - Multipart bodies are produced by ``aiohttp.MultipartWriter`` into an
      in-memory buffer, which makes the encoders coroutines
    - Flattened forms (query string, url-encoded body, multipart fields) use
      repeated keys for lists and ``parent[child]`` keys for nested mappings
"""

from __future__ import annotations

import base64
import json
import uuid
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from pathlib import PurePath
from typing import Any
from urllib.parse import urlencode
from uuid import UUID
from xml.etree import ElementTree

from aiohttp import MultipartWriter
from aiohttp.payload import BytesPayload, StringPayload
from pydantic import TypeAdapter

from ..core.enums import DateEncoding, InputFormat
from .settings import EncoderSettings


@dataclass(frozen=True)
class EncodedInput:
    """Wire form of a request input."""

    body: bytes | None = None
    content_type: str | None = None
    query: list[tuple[str, str]] | None = None


Encoder = Callable[[Any, Any, EncoderSettings], Awaitable[EncodedInput]]


@lru_cache(maxsize=256)
def type_adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def to_plain(value: Any, settings: EncoderSettings) -> Any:
    """Reduce an input value to dicts, lists and scalars.

    Scalars that JSON cannot represent (datetimes, decimals, bytes, enums) are
    kept as objects and converted later by ``encode_scalar``.
    """
    if value is None:
        return None
    return type_adapter(type(value)).dump_python(
        value,
        mode="python",
        by_alias=settings.by_alias,
        exclude_none=settings.exclude_none,
    )


def encode_scalar(value: Any, settings: EncoderSettings) -> Any:
    """Convert a non-JSON scalar into a JSON-compatible value."""
    if isinstance(value, datetime):
        return _encode_datetime(value, settings.date_encoding)
    if isinstance(value, date):
        if settings.date_encoding is DateEncoding.ISO8601:
            return value.isoformat()
        return _encode_datetime(datetime.combine(value, time(), tzinfo=UTC), settings.date_encoding)
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (Decimal, UUID, PurePath)):
        return str(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not encodable")


def _encode_datetime(value: datetime, strategy: DateEncoding) -> str | float | int:
    if strategy is DateEncoding.SECONDS_SINCE_EPOCH:
        return value.timestamp()
    if strategy is DateEncoding.MILLISECONDS_SINCE_EPOCH:
        return int(round(value.timestamp() * 1000))
    return value.isoformat()


def scalar_to_text(value: Any, settings: EncoderSettings) -> str:
    """Render a scalar as text for forms, query strings and XML."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)) and not isinstance(value, Enum):
        return str(value)
    encoded = encode_scalar(value, settings)
    return encoded if isinstance(encoded, str) else str(encoded)


def flatten_fields(
    plain: Any, settings: EncoderSettings, *, keep_bytes: bool = False
) -> list[tuple[str, Any]]:
    """Flatten a mapping into ordered ``(key, value)`` pairs.

    Args:
        plain: Mapping produced by ``to_plain``
        settings: Encoder settings (date strategy, key sorting)
        keep_bytes: Leave ``bytes`` values untouched (multipart file parts)

    Raises:
        TypeError: If the input does not reduce to a mapping
    """
    if not isinstance(plain, Mapping):
        raise TypeError(
            f"Form and query encodings need an object input, got {type(plain).__name__}"
        )
    pairs: list[tuple[str, Any]] = []
    _flatten_into(pairs, None, plain, settings, keep_bytes)
    return pairs


def _flatten_into(
    pairs: list[tuple[str, Any]],
    prefix: str | None,
    value: Any,
    settings: EncoderSettings,
    keep_bytes: bool,
) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        items = sorted(value.items()) if settings.sort_keys else value.items()
        for key, item in items:
            name = str(key) if prefix is None else f"{prefix}[{key}]"
            _flatten_into(pairs, name, item, settings, keep_bytes)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _flatten_into(pairs, prefix, item, settings, keep_bytes)
    elif prefix is None:
        raise TypeError("Scalar values need a field name")
    elif keep_bytes and isinstance(value, (bytes, bytearray)):
        pairs.append((prefix, bytes(value)))
    else:
        pairs.append((prefix, scalar_to_text(value, settings)))


async def encode_json(value: Any, input_type: Any, settings: EncoderSettings) -> EncodedInput:
    plain = to_plain(value, settings)
    body = json.dumps(
        plain,
        default=lambda obj: encode_scalar(obj, settings),
        sort_keys=settings.sort_keys,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
    return EncodedInput(body=body, content_type=InputFormat.JSON.content_type)


async def encode_url_query(value: Any, input_type: Any, settings: EncoderSettings) -> EncodedInput:
    return EncodedInput(query=flatten_fields(to_plain(value, settings), settings))


async def encode_form_url_encoded(
    value: Any, input_type: Any, settings: EncoderSettings
) -> EncodedInput:
    pairs = flatten_fields(to_plain(value, settings), settings)
    return EncodedInput(
        body=urlencode(pairs).encode("ascii"),
        content_type=InputFormat.FORM_URL_ENCODED.content_type,
    )


class _BufferWriter:
    """Minimal stream writer collecting what ``MultipartWriter`` writes."""

    def __init__(self) -> None:
        self._chunks: list[bytes] = []

    async def write(self, chunk: bytes) -> None:
        self._chunks.append(bytes(chunk))

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


async def encode_form_data(
    value: Any, input_type: Any, settings: EncoderSettings, *, boundary: str | None = None
) -> EncodedInput:
    boundary = boundary or uuid.uuid4().hex
    writer = MultipartWriter("form-data", boundary=boundary)
    for name, field_value in flatten_fields(to_plain(value, settings), settings, keep_bytes=True):
        if isinstance(field_value, bytes):
            part = BytesPayload(field_value, content_type="application/octet-stream")
            part.set_content_disposition("form-data", name=name, filename=name)
        else:
            part = StringPayload(field_value)
            part.set_content_disposition("form-data", name=name)
        writer.append_payload(part)

    buffer = _BufferWriter()
    await writer.write(buffer)  # type: ignore[arg-type]
    return EncodedInput(
        body=buffer.getvalue(),
        content_type=f"{InputFormat.FORM_DATA.content_type}; boundary={boundary}",
    )


async def encode_xml(value: Any, input_type: Any, settings: EncoderSettings) -> EncodedInput:
    root = xml_element(xml_root_name(input_type, settings), to_plain(value, settings), settings)
    body = ElementTree.tostring(root, encoding="utf-8", xml_declaration=True)
    return EncodedInput(body=body, content_type=InputFormat.XML.content_type)


def xml_root_name(input_type: Any, settings: EncoderSettings) -> str:
    if settings.xml_root:
        return settings.xml_root
    name = getattr(input_type, "__name__", None)
    if not name or input_type in (dict, list, Mapping) or getattr(input_type, "__origin__", None):
        return "root"
    return name


def xml_element(tag: str, value: Any, settings: EncoderSettings) -> ElementTree.Element:
    """Build an element tree; lists at document level become ``<item>`` children."""
    element = ElementTree.Element(tag)
    if isinstance(value, Mapping):
        items = sorted(value.items()) if settings.sort_keys else value.items()
        for key, item in items:
            if item is None:
                continue
            if isinstance(item, (list, tuple, set, frozenset)):
                for entry in item:
                    element.append(xml_element(str(key), entry, settings))
            else:
                element.append(xml_element(str(key), item, settings))
    elif isinstance(value, (list, tuple, set, frozenset)):
        for entry in value:
            element.append(xml_element("item", entry, settings))
    elif value is not None:
        element.text = scalar_to_text(value, settings)
    return element


ENCODERS: dict[InputFormat, Encoder] = {
    InputFormat.JSON: encode_json,
    InputFormat.URL_QUERY: encode_url_query,
    InputFormat.FORM_URL_ENCODED: encode_form_url_encoded,
    InputFormat.FORM_DATA: encode_form_data,
    InputFormat.XML: encode_xml,
}


async def encode_input(
    value: Any, input_type: Any, input_format: InputFormat, settings: EncoderSettings
) -> EncodedInput:
    """Encode ``value`` with the encoder registered for ``input_format``."""
    return await ENCODERS[input_format](value, input_type, settings)
