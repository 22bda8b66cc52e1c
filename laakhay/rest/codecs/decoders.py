"""Response body decoders, one per ``OutputFormat``.

Bodies are validated against the requested shape with a pydantic
``TypeAdapter``. JSON is validated directly from bytes; XML is parsed with
``xml.etree.ElementTree`` into plain data first. Any failure is reported as a
``DecodingError`` carrying the location of the first problem.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, MutableSequence, Sequence
from types import UnionType
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints
from xml.etree import ElementTree

from pydantic import BaseModel, ValidationError

from ..core.enums import OutputFormat
from ..core.exceptions import DecodingError, body_excerpt
from .encoders import type_adapter
from .settings import DecoderSettings

Decoder = Callable[[bytes, Any, DecoderSettings], Any]


def decode_json(body: bytes, shape: Any, settings: DecoderSettings) -> Any:
    adapter = type_adapter(shape)
    if not body.strip():
        return adapter.validate_python(None, strict=settings.strict or None, context=settings.context)
    return adapter.validate_json(body, strict=settings.strict or None, context=settings.context)


def decode_xml(body: bytes, shape: Any, settings: DecoderSettings) -> Any:
    data = xml_to_python(body, settings, shape) if body.strip() else None
    return type_adapter(shape).validate_python(data, strict=settings.strict or None, context=settings.context)


def xml_to_python(body: bytes, settings: DecoderSettings, shape: Any = Any) -> Any:
    """Parse an XML document into dicts, lists and strings.

    The root element becomes the top-level object. ``shape`` guides the
    conversion: list-typed fields stay lists even with a single (or no) child
    element, and empty elements for string fields decode to ``""``. Without a
    shape, a root whose children are all ``<item>`` elements decodes to a list.
    """
    root = ElementTree.fromstring(body)
    children = list(root)
    is_list, item_shape = _list_item(shape)
    if is_list or (
        not _field_shapes(shape) and children and all(child.tag == "item" for child in children)
    ):
        return [_element_to_python(child, settings, item_shape) for child in children]
    return _element_to_python(root, settings, shape)


def _element_to_python(element: ElementTree.Element, settings: DecoderSettings, shape: Any) -> Any:
    children = list(element)
    fields = _field_shapes(shape)
    if not children and not fields:
        if element.attrib:
            data: dict[str, Any] = dict(element.attrib)
            if element.text and element.text.strip():
                data["text"] = element.text
            return data
        if element.text is None and _unwrap_optional(shape) is str:
            return ""
        return element.text
    grouped: dict[str, list[ElementTree.Element]] = {}
    for child in children:
        grouped.setdefault(child.tag, []).append(child)
    result: dict[str, Any] = dict(element.attrib)
    for tag, elements in grouped.items():
        is_list, item_shape = _list_item(fields.get(tag, Any))
        values = [_element_to_python(child, settings, item_shape) for child in elements]
        if is_list or len(values) > 1 or tag in settings.xml_list_tags:
            result[tag] = values
        else:
            result[tag] = values[0]
    # Empty lists are written as no elements at all
    for tag, field_shape in fields.items():
        if tag not in result and _list_item(field_shape)[0]:
            result[tag] = []
    return result


def _unwrap_optional(shape: Any) -> Any:
    origin = get_origin(shape)
    if origin is Annotated:
        return _unwrap_optional(get_args(shape)[0])
    if origin in (Union, UnionType):
        members = [arg for arg in get_args(shape) if arg is not type(None)]
        if len(members) == 1:
            return _unwrap_optional(members[0])
    return shape


def _list_item(shape: Any) -> tuple[bool, Any]:
    """Return whether ``shape`` is a sequence type, and its item shape."""
    shape = _unwrap_optional(shape)
    if shape in _SEQUENCE_TYPES:
        return True, Any
    if get_origin(shape) in _SEQUENCE_TYPES:
        args = get_args(shape)
        return True, args[0] if args else Any
    return False, shape


def _field_shapes(shape: Any) -> dict[str, Any]:
    """Element names of an object shape mapped to their field shapes."""
    shape = _unwrap_optional(shape)
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        return {
            info.alias or name: info.annotation for name, info in shape.model_fields.items()
        }
    if isinstance(shape, type) and dataclasses.is_dataclass(shape):
        return get_type_hints(shape)
    return {}


_SEQUENCE_TYPES = (list, set, frozenset, tuple, Sequence, MutableSequence)


DECODERS: dict[OutputFormat, Decoder] = {
    OutputFormat.JSON: decode_json,
    OutputFormat.XML: decode_xml,
}


def decode_body(
    body: bytes,
    shape: Any,
    output_format: OutputFormat,
    settings: DecoderSettings,
    *,
    operation_name: str | None = None,
) -> Any:
    """Decode ``body`` into ``shape``.

    Raises:
        DecodingError: If the body is malformed or does not match the shape
    """
    try:
        return DECODERS[output_format](body, shape, settings)
    except ValidationError as e:
        error = e.errors()[0] if e.errors() else {}
        location = ".".join(str(part) for part in error.get("loc", ())) or "<document>"
        raise DecodingError(
            error.get("msg", str(e)),
            location=location,
            body=body_excerpt(body),
            cause=e,
            operation_name=operation_name,
        ) from e
    except ElementTree.ParseError as e:
        line, column = e.position
        raise DecodingError(
            f"Malformed XML: {e}",
            location=f"line {line}, column {column}",
            body=body_excerpt(body),
            cause=e,
            operation_name=operation_name,
        ) from e
