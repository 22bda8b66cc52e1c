"""Unit tests for request input encoders."""

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from urllib.parse import parse_qsl

import pytest
from pydantic import BaseModel, Field

from laakhay.rest.codecs import EncoderSettings
from laakhay.rest.codecs.encoders import (
    encode_form_data,
    encode_form_url_encoded,
    encode_input,
    encode_json,
    encode_url_query,
    encode_xml,
    flatten_fields,
    scalar_to_text,
)
from laakhay.rest.core import DateEncoding, InputFormat


class Credentials(BaseModel):
    username: str
    password: str


class Color(str, Enum):
    RED = "red"


class Search(BaseModel):
    query: str = Field(alias="q")
    tags: list[str] = []
    page: int | None = None
    exact: bool = False


class Event(BaseModel):
    name: str
    at: datetime


class Upload(BaseModel):
    title: str
    data: bytes


MOMENT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestJSONEncoding:
    @pytest.mark.asyncio
    async def test_model_encodes_in_declaration_order(self):
        encoded = await encode_json(
            Credentials(username="u", password="p"), Credentials, EncoderSettings()
        )
        assert encoded.body == b'{"username":"u","password":"p"}'
        assert encoded.content_type == "application/json"
        assert encoded.query is None

    @pytest.mark.asyncio
    async def test_aliases_and_none_handling(self):
        search = Search(q="btc")
        encoded = await encode_json(search, Search, EncoderSettings())
        assert json.loads(encoded.body) == {"q": "btc", "tags": [], "exact": False}

        encoded = await encode_json(
            search, Search, EncoderSettings(by_alias=False, exclude_none=False)
        )
        assert json.loads(encoded.body) == {
            "query": "btc",
            "tags": [],
            "page": None,
            "exact": False,
        }

    @pytest.mark.asyncio
    async def test_same_input_same_bytes(self):
        value = {"b": 1, "a": [1, 2], "c": {"z": None}}
        first = await encode_json(value, dict, EncoderSettings())
        second = await encode_json(value, dict, EncoderSettings())
        assert first.body == second.body

    @pytest.mark.asyncio
    async def test_sort_keys(self):
        encoded = await encode_json({"b": 1, "a": 2}, dict, EncoderSettings(sort_keys=True))
        assert encoded.body == b'{"a":2,"b":1}'

    @pytest.mark.asyncio
    async def test_non_ascii_kept(self):
        encoded = await encode_json({"name": "café"}, dict, EncoderSettings())
        assert encoded.body == '{"name":"café"}'.encode()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("strategy", "expected"),
        [
            (DateEncoding.ISO8601, "2024-01-02T03:04:05+00:00"),
            (DateEncoding.SECONDS_SINCE_EPOCH, 1704164645.0),
            (DateEncoding.MILLISECONDS_SINCE_EPOCH, 1704164645000),
        ],
    )
    async def test_date_strategies(self, strategy, expected):
        encoded = await encode_json(
            Event(name="launch", at=MOMENT), Event, EncoderSettings(date_encoding=strategy)
        )
        assert json.loads(encoded.body) == {"name": "launch", "at": expected}

    @pytest.mark.asyncio
    async def test_unencodable_value_raises(self):
        with pytest.raises((TypeError, ValueError)):
            await encode_json({"value": object()}, dict, EncoderSettings())


class TestFlattenedEncodings:
    def test_flatten_lists_and_nested_mappings(self):
        pairs = flatten_fields(
            {"q": "x", "tags": ["a", "b"], "filter": {"min": 1, "max": None}},
            EncoderSettings(),
        )
        assert pairs == [("q", "x"), ("tags", "a"), ("tags", "b"), ("filter[min]", "1")]

    def test_flatten_requires_mapping(self):
        with pytest.raises(TypeError, match="object input"):
            flatten_fields([1, 2], EncoderSettings())

    def test_scalar_text(self):
        settings = EncoderSettings()
        assert scalar_to_text(True, settings) == "true"
        assert scalar_to_text(False, settings) == "false"
        assert scalar_to_text(2.5, settings) == "2.5"
        assert scalar_to_text(Decimal("1.10"), settings) == "1.10"
        assert scalar_to_text(Color.RED, settings) == "red"
        assert scalar_to_text(date(2024, 1, 2), settings) == "2024-01-02"

    @pytest.mark.asyncio
    async def test_url_query(self):
        encoded = await encode_url_query(
            Search(q="btc", tags=["spot", "perp"], exact=True), Search, EncoderSettings()
        )
        assert encoded.body is None
        assert encoded.content_type is None
        assert encoded.query == [
            ("q", "btc"),
            ("tags", "spot"),
            ("tags", "perp"),
            ("exact", "true"),
        ]

    @pytest.mark.asyncio
    async def test_form_url_encoded(self):
        encoded = await encode_form_url_encoded(
            Credentials(username="a b", password="p&q"), Credentials, EncoderSettings()
        )
        assert encoded.content_type == "application/x-www-form-urlencoded"
        assert encoded.body == b"username=a+b&password=p%26q"
        assert parse_qsl(encoded.body.decode()) == [("username", "a b"), ("password", "p&q")]

    @pytest.mark.asyncio
    async def test_form_dates_follow_strategy(self):
        encoded = await encode_form_url_encoded(
            Event(name="x", at=MOMENT),
            Event,
            EncoderSettings(date_encoding=DateEncoding.MILLISECONDS_SINCE_EPOCH),
        )
        assert encoded.body == b"name=x&at=1704164645000"


class TestFormDataEncoding:
    @pytest.mark.asyncio
    async def test_parts_and_content_type(self):
        encoded = await encode_form_data(
            Upload(title="report", data=b"\x00\x01"),
            Upload,
            EncoderSettings(),
            boundary="testboundary",
        )
        assert encoded.content_type == "multipart/form-data; boundary=testboundary"
        body = encoded.body
        assert body.startswith(b"--testboundary\r\n")
        assert body.rstrip().endswith(b"--testboundary--")
        assert b'name="title"' in body
        assert b"report" in body
        assert b'filename="data"' in body
        assert b"application/octet-stream" in body
        assert b"\x00\x01" in body

    @pytest.mark.asyncio
    async def test_output_differs_only_in_boundary(self):
        value = Credentials(username="u", password="p")
        first = await encode_form_data(value, Credentials, EncoderSettings(), boundary="a" * 32)
        second = await encode_form_data(value, Credentials, EncoderSettings(), boundary="b" * 32)
        assert first.body != second.body
        assert first.body.replace(b"a" * 32, b"b" * 32) == second.body

    @pytest.mark.asyncio
    async def test_random_boundary_when_not_given(self):
        first = await encode_form_data({"a": "1"}, dict, EncoderSettings())
        second = await encode_form_data({"a": "1"}, dict, EncoderSettings())
        assert first.content_type != second.content_type


class TestXMLEncoding:
    @pytest.mark.asyncio
    async def test_root_named_after_type(self):
        encoded = await encode_xml(
            Credentials(username="u", password="p"), Credentials, EncoderSettings()
        )
        assert encoded.content_type == "application/xml"
        assert encoded.body.startswith(b"<?xml")
        assert encoded.body.endswith(
            b"<Credentials><username>u</username><password>p</password></Credentials>"
        )

    @pytest.mark.asyncio
    async def test_configured_root_and_repeated_elements(self):
        encoded = await encode_xml(
            Search(q="btc", tags=["a", "b"]), Search, EncoderSettings(xml_root="search")
        )
        assert encoded.body.endswith(
            b"<search><q>btc</q><tags>a</tags><tags>b</tags><exact>false</exact></search>"
        )

    @pytest.mark.asyncio
    async def test_top_level_list_uses_item_elements(self):
        encoded = await encode_xml([1, 2], list[int], EncoderSettings())
        assert encoded.body.endswith(b"<root><item>1</item><item>2</item></root>")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("input_format", "content_type"),
    [
        (InputFormat.JSON, "application/json"),
        (InputFormat.URL_QUERY, None),
        (InputFormat.FORM_URL_ENCODED, "application/x-www-form-urlencoded"),
        (InputFormat.XML, "application/xml"),
    ],
)
async def test_encode_input_dispatches_by_format(input_format, content_type):
    encoded = await encode_input(
        Credentials(username="u", password="p"), Credentials, input_format, EncoderSettings()
    )
    assert encoded.content_type == content_type
