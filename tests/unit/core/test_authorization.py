"""Unit tests for authorization values."""

import base64

import pytest

from laakhay.rest.core import (
    BasicAuthorization,
    BearerAuthorization,
    CustomAuthorization,
    NoAuthorization,
)


def test_no_authorization_adds_nothing():
    auth = NoAuthorization()
    assert auth.header() is None
    assert not auth.is_present


def test_basic_authorization_header():
    name, value = BasicAuthorization("user", "pass").header()
    assert name == "Authorization"
    assert value == "Basic " + base64.b64encode(b"user:pass").decode()


def test_bearer_authorization_header():
    assert BearerAuthorization("abc").header() == ("Authorization", "Bearer abc")


def test_custom_authorization_header():
    auth = CustomAuthorization("X-API-Key", "secret")
    assert auth.header() == ("X-API-Key", "secret")
    assert auth.is_present


def test_custom_authorization_requires_header_name():
    with pytest.raises(ValueError):
        CustomAuthorization("", "secret")


def test_secrets_hidden_from_repr():
    assert "pass" not in repr(BasicAuthorization("user", "pass"))
    assert "abc" not in repr(BearerAuthorization("abc"))
    assert "secret" not in repr(CustomAuthorization("X-API-Key", "secret"))
