"""Shared fixtures for integration tests."""

import os

import pytest

from laakhay.rest import WebService

# Skip all integration tests unless RUN_LAAKHAY_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_LAAKHAY_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_LAAKHAY_NETWORK_TESTS=1 to run",
)


class HttpBin(WebService):
    base_url = os.environ.get("LAAKHAY_HTTPBIN_URL", "https://httpbin.org")
    timeout = 15.0


@pytest.fixture
def httpbin() -> HttpBin:
    return HttpBin()
