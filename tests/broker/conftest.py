"""
Broker Test Configuration and Fixtures

Shared fixtures for session broker tests. The Vimeo API is replaced by an
httpx.MockTransport, so no request leaves the process.
"""

import json

import httpx
import pytest

from broker.models import BrokerConfig, UploadRequest

TEST_TOKEN = "test-vimeo-token"

VIMEO_SUCCESS_BODY = {
    "uri": "/videos/123456789",
    "name": "match.mp4",
    "link": "https://vimeo.com/123456789",
    "upload": {
        "approach": "tus",
        "size": 10_485_760,
        "upload_link": "https://files.vimeo.com/x",
    },
}


class FakeVimeoAPI:
    """
    Records requests and answers with a canned response.

    Usage:
        api = FakeVimeoAPI(status_code=401, body={"error": "Unauthorized"})
        client = api.client()
    """

    def __init__(self, status_code=200, body=None, raw_body=None, error=None):
        self.status_code = status_code
        self.body = VIMEO_SUCCESS_BODY if body is None else body
        self.raw_body = raw_body
        self.error = error
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.error is not None:
            raise self.error(f"Simulated {self.error.__name__}", request=request)

        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)

        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def fake_vimeo():
    """
    Provide a FakeVimeoAPI answering with a successful "create video".

    Usage:
        def test_something(fake_vimeo):
            fake_vimeo.status_code = 500
    """
    return FakeVimeoAPI()


@pytest.fixture
def broker_config():
    """BrokerConfig with a test token"""
    return BrokerConfig(access_token=TEST_TOKEN)


@pytest.fixture
def upload_request():
    """The 10 MiB scenario file"""
    return UploadRequest(
        file_name="match.mp4",
        file_size=10_485_760,
        file_type="video/mp4",
    )
