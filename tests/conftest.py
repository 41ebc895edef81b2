"""
Pytest configuration and fixtures.
"""

import json

import httpx
import pytest

from karbon_mcp.client import KarbonClient
from karbon_mcp.config import KarbonAPIConfig, KarbonConfig


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served"""

    def __init__(self, responder):
        self.requests = []

        def handler(request):
            self.requests.append(request)
            return responder(request)

        super().__init__(handler)

    @property
    def paths(self):
        return [request.url.path for request in self.requests]


@pytest.fixture
def api_config():
    return KarbonAPIConfig(bearer_token="test-token", access_key="test-access-key")


@pytest.fixture
def server_config(api_config):
    return KarbonConfig(api=api_config)


@pytest.fixture
def make_client(api_config):
    """Build a KarbonClient whose requests are answered by ``responder``"""
    def _make(responder):
        transport = RecordingTransport(responder)
        return KarbonClient(api_config, transport=transport), transport
    return _make


@pytest.fixture
def ok():
    """Responder that answers every request with the same JSON body"""
    def _ok(body):
        return lambda request: httpx.Response(200, json=body)
    return _ok


def payload(result):
    """Decode the single JSON text block of a ToolResult"""
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    return json.loads(result.content[0].text)
