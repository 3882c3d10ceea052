"""Shared fixtures: a recording fake upstream and a TestClient wired to it."""

import pytest
from fastapi.testclient import TestClient

from gemini_gateway.app import app
from gemini_gateway.exceptions import UpstreamTransportError
from gemini_gateway.models.base import UpstreamClient
from gemini_gateway.routers.chat import get_upstream_client
from gemini_gateway.setting import GatewayConfig, get_gateway_config

TEST_CONFIG = GatewayConfig(
    api_key="test-key",
    api_base="https://gemini.example.com/v1beta",
    model="gemini-pro",
)

HELLO_PAYLOAD = {"candidates": [{"content": {"parts": [{"text": "hello"}]}}]}


class FakeUpstreamClient(UpstreamClient):
    """Records every call and answers with a canned payload or transport error."""

    def __init__(self, payload=None, error: str | None = None):
        self.payload = HELLO_PAYLOAD if payload is None else payload
        self.error = error
        self.calls = []

    async def post_json(self, url, params, body):
        self.calls.append({"url": url, "params": params, "body": body})
        if self.error is not None:
            raise UpstreamTransportError(self.error)
        return self.payload


@pytest.fixture
def upstream():
    return FakeUpstreamClient()


@pytest.fixture
def gateway_config():
    return TEST_CONFIG


@pytest.fixture
def client(upstream, gateway_config):
    app.dependency_overrides[get_gateway_config] = lambda: gateway_config
    app.dependency_overrides[get_upstream_client] = lambda: upstream
    yield TestClient(app)
    app.dependency_overrides.clear()
