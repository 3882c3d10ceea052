import asyncio
import json

import httpx
import pytest

from gemini_gateway.exceptions import UpstreamTransportError
from gemini_gateway.models.gemini import HttpxUpstreamClient

URL = "https://gemini.example.com/v1beta/models/gemini-pro:generateContent"


def test_post_json_sends_key_as_query_parameter():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = request.url
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(status_code=200, json={"candidates": []})

    client = HttpxUpstreamClient(transport=httpx.MockTransport(handler))
    body = {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}

    payload = asyncio.run(client.post_json(URL, params={"key": "secret"}, body=body))

    assert payload == {"candidates": []}
    assert seen["method"] == "POST"
    assert seen["url"].params["key"] == "secret"
    assert seen["url"].path == "/v1beta/models/gemini-pro:generateContent"
    assert seen["content_type"] == "application/json"
    assert seen["body"] == body


def test_post_json_returns_error_payloads_regardless_of_status():
    transport = httpx.MockTransport(
        lambda _request: httpx.Response(status_code=400, json={"error": {"message": "API key not valid"}})
    )
    client = HttpxUpstreamClient(transport=transport)

    payload = asyncio.run(client.post_json(URL, params={"key": "bad"}, body={"contents": []}))

    assert payload == {"error": {"message": "API key not valid"}}


def test_post_json_wraps_connection_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpxUpstreamClient(transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamTransportError) as exc_info:
        asyncio.run(client.post_json(URL, params={"key": "k"}, body={"contents": []}))

    assert exc_info.value.body == {"error": "connection refused"}


def test_post_json_wraps_non_json_bodies():
    transport = httpx.MockTransport(
        lambda _request: httpx.Response(status_code=502, text="<html>Bad Gateway</html>")
    )
    client = HttpxUpstreamClient(transport=transport)

    with pytest.raises(UpstreamTransportError) as exc_info:
        asyncio.run(client.post_json(URL, params={"key": "k"}, body={"contents": []}))

    assert exc_info.value.status_code == 500
