"""
Test Suite for Provider Helper Functions and the Chat Completion Connector

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging

import pytest
import httpx

from connectors.chat import ChatCompletionConnector
from engine.enums import FailureKind
from providers.helpers import post_json
from providers.exceptions import (
    AuthenticationFailed,
    InvalidRequest,
    MalformedResponse,
    ProviderServerError,
    ProviderTimeout,
    ProviderUnavailable,
    RateLimited,
)


class DummyResponse:
    def __init__(self, status_code=200, text="", json_data=None, bad_json=False):
        self.status_code = status_code
        self.text = text
        self._json = json_data
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError("err", request=None, response=self)

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._json if self._json is not None else {}


class DummyClient:
    def __init__(self, resp: DummyResponse):
        self.resp = resp
        self.posted = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def post(self, url, json=None, headers=None):
        self.posted.append((url, json, headers))
        return self.resp


@pytest.mark.asyncio
async def test_post_json_success(monkeypatch):
    client = DummyClient(DummyResponse(json_data={"foo": "bar"}))
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    got = await post_json("url", {"a": 1}, headers={"h": "v"})
    assert got == {"foo": "bar"}
    assert client.posted == [("url", {"a": 1}, {"h": "v"})]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,expected",
    [
        (401, AuthenticationFailed),
        (403, AuthenticationFailed),
        (429, RateLimited),
        (500, ProviderServerError),
        (503, ProviderServerError),
        (400, InvalidRequest),
    ],
)
async def test_post_json_status_taxonomy(monkeypatch, status, expected):
    resp = DummyResponse(status_code=status, text="nope")
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    with pytest.raises(expected):
        await post_json("url", {})


@pytest.mark.asyncio
async def test_post_json_timeout(monkeypatch):
    async def post(*args, **kwargs):
        raise httpx.TimeoutException("timeout")
    client = DummyClient(DummyResponse())
    client.post = post
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    with pytest.raises(ProviderTimeout) as excinfo:
        await post_json("url", {})
    assert excinfo.value.kind == FailureKind.timeout


@pytest.mark.asyncio
async def test_post_json_unreachable(monkeypatch):
    async def post(*args, **kwargs):
        raise httpx.ConnectError("refused")
    client = DummyClient(DummyResponse())
    client.post = post
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    with pytest.raises(ProviderUnavailable):
        await post_json("http://ai.local", {})


@pytest.mark.asyncio
async def test_post_json_non_json_body(monkeypatch):
    resp = DummyResponse(bad_json=True)
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: DummyClient(resp))
    with pytest.raises(MalformedResponse):
        await post_json("url", {})


@pytest.mark.asyncio
async def test_chat_connector_request_shape(monkeypatch):
    client = DummyClient(DummyResponse(json_data={"choices": [{"message": {"content": "[]"}}]}))
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    connector = ChatCompletionConnector(api_key="sk-secret-value", base_url="http://ai.local/", model="m1")
    messages = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]
    body = await connector.complete(messages)
    assert body["choices"][0]["message"]["content"] == "[]"
    url, payload, headers = client.posted[0]
    assert url == "http://ai.local"
    assert payload == {"model": "m1", "messages": messages}
    assert headers["Authorization"] == "Bearer sk-secret-value"
    assert headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_chat_connector_rejects_non_object_body(monkeypatch):
    client = DummyClient(DummyResponse(json_data=["x"]))
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    connector = ChatCompletionConnector(api_key="k", base_url="http://ai.local")
    with pytest.raises(MalformedResponse):
        await connector.complete([])


@pytest.mark.asyncio
async def test_chat_connector_logs_only_key_prefix(monkeypatch, caplog):
    client = DummyClient(DummyResponse(json_data={"choices": []}))
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    connector = ChatCompletionConnector(api_key="sk-abcdefgh-SECRET", base_url="http://ai.local")
    with caplog.at_level(logging.DEBUG, logger="connectors.chat"):
        await connector.complete([])
    assert "sk-abcde..." in caplog.text
    assert "SECRET" not in caplog.text


@pytest.mark.asyncio
async def test_chat_connector_never_logs_a_short_key_in_full(monkeypatch, caplog):
    client = DummyClient(DummyResponse(json_data={"choices": []}))
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout: client)
    connector = ChatCompletionConnector(api_key="sk-1234", base_url="http://ai.local")
    with caplog.at_level(logging.DEBUG, logger="connectors.chat"):
        await connector.complete([])
    assert "sk-1234" not in caplog.text
    assert "sk-..." in caplog.text
    assert connector.key_prefix() == "sk-..."
    assert ChatCompletionConnector(api_key="", base_url="http://ai.local").key_prefix() == "..."
