from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from contract_harness.contract.client import ApiClient
from contract_harness.contract.config import HarnessConfig

CONFIG = HarnessConfig(server_url="http://calendar.test/")


def test_get_returns_parsed_json():
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "http://calendar.test/api/events"
        assert request.headers["accept"] == "application/json"
        return httpx.Response(200, json={"events": [], "message": "ok"})

    async def run():
        async with ApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            return await client.get("/api/events")

    response = asyncio.run(run())
    assert response.status == 200
    assert response.data == {"events": [], "message": "ok"}
    assert response.error is False
    assert response.headers["content-type"] == "application/json"


def test_post_sends_json_body():
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "1"})

    async def run():
        async with ApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            return await client.post("/api/events", {"title": "Standup"})

    response = asyncio.run(run())
    assert captured == {"method": "POST", "body": {"title": "Standup"}}
    assert response.status == 201


def test_error_statuses_are_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "Event not found"})

    async def run():
        async with ApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            return await client.delete("/api/events/missing")

    response = asyncio.run(run())
    assert response.error is True
    assert response.status == 404
    assert response.data == {"error": "Event not found"}


def test_non_json_and_empty_bodies():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/text":
            return httpx.Response(200, text="plain")
        return httpx.Response(204)

    async def run():
        async with ApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            return await client.get("/text"), await client.get("/empty")

    text, empty = asyncio.run(run())
    assert text.data == "plain"
    assert empty.data is None


def test_transport_failures_propagate():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    async def run():
        async with ApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            await client.get("/health")

    with pytest.raises(httpx.ConnectError):
        asyncio.run(run())


def test_responses_are_logged(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500 if request.url.path == "/bad" else 200, json={})

    async def run():
        async with ApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            await client.get("/health")
            await client.get("/bad")

    with caplog.at_level("INFO", logger="contract_harness.contract.client"):
        asyncio.run(run())
    assert "ok GET http://calendar.test/health -> 200" in caplog.text
    assert "fail GET http://calendar.test/bad -> 500" in caplog.text


def test_redirects_are_followed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/events":
            return httpx.Response(308, headers={"location": "/api/events/"})
        return httpx.Response(200, json={"events": [], "message": "ok"})

    async def run():
        async with ApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            return await client.get("/api/events")

    response = asyncio.run(run())
    assert response.status == 200
    assert response.data["events"] == []
