"""Tests for the Contentful transport — httpx.MockTransport stands in for the API."""

from __future__ import annotations

import json

import httpx
import pytest

from spawnsmart.cms.transport import ContentfulTransport


def _transport(handler) -> ContentfulTransport:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ContentfulTransport("space1", "token1", environment="master", http=http)


def _page(items: list[dict], total: int, skip: int = 0) -> httpx.Response:
    return httpx.Response(200, json={"items": items, "total": total, "skip": skip, "limit": 1000})


class TestFetch:
    @pytest.mark.asyncio
    async def test_builds_delivery_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _page([{"sys": {"id": "a"}, "fields": {}}], total=1)

        result = await _transport(handler).fetch("supplier")

        assert result.ok
        assert [e["sys"]["id"] for e in result.entries] == ["a"]
        request = seen[0]
        assert request.url.path == "/spaces/space1/environments/master/entries"
        assert request.url.params["content_type"] == "supplier"
        assert request.headers["Authorization"] == "Bearer token1"

    @pytest.mark.asyncio
    async def test_follows_pagination(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            skip = int(request.url.params["skip"])
            if skip == 0:
                return _page([{"sys": {"id": "1"}}, {"sys": {"id": "2"}}], total=3)
            return _page([{"sys": {"id": "3"}}], total=3, skip=skip)

        result = await _transport(handler).fetch("spore")
        assert [e["sys"]["id"] for e in result.entries] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_passes_query(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _page([], total=0)

        await _transport(handler).fetch("faq", {"order": "fields.order"})
        assert seen[0].url.params["order"] == "fields.order"

    @pytest.mark.asyncio
    async def test_empty_is_not_failure(self) -> None:
        result = await _transport(lambda r: _page([], total=0)).fetch("faq")
        assert result.ok
        assert result.entries == []

    @pytest.mark.asyncio
    async def test_missing_credentials_makes_no_request(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return _page([], total=0)

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = ContentfulTransport(None, "", http=http)

        result = await transport.fetch("supplier")
        assert result.failed
        assert result.error == "missing credentials"
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_with_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "The access token you sent could not be found"})

        result = await _transport(handler).fetch("supplier")
        assert result.failed
        assert result.error.startswith("HTTP 401")
        assert "access token" in result.error

    @pytest.mark.asyncio
    async def test_network_error_is_absorbed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _transport(handler).fetch("supplier")
        assert result.failed
        assert "ConnectError" in result.error

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        result = await _transport(lambda r: httpx.Response(200, text="<html>")).fetch("supplier")
        assert result.failed
        assert "invalid JSON" in result.error

    @pytest.mark.asyncio
    async def test_payload_without_items(self) -> None:
        result = await _transport(lambda r: httpx.Response(200, json={"total": 0})).fetch("supplier")
        assert result.failed
        assert "items" in result.error


class TestFetchEntry:
    @pytest.mark.asyncio
    async def test_single_entry(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/entries/abc")
            return httpx.Response(200, content=json.dumps({"sys": {"id": "abc"}, "fields": {}}))

        result = await _transport(handler).fetch_entry("abc")
        assert result.ok
        assert result.entry["sys"]["id"] == "abc"

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        result = await _transport(lambda r: httpx.Response(404, json={})).fetch_entry("nope")
        assert not result.ok
        assert result.entry is None
        assert result.error == "HTTP 404"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self) -> None:
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: _page([], 0)))
        async with ContentfulTransport("s", "t", http=http):
            pass
        assert not http.is_closed
        await http.aclose()

    def test_configured(self) -> None:
        assert ContentfulTransport("s", "t").configured
        assert not ContentfulTransport("s", None).configured
