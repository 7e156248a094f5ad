"""Tests for the shared HTTP transport."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from helpers import make_transport
from watchlistarr.transport import (
    HttpStatusError,
    HttpTransport,
    ResponseDecodeError,
    TransportError,
    sanitize_url,
)


class TestSanitizeUrl:
    def test_masks_api_key(self) -> None:
        url = "http://radarr:7878/api/v3/movie?apikey=abc123&term=Dune"
        assert sanitize_url(url) == "http://radarr:7878/api/v3/movie?apikey=***&term=Dune"

    def test_masks_plex_token(self) -> None:
        assert sanitize_url("https://plex.tv/x?X-Plex-Token=tok") == "https://plex.tv/x?X-Plex-Token=***"

    def test_leaves_plain_urls_untouched(self) -> None:
        assert sanitize_url("http://sonarr:8989/api/v3/tag") == "http://sonarr:8989/api/v3/tag"


class TestHttpTransport:
    def test_get_json_decodes_body(self) -> None:
        transport = make_transport(lambda request: httpx.Response(200, json=[{"id": 1}]))
        assert asyncio.run(transport.get_json("http://radarr/api/v3/tag")) == [{"id": 1}]

    def test_get_text_returns_raw_body(self) -> None:
        transport = make_transport(lambda request: httpx.Response(200, text="<MediaContainer/>"))
        assert asyncio.run(transport.get_text("https://plex.example")) == "<MediaContainer/>"

    def test_non_success_status_raises_with_body(self) -> None:
        transport = make_transport(lambda request: httpx.Response(503, text="maintenance"))
        with pytest.raises(HttpStatusError) as excinfo:
            asyncio.run(transport.get_json("http://radarr/api/v3/movie"))
        assert excinfo.value.status_code == 503
        assert excinfo.value.body == "maintenance"

    def test_invalid_json_raises_decode_error(self) -> None:
        transport = make_transport(lambda request: httpx.Response(200, text="<html>login</html>"))
        with pytest.raises(ResponseDecodeError):
            asyncio.run(transport.get_json("http://radarr/api/v3/movie"))

    def test_connection_error_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_transport(handler)
        with pytest.raises(TransportError) as excinfo:
            asyncio.run(transport.get_json("http://radarr/api/v3/movie"))
        assert not isinstance(excinfo.value, HttpStatusError)
        assert excinfo.value.status_code is None

    def test_timeout_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport = make_transport(handler)
        with pytest.raises(TransportError, match="timed out"):
            asyncio.run(transport.get_text("https://plex.example"))

    def test_error_message_does_not_leak_api_key(self) -> None:
        transport = make_transport(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(HttpStatusError) as excinfo:
            asyncio.run(transport.get_json("http://radarr/api/v3/movie", params={"apikey": "hunter2"}))
        assert "hunter2" not in str(excinfo.value)

    def test_post_json_sends_body(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = request.content
            return httpx.Response(201, json={"id": 9})

        transport = make_transport(handler)
        result = asyncio.run(transport.post_json("http://radarr/api/v3/movie", {"title": "Dune"}))
        assert result == {"id": 9}
        assert seen["method"] == "POST"
        assert b'"title"' in seen["body"]

    def test_post_json_allows_empty_body(self) -> None:
        transport = make_transport(lambda request: httpx.Response(204))
        assert asyncio.run(transport.post_json("http://radarr/api/v3/command", {})) is None

    def test_delete_issues_delete_request(self) -> None:
        methods = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            return httpx.Response(200)

        transport = make_transport(handler)
        asyncio.run(transport.delete("http://radarr/api/v3/movie/5"))
        assert methods == ["DELETE"]

    def test_injected_client_is_not_closed(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        transport = HttpTransport(client=client)

        async def scenario() -> None:
            async with transport:
                pass

        asyncio.run(scenario())
        assert client.is_closed is False
