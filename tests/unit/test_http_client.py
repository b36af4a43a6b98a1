# ABOUTME: Unit tests for the async HTTP client abstraction.
# ABOUTME: Tests the HttpClient protocol, LibrarianHttpClient, and error translation.

import httpx
import pytest

from pdflibrarian.metadata.http import (
    HttpClient,
    LibrarianHttpClient,
    MetadataFetchError,
)


class FakeTransport(httpx.AsyncBaseTransport):
    """Fake async transport for httpx that returns canned responses."""

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self._responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            response = self._responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return httpx.Response(200, json={"ok": True})

    @property
    def call_count(self) -> int:
        return len(self.requests)


class TestHttpClientProtocol:
    """Tests for HttpClient protocol compliance."""

    def test_librarian_client_satisfies_protocol(self) -> None:
        client = LibrarianHttpClient(transport=FakeTransport())
        assert isinstance(client, HttpClient)


class TestLibrarianHttpClient:
    """Tests for LibrarianHttpClient."""

    @pytest.mark.asyncio
    async def test_get_json(self) -> None:
        transport = FakeTransport()
        async with LibrarianHttpClient(transport=transport) as client:
            result = await client.get_json("https://example.com/api", params={"q": "dune"})
        assert result == {"ok": True}
        assert transport.requests[0].url.params["q"] == "dune"

    @pytest.mark.asyncio
    async def test_user_agent_header(self) -> None:
        transport = FakeTransport()
        async with LibrarianHttpClient(transport=transport) as client:
            await client.get_json("https://example.com/api")
        assert transport.requests[0].headers["user-agent"].startswith("pdflibrarian/")

    @pytest.mark.asyncio
    async def test_per_request_headers_override(self) -> None:
        transport = FakeTransport([httpx.Response(200, text="<html></html>")])
        async with LibrarianHttpClient(transport=transport) as client:
            body = await client.get_text(
                "https://example.com/page", headers={"User-Agent": "Mozilla/5.0"}
            )
        assert body == "<html></html>"
        assert transport.requests[0].headers["user-agent"] == "Mozilla/5.0"

    @pytest.mark.asyncio
    async def test_http_error_status_raises(self) -> None:
        transport = FakeTransport([httpx.Response(503)])
        async with LibrarianHttpClient(transport=transport) as client:
            with pytest.raises(MetadataFetchError, match="HTTP 503"):
                await client.get_json("https://example.com/api")

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self) -> None:
        """A failed request is attempted exactly once."""
        transport = FakeTransport([httpx.Response(500), httpx.Response(200, json={})])
        async with LibrarianHttpClient(transport=transport) as client:
            with pytest.raises(MetadataFetchError):
                await client.get_json("https://example.com/api")
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        transport = FakeTransport([httpx.ConnectError("connection refused")])
        async with LibrarianHttpClient(transport=transport) as client:
            with pytest.raises(MetadataFetchError, match="Request failed"):
                await client.get_text("https://example.com/api")

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        transport = FakeTransport([httpx.ReadTimeout("timed out")])
        async with LibrarianHttpClient(transport=transport) as client:
            with pytest.raises(MetadataFetchError):
                await client.get_json("https://example.com/api")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        transport = FakeTransport([httpx.Response(200, text="<html>not json</html>")])
        async with LibrarianHttpClient(transport=transport) as client:
            with pytest.raises(MetadataFetchError, match="Invalid JSON"):
                await client.get_json("https://example.com/api")

    @pytest.mark.asyncio
    async def test_deeply_nested_json_raises_fetch_error(self) -> None:
        """A body nested past the decoder's recursion limit is just invalid JSON."""
        body = "[" * 100_000 + "]" * 100_000
        transport = FakeTransport([httpx.Response(200, text=body)])
        async with LibrarianHttpClient(transport=transport) as client:
            with pytest.raises(MetadataFetchError, match="Invalid JSON"):
                await client.get_json("https://example.com/api")
