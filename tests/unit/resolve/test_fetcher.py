"""Tests for the HTTP document fetcher."""

import asyncio
from typing import List

import httpx

from schemagraph.core.config import FetchConfig
from schemagraph.core.exceptions import RemoteFetchError
from schemagraph.resolve.fetcher import HttpDocumentFetcher


def fetch_with(handler, addresses: List[str]):
    """Run fetch_all against a mock transport."""

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            fetcher = HttpDocumentFetcher(FetchConfig(max_concurrent_fetches=2), client=client)
            results = await fetcher.fetch_all(addresses)
            await fetcher.aclose()
            assert not client.is_closed
            return results

    return asyncio.run(run())


class TestHttpDocumentFetcher:
    """Test fetch results and failures."""

    def test_fetch_json(self) -> None:
        """Test a JSON body is parsed."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"type": "string"})

        results = fetch_with(handler, ["http://example.com/a.json"])
        assert results["http://example.com/a.json"].value == {"type": "string"}
        assert results["http://example.com/a.json"].ok

    def test_trailing_slash_is_stripped(self) -> None:
        """Test the requested URL has no trailing slash."""
        seen: List[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={})

        fetch_with(handler, ["http://example.com/schema/"])
        assert seen == ["http://example.com/schema"]

    def test_http_error_status(self) -> None:
        """Test a non-success status becomes an error value."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        value, error = fetch_with(handler, ["http://example.com/a.json"])["http://example.com/a.json"]
        assert value == {}
        assert isinstance(error, RemoteFetchError)
        assert error.message == "404: Not Found"
        assert error.status_code == 404

    def test_invalid_json(self) -> None:
        """Test a body that is not JSON becomes an error value."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html></html>")

        _, error = fetch_with(handler, ["http://example.com/a.json"])["http://example.com/a.json"]
        assert error.message.startswith("Invalid JSON")

    def test_transport_error(self) -> None:
        """Test a transport failure becomes an error value."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        _, error = fetch_with(handler, ["http://example.com/a.json"])["http://example.com/a.json"]
        assert error.message.startswith("Request failed")
        assert error.address == "http://example.com/a.json"

    def test_fetch_all_preserves_addresses(self) -> None:
        """Test each address maps to its own result."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"title": request.url.path})

        results = fetch_with(handler, ["http://example.com/a.json", "http://example.com/b.json"])
        assert results["http://example.com/a.json"].value == {"title": "/a.json"}
        assert results["http://example.com/b.json"].value == {"title": "/b.json"}

    def test_owned_client_is_closed(self) -> None:
        """Test a fetcher closes the client it created."""

        async def run() -> HttpDocumentFetcher:
            async with HttpDocumentFetcher() as fetcher:
                fetcher._get_client()
            return fetcher

        fetcher = asyncio.run(run())
        assert fetcher._client is None

    def test_malformed_url(self) -> None:
        """Test a URL httpx cannot parse becomes an error value."""
        requested: List[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={})

        results = fetch_with(handler, ["http://host:port/s.json", "http://[::1/x"])

        for address in ("http://host:port/s.json", "http://[::1/x"):
            value, error = results[address]
            assert value == {}
            assert isinstance(error, RemoteFetchError)
            assert error.message.startswith("Invalid URL")
        assert requested == []
