"""HTTP fetcher for remote schema documents."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from schemagraph.core.config import FetchConfig
from schemagraph.core.exceptions import RemoteFetchError
from schemagraph.core.interfaces import DocumentFetcher
from schemagraph.core.models import Resolved

logger = logging.getLogger(__name__)


class HttpDocumentFetcher(DocumentFetcher):
    """
    Fetches JSON documents over HTTP(S) with httpx.

    Failures never raise. A malformed URL, a non-success status, a transport
    error and a body that is not JSON all come back as `RemoteFetchError`
    values.
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            config: Fetch configuration (timeout, concurrency, headers)
            client: Pre-configured client to use instead of creating one; it
                is not closed by `aclose`
        """
        self._config = config or FetchConfig()
        self._client = client
        self._owns_client = client is None
        self._semaphore = asyncio.Semaphore(self._config.max_concurrent_fetches)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=self._config.follow_redirects,
                headers=self._config.headers,
            )
        return self._client

    async def fetch(self, address: str) -> Resolved:
        """Fetch the document at an address (trailing slash stripped) and parse it as JSON."""
        url = address.rstrip("/")
        client = self._get_client()

        try:
            request = client.build_request("GET", url)
        except httpx.InvalidURL as e:
            return Resolved({}, RemoteFetchError(f"Invalid URL: {e}", url))

        try:
            async with self._semaphore:
                logger.debug(f"GET {url}")
                response = await client.send(request)
        except httpx.HTTPError as e:
            return Resolved({}, RemoteFetchError(f"Request failed: {e}", url))

        if not response.is_success:
            return Resolved(
                {},
                RemoteFetchError(
                    f"{response.status_code}: {response.reason_phrase}",
                    url,
                    status_code=response.status_code,
                ),
            )

        try:
            document = response.json()
        except ValueError as e:
            return Resolved({}, RemoteFetchError(f"Invalid JSON: {e}", url))

        logger.info(f"Fetched remote document {url}")
        return Resolved(document)

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
