"""
Page extraction service backed by the Jina Reader endpoint.
No HTML is parsed locally; the reader returns the page as plain text.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from config import Config
from utils.constants import Endpoints
from utils.errors import DomainError, TransportError
from utils.logger import app_logger


class ReaderService:
    """
    Fetches the extracted text content of a web page.

    Without an injected client each fetch opens and closes its own.
    """

    HEADERS = {
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        "Accept": "text/plain"
    }

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, timeout: float = Config.READER_TIMEOUT):
        self._http_client = http_client
        self._owned_client: httpx.AsyncClient | None = None
        self.timeout = timeout

    async def __aenter__(self) -> "ReaderService":
        if self._http_client is None and self._owned_client is None:
            self._owned_client = self._open_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client opened by __aenter__, if any."""
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None

    def _open_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=Config.MAX_REDIRECTS,
            http2=True
        )

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        client = self._http_client or self._owned_client
        if client is not None:
            yield client
            return

        async with self._open_client() as client:
            yield client

    async def fetch(self, url: str) -> str:
        """
        Fetch the text content of a page.

        Args:
            url: Page URL to extract

        Returns:
            Extracted page text, stripped

        Raises:
            DomainError: If url is empty
            TransportError: On connection errors, timeouts or non-2xx status
        """
        url = url.strip()
        if not url:
            raise DomainError("A URL is required to fetch page content")

        reader_url = Config.reader_url(url)
        app_logger.info(f"Fetching page content via reader: {url}")

        try:
            async with self._client() as client:
                response = await client.get(reader_url, headers=self.HEADERS, timeout=self.timeout)
        except httpx.TimeoutException as e:
            app_logger.error(f"Reader timed out for {url}")
            raise TransportError(Endpoints.READER, f"timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            app_logger.error(f"Reader request failed for {url}: {e}")
            raise TransportError(Endpoints.READER, str(e) or type(e).__name__) from e

        if not response.is_success:
            app_logger.error(f"Reader failed with status {response.status_code} for {url}")
            raise TransportError(Endpoints.READER, f"status {response.status_code}", response.status_code)

        content = response.text.strip()
        app_logger.info(f"Fetched {len(content)} chars from {url}")
        return content
